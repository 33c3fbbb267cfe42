"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to HTTP status codes and the error envelope
{"error": {"code", "message", "details"?}}.
"""

import math

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from trivia_service.api.assembler import build_error_body
from trivia_service.exceptions import InvalidKeywordError, RateLimitedError, TriviaServiceError
from trivia_service.retry.exceptions import RetryExhausted

logger = structlog.get_logger(__name__)

SERVER_ERROR_MESSAGE = "サーバーエラーが発生しました。"
INVALID_REQUEST_MESSAGE = "リクエストの形式が正しくありません。"


async def service_error_handler(request: Request, exc: TriviaServiceError) -> JSONResponse:
    """
    Handle API-facing service errors (config, validation).

    Status code and error code come from the exception class.

    Args:
        request: FastAPI request
        exc: TriviaServiceError instance

    Returns:
        JSON error response
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request rejected",
        error_code=exc.code,
        status_code=exc.status_code,
        message=exc.message,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_body(exc.code, exc.message, exc.details),
    )


async def rate_limited_handler(request: Request, exc: RateLimitedError) -> JSONResponse:
    """
    Handle rate-limit rejections.

    Maps to 429 Too Many Requests with a Retry-After header (whole seconds,
    at least 1).
    """
    retry_after = max(1, math.ceil(exc.retry_after))

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=build_error_body(exc.code, exc.message),
        headers={"Retry-After": str(retry_after)},
    )


async def retry_exhausted_handler(request: Request, exc: RetryExhausted) -> JSONResponse:
    """
    Handle retry exhausted errors.

    Maps to 500 with the generation_failed code. Logs the complete retry
    history; the caller only sees the last failure reason.

    Args:
        request: FastAPI request
        exc: RetryExhausted instance

    Returns:
        JSON error response
    """
    metadata = exc.retry_metadata
    logger.error(
        "Retry exhausted",
        keyword=exc.request.keyword,
        models_tried=metadata.models_tried,
        models_skipped=metadata.models_skipped,
        failures=[{"model": f.model, "reason": f.reason} for f in metadata.failures],
        correction_attempts=metadata.correction_attempts,
        total_latency_ms=metadata.total_latency_ms,
        last_error=exc.last_error,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_body(exc.code, exc.message, exc.details),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle malformed request bodies and query parameters.

    Maps to 400 Bad Request with the validation_error code.
    """
    logger.warning("Invalid request format", errors=exc.errors())

    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    details = f"{location}: {first.get('msg')}" if first else None

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=build_error_body(InvalidKeywordError.code, INVALID_REQUEST_MESSAGE, details),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 with the generation_failed code and a generic message.
    """
    logger.exception("Unexpected error", error_type=type(exc).__name__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_body(TriviaServiceError.code, SERVER_ERROR_MESSAGE),
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    RateLimitedError: rate_limited_handler,
    RetryExhausted: retry_exhausted_handler,
    TriviaServiceError: service_error_handler,
    RequestValidationError: request_validation_error_handler,
    Exception: generic_error_handler,
}
