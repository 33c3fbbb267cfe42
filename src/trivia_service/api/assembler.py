"""
Response assembly for the trivia endpoint.

Turns a GenerationOutcome into the success body and any error into the
{"error": {code, message, details?}} envelope. Kept free of FastAPI types
so the error handlers and routes share one definition of both shapes.
"""

from datetime import datetime, timezone
from typing import Optional

from trivia_service.api.models import ErrorDetail, ErrorResponse, TriviaResponse
from trivia_service.models.input_models import GenerationRequest
from trivia_service.retry.metadata import GenerationOutcome


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_success_body(
    outcome: GenerationOutcome,
    request: GenerationRequest,
    mode: str,
    now: Optional[datetime] = None,
) -> dict:
    """
    Build the success payload.

    Args:
        outcome: Accepted (or fallback) generation outcome
        request: Validated request (keyword is echoed back trimmed)
        mode: Trivia mode label
        now: Timestamp override for tests

    Returns:
        {trivia, keyword, mode, model, retries, fallback, createdAt}
    """
    response = TriviaResponse(
        trivia=outcome.text,
        keyword=request.keyword,
        mode=mode,
        model=outcome.model_used,
        retries=outcome.correction_attempts,
        fallback=outcome.is_fallback,
        created_at=utc_timestamp(now),
    )
    return response.model_dump(by_alias=True)


def build_error_body(code: str, message: str, details: Optional[str] = None) -> dict:
    """Build the error envelope, omitting details when there are none."""
    envelope = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    return envelope.model_dump(exclude_none=True)
