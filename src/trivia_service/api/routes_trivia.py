"""
Trivia generation endpoint.

POST /api/trivia runs, in order: config check, rate limiting, keyword
validation, generation with retries, response assembly. The keyword is
recorded for analytics after the response is sent; recording failures
never reach the caller.
"""

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import JSONResponse

from trivia_service.api.assembler import build_success_body
from trivia_service.api.dependencies import (
    get_async_repository,
    get_rate_limiter,
    get_retry_engine,
    get_settings,
)
from trivia_service.api.models import ErrorResponse, TriviaRequest, TriviaResponse
from trivia_service.config import Settings
from trivia_service.exceptions import ConfigurationError, RateLimitedError
from trivia_service.models.input_models import GenerationRequest
from trivia_service.monitoring.metrics import keyword_log_failures_total, rate_limited_total
from trivia_service.persistence.repository import AsyncKeywordRepository
from trivia_service.ratelimit.limiter import SlidingWindowRateLimiter, client_key_from_headers
from trivia_service.retry.engine import RetryEngine

logger = structlog.get_logger(__name__)

CONFIG_ERROR_MESSAGE = "APIキーが設定されていません。"
RATE_LIMITED_MESSAGE = "ちょっと落ち着いて、もう一口。（1分あたりの上限に達しました）"

router = APIRouter()


async def record_keyword(
    keyword: str,
    repository: AsyncKeywordRepository,
    settings: Settings,
) -> None:
    """
    Record a keyword request, inline or through the Celery worker.

    Runs as a background task after the response. Never raises.
    """
    dispatch = settings.KEYWORD_LOG_DISPATCH
    try:
        if dispatch == "celery":
            # Imported here so the inline mode never needs a broker configured
            from trivia_service.tasks.keyword_tasks import record_keyword_task

            record_keyword_task.delay(keyword)
            return

        recorded = await repository.record_keyword(keyword)
        if not recorded and repository.redis is not None:
            keyword_log_failures_total.labels(dispatch=dispatch).inc()

    except Exception as e:
        keyword_log_failures_total.labels(dispatch=dispatch).inc()
        logger.error("Keyword logging failed", keyword=keyword, dispatch=dispatch, error=str(e))


@router.post(
    "/api/trivia",
    response_model=TriviaResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate regional trivia for a keyword",
    description="""
    Generate one short trivia sentence tying the keyword to the configured
    region. Tries each model configuration in priority order with up to
    MAX_CORRECTIONS length-correction turns each, and returns a best-effort
    fallback (fallback=true) when no answer meets the length rule.
    """,
    responses={
        200: {"description": "Trivia generated"},
        400: {"model": ErrorResponse, "description": "Empty, too long, or malformed keyword"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded (see Retry-After)"},
        500: {"model": ErrorResponse, "description": "API key missing or generation failed"},
    },
)
async def generate_trivia(
    body: TriviaRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
    rate_limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
    retry_engine: RetryEngine = Depends(get_retry_engine),
    repository: AsyncKeywordRepository = Depends(get_async_repository),
) -> JSONResponse:
    """
    Generate trivia for a keyword.

    Raises:
        ConfigurationError: GEMINI_API_KEY is not set
        RateLimitedError: Client exceeded RATE_LIMIT_PER_MINUTE
        InvalidKeywordError: Keyword empty or too long after trimming
        RetryExhausted: No model produced a usable answer
    """
    if not settings.api_key:
        raise ConfigurationError(CONFIG_ERROR_MESSAGE)

    client_key = client_key_from_headers(
        request.headers, request.client.host if request.client else None
    )
    if not rate_limiter.admit(client_key):
        rate_limited_total.inc()
        logger.warning("Rate limit exceeded", client=client_key)
        raise RateLimitedError(RATE_LIMITED_MESSAGE, retry_after=rate_limiter.retry_after(client_key))

    generation_request = GenerationRequest.from_raw(body.keyword, max_length=settings.KEYWORD_MAX_LENGTH)

    outcome = await retry_engine.execute_with_retry(generation_request)

    logger.info(
        "Trivia generated",
        keyword=generation_request.keyword,
        model=outcome.model_used,
        length=outcome.length,
        retries=outcome.correction_attempts,
        fallback=outcome.is_fallback,
    )

    background_tasks.add_task(record_keyword, generation_request.keyword, repository, settings)

    return JSONResponse(
        content=build_success_body(outcome, generation_request, settings.TRIVIA_MODE),
    )
