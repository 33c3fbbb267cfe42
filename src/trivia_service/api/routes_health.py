"""Service health endpoint."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends

from trivia_service.api.dependencies import get_llm_client, get_settings
from trivia_service.api.models import HealthResponse
from trivia_service.config import Settings
from trivia_service.llm.base_client import BaseLLMClient
from trivia_service.persistence.redis_client import RedisClient

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(get_settings),
    llm_client: BaseLLMClient = Depends(get_llm_client),
) -> HealthResponse:
    """
    Report provider reachability, Redis reachability and config status.

    unhealthy: API key missing (every trivia request would fail)
    degraded: provider or Redis unreachable
    """
    services: dict[str, str] = {}

    if settings.api_key:
        services["config"] = "ok"
        services["gemini"] = "ok" if await llm_client.health_check(settings.api_key) else "unreachable"
    else:
        services["config"] = "missing_api_key"
        services["gemini"] = "not_configured"

    services["redis"] = await RedisClient.ping(settings)

    if services["config"] != "ok":
        overall = "unhealthy"
    elif services["gemini"] != "ok" or services["redis"] not in ("ok", "disabled"):
        overall = "degraded"
    else:
        overall = "healthy"

    if overall != "healthy":
        logger.warning("Health check not healthy", status=overall, services=services)

    return HealthResponse(
        status=overall,
        version=settings.APP_VERSION,
        services=services,
        timestamp=datetime.now(timezone.utc),
    )
