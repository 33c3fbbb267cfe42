"""
FastAPI dependency injection for the trivia service.

Provides singleton instances of expensive resources (LLM client, prompt
builder, rate limiter) and factory functions for request-scoped
components. Tests replace any of these through app.dependency_overrides.
"""

from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Request

from trivia_service.api.auth import ADMIN_COOKIE_NAME, AdminSessionSigner
from trivia_service.config import Settings, settings
from trivia_service.exceptions import AuthenticationError
from trivia_service.llm.base_client import BaseLLMClient
from trivia_service.llm.gemini_client import GeminiClient
from trivia_service.llm.prompt_builder import PromptBuilder
from trivia_service.persistence.redis_client import RedisClient
from trivia_service.persistence.repository import AsyncKeywordRepository
from trivia_service.ratelimit.limiter import SlidingWindowRateLimiter
from trivia_service.retry.engine import RetryEngine


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_prompt_builder() -> PromptBuilder:
    """
    Get singleton prompt builder.

    Loads Jinja2 templates once and reuses them across requests.
    """
    config = get_settings()
    return PromptBuilder(
        templates_dir=Path(config.PROMPT_TEMPLATES_DIR),
        region=config.REGION_NAME,
        min_chars=config.TRIVIA_MIN_CHARS,
        max_chars=config.TRIVIA_MAX_CHARS,
        example=config.PROMPT_EXAMPLE,
    )


@lru_cache()
def get_llm_client() -> BaseLLMClient:
    """
    Get singleton LLM client with connection pooling.

    Uses @lru_cache to ensure only one client instance is created.
    The client maintains an internal connection pool for efficiency
    and is closed by the application lifespan.

    Returns:
        GeminiClient instance
    """
    config = get_settings()
    return GeminiClient(
        system_prompt=get_prompt_builder().build_system_prompt(),
        base_url=config.GEMINI_BASE_URL,
        timeout=config.GEMINI_TIMEOUT,
        temperature=config.LLM_TEMPERATURE,
    )


@lru_cache()
def get_rate_limiter() -> SlidingWindowRateLimiter:
    """Get the process-wide rate limiter (its sweeper runs in the lifespan)."""
    config = get_settings()
    return SlidingWindowRateLimiter(
        limit=config.RATE_LIMIT_PER_MINUTE,
        window=config.RATE_LIMIT_WINDOW_SECONDS,
    )


@lru_cache()
def get_session_signer() -> AdminSessionSigner:
    """Get the admin session signer."""
    config = get_settings()
    return AdminSessionSigner(
        password=config.ADMIN_PASSWORD,
        secret=config.ADMIN_SESSION_SECRET,
        ttl_seconds=config.ADMIN_SESSION_TTL_SECONDS,
    )


def get_retry_engine(
    llm_client: BaseLLMClient = Depends(get_llm_client),
    prompt_builder: PromptBuilder = Depends(get_prompt_builder),
    settings: Settings = Depends(get_settings),
) -> RetryEngine:
    """
    Create retry engine with injected dependencies.

    Note: RetryEngine is NOT cached because it's lightweight and holds no
    state between requests. All heavy resources are singletons.

    Args:
        llm_client: LLM client singleton (injected)
        prompt_builder: Prompt builder singleton (injected)
        settings: Application settings (injected)

    Returns:
        RetryEngine instance
    """
    return RetryEngine(
        llm_client=llm_client,
        prompt_builder=prompt_builder,
        settings=settings,
    )


def get_async_repository(
    settings: Settings = Depends(get_settings),
) -> AsyncKeywordRepository:
    """
    Create async keyword repository.

    Used in FastAPI endpoints and background tasks (async context).
    The Redis client is None when analytics is disabled.
    """
    redis_client = RedisClient.get_async_client(settings)
    return AsyncKeywordRepository(redis_client, settings)


def require_admin(
    request: Request,
    signer: AdminSessionSigner = Depends(get_session_signer),
) -> None:
    """
    Reject the request unless it carries a valid admin session cookie.

    Raises:
        AuthenticationError: cookie missing, forged or expired
    """
    if not signer.verify(request.cookies.get(ADMIN_COOKIE_NAME)):
        raise AuthenticationError("認証が必要です。")
