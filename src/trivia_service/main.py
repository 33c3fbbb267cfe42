"""
FastAPI application entry point for the regional trivia service.
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from trivia_service.api.dependencies import get_llm_client, get_rate_limiter
from trivia_service.api.error_handlers import EXCEPTION_HANDLERS
from trivia_service.api.middleware import RequestTracingMiddleware
from trivia_service.api.routes_admin import router as admin_router
from trivia_service.api.routes_health import router as health_router
from trivia_service.api.routes_trivia import router as trivia_router
from trivia_service.config import settings
from trivia_service.logging_config import configure_logging
from trivia_service.persistence.redis_client import RedisClient

# Configure structured logging before any other imports
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the rate-limiter sweeper; release pooled connections on shutdown."""
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        region=settings.REGION_NAME,
        models=[config.name for config in settings.MODEL_CONFIGS],
        analytics_enabled=settings.ANALYTICS_ENABLED,
        keyword_log_dispatch=settings.KEYWORD_LOG_DISPATCH,
    )

    if not settings.api_key:
        logger.error("GEMINI_API_KEY is not set; trivia requests will fail with config_error")
    if not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD is not set; admin login is disabled")

    templates_dir = Path(settings.PROMPT_TEMPLATES_DIR)
    if not templates_dir.exists():
        logger.error("Prompt templates directory not found", path=str(templates_dir))

    sweeper = asyncio.create_task(
        get_rate_limiter().run_sweeper(settings.RATE_LIMIT_SWEEP_INTERVAL_SECONDS)
    )

    logger.info("Application startup complete")
    try:
        yield
    finally:
        logger.info("Application shutdown")
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
        await get_llm_client().close()
        await RedisClient.close_async_pool()
        logger.info("Application shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Regional Trivia Service",
    description="Keyword-to-trivia generation with length-checked retries across Gemini models",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Request tracing middleware (request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

# Register exception handlers
for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

# Include routers
app.include_router(trivia_router, tags=["trivia"])
app.include_router(admin_router)
app.include_router(health_router)


# Prometheus metrics instrumentation
if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "mode": settings.TRIVIA_MODE,
        "region": settings.REGION_NAME,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "trivia_service.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
    )
