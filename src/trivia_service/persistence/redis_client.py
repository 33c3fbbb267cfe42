"""
Redis client with connection pooling for the keyword analytics store.

Uses redis-py with connection pooling for efficient resource usage.
Supports both sync (Celery worker) and async (FastAPI) operations.
Analytics is best-effort, so socket timeouts are kept short: a slow Redis
must not hold a request task for long.
"""

from typing import Optional

import structlog
from redis import ConnectionPool, Redis
from redis.asyncio import ConnectionPool as AsyncConnectionPool
from redis.asyncio import Redis as AsyncRedis

from trivia_service.config import Settings

logger = structlog.get_logger(__name__)

SOCKET_TIMEOUT_SECONDS = 2


class RedisClient:
    """
    Redis client wrapper with process-wide connection pools.

    Returns None from the getters when analytics is disabled, so callers
    can treat "no store" uniformly.
    """

    _sync_pool: Optional[ConnectionPool] = None
    _async_pool: Optional[AsyncConnectionPool] = None

    @classmethod
    def get_sync_client(cls, settings: Settings) -> Optional[Redis]:
        """
        Get synchronous Redis client, or None if analytics is disabled.

        Args:
            settings: Application settings
        """
        if not settings.ANALYTICS_ENABLED or not settings.REDIS_URL:
            return None

        if cls._sync_pool is None:
            cls._sync_pool = ConnectionPool.from_url(
                settings.REDIS_URL,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                decode_responses=True,  # Auto-decode bytes to str
                socket_timeout=SOCKET_TIMEOUT_SECONDS,
                socket_connect_timeout=SOCKET_TIMEOUT_SECONDS,
            )
            logger.info("Initialized Redis sync connection pool")

        return Redis(connection_pool=cls._sync_pool)

    @classmethod
    def get_async_client(cls, settings: Settings) -> Optional[AsyncRedis]:
        """
        Get asynchronous Redis client, or None if analytics is disabled.

        Args:
            settings: Application settings
        """
        if not settings.ANALYTICS_ENABLED or not settings.REDIS_URL:
            return None

        if cls._async_pool is None:
            cls._async_pool = AsyncConnectionPool.from_url(
                settings.REDIS_URL,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                decode_responses=True,
                socket_timeout=SOCKET_TIMEOUT_SECONDS,
                socket_connect_timeout=SOCKET_TIMEOUT_SECONDS,
            )
            logger.info("Initialized Redis async connection pool")

        return AsyncRedis(connection_pool=cls._async_pool)

    @classmethod
    async def ping(cls, settings: Settings) -> str:
        """
        Report store status for the health endpoint.

        Returns "ok", "disabled" or "unreachable (<ErrorType>)". Never raises.
        """
        client = cls.get_async_client(settings)
        if client is None:
            return "disabled"
        try:
            await client.ping()
            return "ok"
        except Exception as e:
            logger.warning("Redis ping failed", error=str(e))
            return f"unreachable ({type(e).__name__})"

    @classmethod
    async def close_async_pool(cls):
        """Close async connection pool (cleanup on shutdown)."""
        if cls._async_pool is not None:
            await cls._async_pool.disconnect()
            cls._async_pool = None
            logger.info("Closed Redis async connection pool")

    @classmethod
    def close_sync_pool(cls):
        """Close sync connection pool (cleanup on shutdown)."""
        if cls._sync_pool is not None:
            cls._sync_pool.disconnect()
            cls._sync_pool = None
            logger.info("Closed Redis sync connection pool")
