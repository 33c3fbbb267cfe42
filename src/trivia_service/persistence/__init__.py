"""
Redis persistence layer for keyword analytics.

- redis_client.py: Redis connection pooling for sync and async contexts
- repository.py: Repository pattern for keyword counts and rankings

Storage Strategy:
- Rankings stored as sorted sets (all-time, per day, per genre)
- Daily totals stored as counters with a 31-day TTL
- Keyword -> genre mapping stored in one hash
"""

from trivia_service.persistence.redis_client import RedisClient
from trivia_service.persistence.repository import (
    AsyncKeywordRepository,
    KeywordRepository,
)

__all__ = [
    "RedisClient",
    "KeywordRepository",
    "AsyncKeywordRepository",
]
