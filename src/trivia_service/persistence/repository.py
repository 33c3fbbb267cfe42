"""
Repository pattern for Redis-based keyword analytics.

Storage Strategy:
- All-time ranking: Sorted set "keywords:all" (score = request count)
- Daily ranking: Sorted set "keywords:daily:{YYYY-MM-DD}" (expires after 31 days)
- Genre ranking: Sorted set "keywords:genre:{genre}"
- Daily totals: Counter "stats:daily:{YYYY-MM-DD}" (expires after 31 days)
- Keyword -> genre: Hash "keywords:genres"

Writes go through one MULTI/EXEC pipeline of atomic increments, so
concurrent requests never lose counts. Failures are logged and swallowed:
analytics must never break trivia generation.
"""

import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo

import structlog
from redis import Redis
from redis.asyncio import Redis as AsyncRedis

from trivia_service.analytics.genre import classify_genre, list_genres
from trivia_service.config import Settings
from trivia_service.models.enums import Genre, RankingPeriod
from trivia_service.models.output_models import DailyCount, RankedKeyword

logger = structlog.get_logger(__name__)


class _KeywordKeys:
    """Key layout and date handling shared by the sync and async repositories."""

    # Redis keys and prefixes
    ALL_KEY = "keywords:all"
    DAILY_PREFIX = "keywords:daily:"
    GENRE_PREFIX = "keywords:genre:"
    COUNTER_PREFIX = "stats:daily:"
    GENRES_HASH = "keywords:genres"
    TMP_PREFIX = "tmp:ranking:7days:"

    SEVEN_DAYS = 7
    TMP_TTL_SECONDS = 60

    def __init__(self, settings: Settings, now: Optional[Callable[[], datetime]] = None):
        self.settings = settings
        self.tz = ZoneInfo(settings.ANALYTICS_TIMEZONE)
        self.daily_ttl = settings.DAILY_KEY_TTL_SECONDS
        self._now = now or (lambda: datetime.now(self.tz))

    def today(self) -> str:
        return self._now().strftime("%Y-%m-%d")

    def recent_dates(self, days: int) -> list[str]:
        """The last `days` dates, newest first, today included."""
        current = self._now()
        return [(current - timedelta(days=offset)).strftime("%Y-%m-%d") for offset in range(days)]

    def ranking_key(self, period: RankingPeriod, genre: Optional[str]) -> Optional[str]:
        """Single sorted-set key for a ranking, or None when a union is needed."""
        if genre:
            return f"{self.GENRE_PREFIX}{genre}"
        if period is RankingPeriod.ALL:
            return self.ALL_KEY
        if period is RankingPeriod.TODAY:
            return f"{self.DAILY_PREFIX}{self.today()}"
        return None

    def seven_day_keys(self) -> list[str]:
        return [f"{self.DAILY_PREFIX}{date}" for date in self.recent_dates(self.SEVEN_DAYS)]

    @staticmethod
    def normalize(keyword: str) -> str:
        return keyword.strip()

    @staticmethod
    def to_ranking(
        scored: list[tuple[str, float]], genres: list[Optional[str]]
    ) -> list[RankedKeyword]:
        return [
            RankedKeyword(keyword=member, count=int(score), genre=genre or Genre.OTHER.value)
            for (member, score), genre in zip(scored, genres)
        ]


class KeywordRepository(_KeywordKeys):
    """
    Synchronous keyword analytics repository.

    Used by the Celery worker. A None redis client means analytics is
    disabled: writes are no-ops and reads return empty lists.
    """

    def __init__(
        self,
        redis_client: Optional[Redis],
        settings: Settings,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize repository.

        Args:
            redis_client: Redis client instance (None disables analytics)
            settings: Application settings
            now: Clock override for tests
        """
        super().__init__(settings, now)
        self.redis = redis_client

    def record_keyword(self, keyword: str) -> bool:
        """
        Count one request for keyword in every ranking.

        Returns:
            True if written, False if skipped or failed
        """
        normalized = self.normalize(keyword)
        if not normalized or self.redis is None:
            return False

        genre = classify_genre(normalized)
        date = self.today()

        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.zincrby(self.ALL_KEY, 1, normalized)
            pipe.zincrby(f"{self.DAILY_PREFIX}{date}", 1, normalized)
            pipe.expire(f"{self.DAILY_PREFIX}{date}", self.daily_ttl)
            pipe.zincrby(f"{self.GENRE_PREFIX}{genre.value}", 1, normalized)
            pipe.incr(f"{self.COUNTER_PREFIX}{date}")
            pipe.expire(f"{self.COUNTER_PREFIX}{date}", self.daily_ttl)
            pipe.hset(self.GENRES_HASH, normalized, genre.value)
            pipe.execute()

            logger.info("Recorded keyword", keyword=normalized, genre=genre.value, date=date)
            return True

        except Exception as e:
            logger.error("Failed to record keyword", keyword=normalized, error=str(e), exc_info=True)
            return False

    def rank_keywords(
        self,
        period: Union[RankingPeriod, str] = RankingPeriod.ALL,
        limit: int = 50,
        genre: Optional[str] = None,
    ) -> list[RankedKeyword]:
        """
        Top keywords for a period, or for a genre (all-time) when genre is given.
        """
        if self.redis is None:
            return []
        period = RankingPeriod(period)

        try:
            key = self.ranking_key(period, genre)
            if key is not None:
                scored = self.redis.zrange(key, 0, limit - 1, desc=True, withscores=True)
            else:
                tmp_key = f"{self.TMP_PREFIX}{uuid.uuid4().hex}"
                pipe = self.redis.pipeline(transaction=True)
                pipe.zunionstore(tmp_key, self.seven_day_keys())
                pipe.expire(tmp_key, self.TMP_TTL_SECONDS)
                pipe.zrange(tmp_key, 0, limit - 1, desc=True, withscores=True)
                pipe.delete(tmp_key)
                scored = pipe.execute()[2]

            if not scored:
                return []

            genres = self.redis.hmget(self.GENRES_HASH, [member for member, _ in scored])
            return self.to_ranking(scored, genres)

        except Exception as e:
            logger.error("Failed to get ranking", period=period.value, genre=genre, error=str(e), exc_info=True)
            return []

    def daily_counts(self, days: int = 30) -> list[DailyCount]:
        """Keyword totals for the last `days` days, oldest first, zero-filled."""
        if self.redis is None:
            return []

        dates = self.recent_dates(days)
        try:
            values = self.redis.mget([f"{self.COUNTER_PREFIX}{date}" for date in dates])
        except Exception as e:
            logger.error("Failed to get daily trend", days=days, error=str(e), exc_info=True)
            return []

        counts = [DailyCount(date=date, count=int(value or 0)) for date, value in zip(dates, values)]
        return list(reversed(counts))

    def list_genres(self) -> list[str]:
        return list_genres()


class AsyncKeywordRepository(_KeywordKeys):
    """
    Async keyword analytics repository.

    Used in FastAPI endpoints and background tasks. Same semantics as
    KeywordRepository.
    """

    def __init__(
        self,
        redis_client: Optional[AsyncRedis],
        settings: Settings,
        now: Optional[Callable[[], datetime]] = None,
    ):
        super().__init__(settings, now)
        self.redis = redis_client

    async def record_keyword(self, keyword: str) -> bool:
        """Count one request for keyword in every ranking."""
        normalized = self.normalize(keyword)
        if not normalized or self.redis is None:
            return False

        genre = classify_genre(normalized)
        date = self.today()

        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.zincrby(self.ALL_KEY, 1, normalized)
            pipe.zincrby(f"{self.DAILY_PREFIX}{date}", 1, normalized)
            pipe.expire(f"{self.DAILY_PREFIX}{date}", self.daily_ttl)
            pipe.zincrby(f"{self.GENRE_PREFIX}{genre.value}", 1, normalized)
            pipe.incr(f"{self.COUNTER_PREFIX}{date}")
            pipe.expire(f"{self.COUNTER_PREFIX}{date}", self.daily_ttl)
            pipe.hset(self.GENRES_HASH, normalized, genre.value)
            await pipe.execute()

            logger.info("Recorded keyword", keyword=normalized, genre=genre.value, date=date)
            return True

        except Exception as e:
            logger.error("Failed to record keyword", keyword=normalized, error=str(e), exc_info=True)
            return False

    async def rank_keywords(
        self,
        period: Union[RankingPeriod, str] = RankingPeriod.ALL,
        limit: int = 50,
        genre: Optional[str] = None,
    ) -> list[RankedKeyword]:
        if self.redis is None:
            return []
        period = RankingPeriod(period)

        try:
            key = self.ranking_key(period, genre)
            if key is not None:
                scored = await self.redis.zrange(key, 0, limit - 1, desc=True, withscores=True)
            else:
                tmp_key = f"{self.TMP_PREFIX}{uuid.uuid4().hex}"
                pipe = self.redis.pipeline(transaction=True)
                pipe.zunionstore(tmp_key, self.seven_day_keys())
                pipe.expire(tmp_key, self.TMP_TTL_SECONDS)
                pipe.zrange(tmp_key, 0, limit - 1, desc=True, withscores=True)
                pipe.delete(tmp_key)
                scored = (await pipe.execute())[2]

            if not scored:
                return []

            genres = await self.redis.hmget(self.GENRES_HASH, [member for member, _ in scored])
            return self.to_ranking(scored, genres)

        except Exception as e:
            logger.error("Failed to get ranking", period=period.value, genre=genre, error=str(e), exc_info=True)
            return []

    async def daily_counts(self, days: int = 30) -> list[DailyCount]:
        if self.redis is None:
            return []

        dates = self.recent_dates(days)
        try:
            values = await self.redis.mget([f"{self.COUNTER_PREFIX}{date}" for date in dates])
        except Exception as e:
            logger.error("Failed to get daily trend", days=days, error=str(e), exc_info=True)
            return []

        counts = [DailyCount(date=date, count=int(value or 0)) for date, value in zip(dates, values)]
        return list(reversed(counts))

    async def list_genres(self) -> list[str]:
        return list_genres()
