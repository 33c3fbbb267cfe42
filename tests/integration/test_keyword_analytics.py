"""
Integration tests for keyword analytics against a real Redis.
"""

import pytest
from redis.asyncio import Redis as AsyncRedis

from trivia_service.persistence.repository import AsyncKeywordRepository, KeywordRepository

pytestmark = pytest.mark.integration


def test_recorded_keyword_appears_in_today_ranking(real_redis, redis_settings):
    repository = KeywordRepository(real_redis, redis_settings)

    assert repository.record_keyword("焼きカレー") is True
    assert repository.record_keyword(" 焼きカレー ") is True
    assert repository.record_keyword("小倉城") is True

    ranking = repository.rank_keywords("today")

    assert [(row.keyword, row.count, row.genre) for row in ranking] == [
        ("焼きカレー", 2, "食べ物"),
        ("小倉城", 1, "歴史"),
    ]
    assert repository.daily_counts(1)[0].count == 3


def test_seven_day_ranking_cleans_up_temp_key(real_redis, redis_settings):
    repository = KeywordRepository(real_redis, redis_settings)
    repository.record_keyword("門司港")

    ranking = repository.rank_keywords("7days")

    assert ranking[0].keyword == "門司港"
    assert real_redis.keys("tmp:ranking:*") == []


def test_genre_ranking_and_ttl(real_redis, redis_settings):
    repository = KeywordRepository(real_redis, redis_settings)
    repository.record_keyword("ラーメン")
    repository.record_keyword("製鉄所")

    food = repository.rank_keywords("all", genre="食べ物")

    assert [row.keyword for row in food] == ["ラーメン"]
    daily_key = f"keywords:daily:{repository.today()}"
    assert 0 < real_redis.ttl(daily_key) <= redis_settings.DAILY_KEY_TTL_SECONDS


@pytest.mark.asyncio
async def test_async_round_trip(real_redis, redis_settings):
    client = AsyncRedis.from_url(redis_settings.REDIS_URL, decode_responses=True)
    repository = AsyncKeywordRepository(client, redis_settings)
    try:
        assert await repository.record_keyword("皿倉山") is True

        ranking = await repository.rank_keywords("today")
        trend = await repository.daily_counts(30)
    finally:
        await client.aclose()

    assert ranking[0].keyword == "皿倉山"
    assert ranking[0].count >= 1
    assert len(trend) == 30
    assert trend[-1].count == 1
