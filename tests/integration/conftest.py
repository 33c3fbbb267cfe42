"""Integration test fixtures (service checks and prerequisites).

Provides fixtures for checking if external services are available.
Integration tests are skipped if required services are not running.
"""

import os

import pytest
from redis import Redis

REDIS_TEST_URL = os.environ.get("REDIS_TEST_URL", "redis://localhost:6379/15")


@pytest.fixture(scope="session")
def check_redis():
    """Check if Redis is available.

    Skips tests if Redis is not reachable. Uses database 15 by default so
    a developer's local data is never touched.
    """
    try:
        client = Redis.from_url(REDIS_TEST_URL, socket_connect_timeout=1)
        client.ping()
        client.close()
    except Exception as e:
        pytest.skip(f"Redis not available: {e}")


@pytest.fixture
def redis_settings(test_settings, check_redis):
    """Settings pointing at the test Redis database with analytics on."""
    test_settings.REDIS_URL = REDIS_TEST_URL
    test_settings.ANALYTICS_ENABLED = True
    return test_settings


@pytest.fixture
def real_redis(redis_settings):
    """Sync Redis client on a flushed test database."""
    client = Redis.from_url(redis_settings.REDIS_URL, decode_responses=True)
    client.flushdb()
    yield client
    client.flushdb()
    client.close()
