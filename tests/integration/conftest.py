"""
Integration test configuration and fixtures.

These tests run against a real Redis server. They are skipped unless
SCS_REDIS_TEST_DSN is set to the server address (``host:port``);
SCS_REDIS_TEST_PASS supplies the password if one is required.

The test database is flushed before every test. Never point these tests
at a Redis that holds data you care about.
"""
import os

import pytest
import pytest_asyncio
import redis.asyncio as redis

from scs_redisstore.session.redis_store import RedisStore


def _parse_dsn(dsn: str) -> tuple[str, int]:
    host, _, port = dsn.rpartition(":")
    if not host:
        return dsn, 6379
    return host, int(port)


@pytest_asyncio.fixture
async def live_redis():
    """A Redis client for the test server with an empty database."""
    dsn = os.getenv("SCS_REDIS_TEST_DSN")
    if not dsn:
        pytest.skip("SCS_REDIS_TEST_DSN not set")

    host, port = _parse_dsn(dsn)
    client = redis.Redis(
        host=host,
        port=port,
        password=os.getenv("SCS_REDIS_TEST_PASS") or None,
        db=0,
    )
    await client.flushdb()
    yield client
    await client.aclose()


@pytest.fixture
def live_store(live_redis) -> RedisStore:
    return RedisStore(live_redis)
