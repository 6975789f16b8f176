"""
Shared pytest fixtures and configuration for all tests.

Provides:
- Hypothesis profiles for property-based tests
- fakeredis-backed async clients and stores (one fresh server per test)
"""
import os
from datetime import datetime, timedelta, timezone

import fakeredis
import fakeredis.aioredis
import pytest
from hypothesis import settings, Verbosity, Phase

from scs_redisstore.session.redis_store import RedisStore

# Default profile: balanced for local development
settings.register_profile(
    "default",
    max_examples=100,
    verbosity=Verbosity.normal,
    deadline=None,  # asyncio.run per example is slow to start
    print_blob=True,
)

# CI profile: more thorough testing for continuous integration
settings.register_profile(
    "ci",
    max_examples=200,
    verbosity=Verbosity.verbose,
    deadline=None,
    print_blob=True,
    derandomize=True,
)

# Debug profile: minimal examples for quick debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
    print_blob=True,
    phases=[Phase.explicit, Phase.reuse, Phase.generate],  # Skip shrinking for speed
)

# Fast profile: quick smoke tests
settings.register_profile(
    "fast",
    max_examples=20,
    verbosity=Verbosity.normal,
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


@pytest.fixture()
def fake_server() -> fakeredis.FakeServer:
    """A fresh in-memory Redis server for each test."""
    return fakeredis.FakeServer()


@pytest.fixture()
def fake_redis(fake_server):
    """An async fakeredis client returning bytes, like the production client."""
    return fakeredis.aioredis.FakeRedis(server=fake_server)


@pytest.fixture()
def store(fake_redis) -> RedisStore:
    """A RedisStore with the default prefix backed by fakeredis."""
    return RedisStore(fake_redis)


@pytest.fixture()
def future_expiry() -> datetime:
    """An expiry comfortably in the future."""
    return datetime.now(timezone.utc) + timedelta(minutes=1)
