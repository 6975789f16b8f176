"""
Factories for Redis clients and session stores.

The store never owns its client. create_redis_client() is a convenience for
applications that do not already hold one; whoever calls it is responsible
for closing the client (``await client.aclose()``) at shutdown.
"""

import logging
from typing import Any, Optional

import redis.asyncio as redis

from scs_redisstore.config.settings import Settings, get_settings
from scs_redisstore.session.redis_store import DEFAULT_PREFIX, RedisStore

logger = logging.getLogger(__name__)


def create_redis_client(settings: Optional[Settings] = None) -> redis.Redis:
    """
    Create an async Redis client configured from settings.

    Configured with:
    - decode_responses=False so session data round-trips as bytes
    - socket connect/read timeouts from ``socket_timeout_seconds``
    - no client-side retries; failures reach the caller immediately

    Args:
        settings: Settings to use. Defaults to get_settings().

    Returns:
        redis.asyncio.Redis client instance (connections are opened lazily)
    """
    settings = settings or get_settings()

    client = redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
        socket_timeout=settings.socket_timeout_seconds,
        socket_connect_timeout=settings.socket_timeout_seconds,
    )
    logger.info("Redis client created", extra={"extra_data": {
        "environment": settings.environment.value,
        "socket_timeout_seconds": settings.socket_timeout_seconds,
    }})
    return client


def new_store(client: Any, prefix: Optional[str] = None) -> RedisStore:
    """
    Create a RedisStore around an existing client.

    Args:
        client: Borrowed ``redis.asyncio.Redis`` client.
        prefix: Key prefix. Defaults to "scs:session:" when omitted.
    """
    return RedisStore(client, prefix=DEFAULT_PREFIX if prefix is None else prefix)


def new_store_from_settings(
    client: Any,
    settings: Optional[Settings] = None
) -> RedisStore:
    """
    Create a RedisStore using the prefix and timeout from settings.

    Args:
        client: Borrowed ``redis.asyncio.Redis`` client.
        settings: Settings to use. Defaults to get_settings().
    """
    settings = settings or get_settings()
    return RedisStore(
        client,
        prefix=settings.session_key_prefix,
        timeout=settings.operation_timeout_seconds,
    )
