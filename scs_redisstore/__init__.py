"""
scs-redisstore: a Redis session store for session managers.

Stores opaque encoded session data under ``prefix + token`` with an
absolute expiry enforced by Redis.

Example::

    import redis.asyncio as redis
    from scs_redisstore import new_store

    client = redis.from_url("redis://localhost:6379/0")
    store = new_store(client)
    await store.commit("token", b"data", expiry)
    data, found = await store.find("token")
"""

from scs_redisstore.errors import ErrorCode, SessionStoreError, StoreException
from scs_redisstore.session import (
    DEFAULT_PREFIX,
    DEFAULT_TIMEOUT,
    RedisStore,
    SessionStore,
    create_redis_client,
    make_millisecond_timestamp,
    new_store,
    new_store_from_settings,
)

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_PREFIX",
    "DEFAULT_TIMEOUT",
    "ErrorCode",
    "RedisStore",
    "SessionStore",
    "SessionStoreError",
    "StoreException",
    "create_redis_client",
    "make_millisecond_timestamp",
    "new_store",
    "new_store_from_settings",
]
