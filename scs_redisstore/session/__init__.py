"""
Session persistence for encoded session data.

This module provides the SessionStore contract and its Redis
implementation, with each session stored under ``prefix + token`` and
expired by Redis itself.
"""

from scs_redisstore.session.store import SessionStore
from scs_redisstore.session.redis_store import (
    DEFAULT_PREFIX,
    DEFAULT_TIMEOUT,
    RedisStore,
    make_millisecond_timestamp,
)
from scs_redisstore.session.factory import (
    create_redis_client,
    new_store,
    new_store_from_settings,
)

__all__ = [
    "SessionStore",
    "RedisStore",
    "DEFAULT_PREFIX",
    "DEFAULT_TIMEOUT",
    "make_millisecond_timestamp",
    "create_redis_client",
    "new_store",
    "new_store_from_settings",
]
