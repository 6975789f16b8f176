"""
Redis-based session store implementation.

This module provides a Redis-backed implementation of the SessionStore
interface. Each session is a plain Redis string at ``prefix + token`` and
its lifetime is enforced by Redis key expiry (PEXPIREAT), so the store never
sweeps expired sessions itself.

The Redis client is borrowed: it is created and closed by the caller and may
be shared with unrelated code.
"""

import asyncio
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Optional

from redis.exceptions import RedisError

from scs_redisstore.errors.exceptions import session_store_error, translate_backend_error
from scs_redisstore.session.store import SessionStore

logger = logging.getLogger(__name__)


DEFAULT_PREFIX = "scs:session:"

# Upper bound in seconds for each backend request
DEFAULT_TIMEOUT = 5.0

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def make_millisecond_timestamp(moment: datetime) -> int:
    """
    Convert a point in time to integer milliseconds since the Unix epoch.

    Naive datetimes are taken as local time, like ``datetime.timestamp()``.
    Integer arithmetic is used so no precision is lost to floats.
    """
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def _escape_pattern(prefix: str) -> str:
    """Escape glob metacharacters so SCAN MATCH treats the prefix literally."""
    return _GLOB_SPECIAL.sub(r"\\\1", prefix)


class RedisStore(SessionStore):
    """
    Redis-backed session store implementation.

    Sessions are stored as raw bytes under ``prefix + token``. The prefix
    keeps independent consumers of one Redis database apart; it is fixed for
    the lifetime of the store and is not validated.

    Attributes:
        client: The borrowed ``redis.asyncio.Redis`` client
        prefix: Key prefix prepended to every token
        timeout: Default per-operation timeout in seconds (None for no limit)
    """

    def __init__(
        self,
        client: Any,
        prefix: str = DEFAULT_PREFIX,
        timeout: Optional[float] = DEFAULT_TIMEOUT
    ):
        """
        Initialize the Redis session store.

        Args:
            client: A ``redis.asyncio.Redis`` client (or compatible). It
                should be created with ``decode_responses=False``.
            prefix: Key prefix. Defaults to "scs:session:".
            timeout: Default per-operation timeout in seconds.
        """
        self._client = client
        self._prefix = prefix
        self._timeout = timeout

    @property
    def client(self) -> Any:
        """Get the underlying Redis client."""
        return self._client

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    def _get_key(self, token: str) -> str:
        return f"{self._prefix}{token}"

    async def _request(
        self,
        operation: str,
        awaitable: Awaitable[Any],
        key: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> Any:
        """
        Await a backend request under the operation timeout.

        A per-call ``timeout`` of None means the store default applies; only
        a store built with ``timeout=None`` waits without limit. Timeouts and
        Redis errors are re-raised as SessionStoreError chained from the
        original exception. Nothing is retried.
        """
        effective_timeout = self._timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(awaitable, timeout=effective_timeout)
        except (asyncio.TimeoutError, RedisError) as exc:
            raise translate_backend_error(exc, operation, key) from exc

    async def find(
        self,
        token: str,
        timeout: Optional[float] = None
    ) -> tuple[Optional[bytes], bool]:
        """
        Retrieve session data by token.

        Returns:
            ``(data, True)`` if the key exists, ``(None, False)`` if it
            does not exist or Redis has already expired it.

        Raises:
            SessionStoreError: On connection errors, timeouts or Redis
                error replies.
        """
        key = self._get_key(token)
        data = await self._request("find", self._client.get(key), key, timeout)

        if data is None:
            logger.debug("Session not found", extra={"extra_data": {"key": key}})
            return None, False

        # Clients created with decode_responses=True hand back str
        if isinstance(data, str):
            data = data.encode("utf-8")

        return data, True

    async def _write(
        self,
        key: str,
        data: bytes,
        expiry: Optional[datetime]
    ) -> list:
        async with self._client.pipeline(transaction=True) as pipe:
            pipe.set(key, data)
            if expiry is not None:
                pipe.pexpireat(key, make_millisecond_timestamp(expiry))
            return await pipe.execute()

    async def commit(
        self,
        token: str,
        data: bytes,
        expiry: Optional[datetime],
        timeout: Optional[float] = None
    ) -> None:
        """
        Store session data and its absolute expiry.

        SET and PEXPIREAT are sent in one MULTI/EXEC transaction, so no
        reader ever sees the new value without its expiry. A plain SET clears
        any previous TTL, which is how ``expiry=None`` yields a session that
        never expires. An expiry in the past makes Redis drop the key at once.

        Raises:
            SessionStoreError: On connection errors, timeouts or Redis
                error replies.
        """
        key = self._get_key(token)
        await self._request("commit", self._write(key, data, expiry), key, timeout)

        logger.debug("Session committed", extra={"extra_data": {
            "key": key,
            "expiry": expiry.isoformat() if expiry is not None else None,
        }})

    async def delete(self, token: str, timeout: Optional[float] = None) -> None:
        """
        Delete session data by token.

        DEL on a missing key is a no-op in Redis, so deleting twice is safe.

        Raises:
            SessionStoreError: On connection errors, timeouts or Redis
                error replies.
        """
        key = self._get_key(token)
        removed = await self._request("delete", self._client.delete(key), key, timeout)

        logger.debug("Session deleted", extra={"extra_data": {"key": key, "removed": removed}})

    async def _scan_keys(self, pattern: str) -> list[str]:
        keys: dict[str, None] = {}
        # SCAN may return a key more than once
        async for key in self._client.scan_iter(match=pattern):
            if isinstance(key, bytes):
                try:
                    key = key.decode("utf-8")
                except UnicodeDecodeError as exc:
                    raise session_store_error(
                        f"Session store all failed: key {key!r} is not valid UTF-8",
                        operation="all",
                        key=repr(key)
                    ) from exc
            keys[key] = None
        return list(keys)

    async def all(self, timeout: Optional[float] = None) -> dict[str, bytes]:
        """
        Return all live sessions under the store's prefix.

        Keys are listed with SCAN and then read one by one through find(),
        so the result is not a snapshot: a session committed during the call
        may be missing, and one that expires or is deleted between the two
        steps is silently left out. Any other failure fails the whole call.

        Cost is proportional to the number of keys under the prefix.

        Returns:
            Mapping of token to encoded session data.

        Raises:
            SessionStoreError: If listing keys or reading any session fails.
        """
        pattern = f"{_escape_pattern(self._prefix)}*"
        keys = await self._request("all", self._scan_keys(pattern), pattern, timeout)

        sessions: dict[str, bytes] = {}
        for key in keys:
            token = key[len(self._prefix):]
            data, exists = await self.find(token, timeout=timeout)
            if exists:
                sessions[token] = data

        logger.debug("Listed sessions", extra={"extra_data": {
            "prefix": self._prefix,
            "keys_scanned": len(keys),
            "sessions": len(sessions),
        }})
        return sessions

    async def health_check(self) -> bool:
        """
        Check connectivity with a PING bounded by the store timeout.

        Returns:
            True if Redis answered the PING, False otherwise.
        """
        try:
            result = await asyncio.wait_for(self._client.ping(), timeout=self._timeout)
            return bool(result)
        except (asyncio.TimeoutError, RedisError) as exc:
            logger.debug("Session store health check failed", extra={"extra_data": {
                "error": str(exc),
            }})
            return False
