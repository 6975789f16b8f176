"""
Unit tests for backend failure handling in the Redis session store.

These tests verify the error contract:
- Connection errors, Redis timeouts and operation timeouts raise
  SessionStoreError with the matching error code
- The original exception is kept as __cause__
- A missing session is never an error
- all() fails as a whole when any re-read fails, but skips keys that
  vanished between listing and reading
- The store never closes the borrowed client
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from scs_redisstore.errors import ErrorCode, SessionStoreError
from scs_redisstore.session.redis_store import RedisStore


def _scan(*keys):
    """Build a scan_iter replacement yielding the given keys."""
    async def scan_iter(match=None, **kwargs):
        for key in keys:
            yield key
    return scan_iter


@pytest.fixture
def mock_client() -> MagicMock:
    """A mock redis.asyncio client where every command succeeds."""
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.delete = AsyncMock(return_value=1)
    client.ping = AsyncMock(return_value=True)
    client.scan_iter = _scan()
    return client


async def _slow(*args, **kwargs):
    await asyncio.sleep(1)


class TestFindFailures:
    """Tests for find() error propagation."""

    @pytest.mark.asyncio
    async def test_connection_error(self, mock_client):
        mock_client.get.side_effect = RedisConnectionError("Connection refused")
        store = RedisStore(mock_client)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.find("session_token")

        error = exc_info.value
        assert error.error_code == ErrorCode.SESSION_STORE_UNAVAILABLE
        assert error.status_code == 503
        assert error.operation == "find"
        assert error.key == "scs:session:session_token"
        assert isinstance(error.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_redis_timeout(self, mock_client):
        mock_client.get.side_effect = RedisTimeoutError("Timeout reading from socket")
        store = RedisStore(mock_client)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.find("session_token")

        assert exc_info.value.error_code == ErrorCode.SESSION_STORE_TIMEOUT
        assert isinstance(exc_info.value.__cause__, RedisTimeoutError)

    @pytest.mark.asyncio
    async def test_error_reply(self, mock_client):
        mock_client.get.side_effect = ResponseError("WRONGTYPE")
        store = RedisStore(mock_client)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.find("session_token")

        assert exc_info.value.error_code == ErrorCode.SESSION_STORE_ERROR

    @pytest.mark.asyncio
    async def test_store_timeout(self, mock_client):
        mock_client.get = _slow
        store = RedisStore(mock_client, timeout=0.01)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.find("session_token")

        assert exc_info.value.error_code == ErrorCode.SESSION_STORE_TIMEOUT
        assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_per_call_timeout_overrides_default(self, mock_client):
        mock_client.get = _slow
        store = RedisStore(mock_client, timeout=30)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.find("session_token", timeout=0.01)

        assert exc_info.value.error_code == ErrorCode.SESSION_STORE_TIMEOUT

    @pytest.mark.asyncio
    async def test_per_call_none_keeps_store_default(self, mock_client):
        mock_client.get = _slow
        store = RedisStore(mock_client, timeout=0.01)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.find("session_token", timeout=None)

        assert exc_info.value.error_code == ErrorCode.SESSION_STORE_TIMEOUT

    @pytest.mark.asyncio
    async def test_missing_is_not_an_error(self, mock_client):
        store = RedisStore(mock_client)

        assert await store.find("session_token") == (None, False)


class TestCommitFailures:
    """Tests for commit() error propagation."""

    @pytest.mark.asyncio
    async def test_disconnected_server(self, fake_server, fake_redis):
        fake_server.connected = False
        store = RedisStore(fake_redis)
        expiry = datetime.now(timezone.utc) + timedelta(minutes=1)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.commit("session_token", b"encoded_data", expiry)

        assert exc_info.value.error_code == ErrorCode.SESSION_STORE_UNAVAILABLE
        assert exc_info.value.operation == "commit"

    @pytest.mark.asyncio
    async def test_exec_failure(self, mock_client):
        pipe = MagicMock()
        pipe.execute = AsyncMock(side_effect=RedisConnectionError("Connection reset"))
        pipe.__aenter__ = AsyncMock(return_value=pipe)
        pipe.__aexit__ = AsyncMock(return_value=False)
        mock_client.pipeline = MagicMock(return_value=pipe)
        store = RedisStore(mock_client)
        expiry = datetime.now(timezone.utc) + timedelta(minutes=1)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.commit("session_token", b"encoded_data", expiry)

        assert exc_info.value.error_code == ErrorCode.SESSION_STORE_UNAVAILABLE
        pipe.set.assert_called_once_with("scs:session:session_token", b"encoded_data")
        pipe.pexpireat.assert_called_once()


class TestDeleteFailures:
    """Tests for delete() error propagation."""

    @pytest.mark.asyncio
    async def test_redis_timeout(self, mock_client):
        mock_client.delete.side_effect = RedisTimeoutError("Timeout")
        store = RedisStore(mock_client)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.delete("session_token")

        assert exc_info.value.error_code == ErrorCode.SESSION_STORE_TIMEOUT
        assert exc_info.value.operation == "delete"

    @pytest.mark.asyncio
    async def test_deleting_missing_key(self, mock_client):
        mock_client.delete.return_value = 0
        store = RedisStore(mock_client)

        await store.delete("session_token")

        mock_client.delete.assert_awaited_once_with("scs:session:session_token")


class TestAllFailures:
    """Tests for all() error propagation and the listing race."""

    @pytest.mark.asyncio
    async def test_scan_failure(self, mock_client):
        async def failing_scan(match=None, **kwargs):
            raise RedisConnectionError("Connection refused")
            yield  # pragma: no cover

        mock_client.scan_iter = failing_scan
        store = RedisStore(mock_client)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.all()

        assert exc_info.value.error_code == ErrorCode.SESSION_STORE_UNAVAILABLE
        assert exc_info.value.operation == "all"

    @pytest.mark.asyncio
    async def test_reread_failure_fails_whole_call(self, mock_client):
        mock_client.scan_iter = _scan(b"scs:session:a", b"scs:session:b")
        mock_client.get.side_effect = [b"data_a", RedisConnectionError("Connection reset")]
        store = RedisStore(mock_client)

        with pytest.raises(SessionStoreError) as exc_info:
            await store.all()

        assert exc_info.value.error_code == ErrorCode.SESSION_STORE_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_vanished_key_is_skipped(self, mock_client):
        mock_client.scan_iter = _scan(b"scs:session:a", b"scs:session:b")
        mock_client.get.side_effect = [b"data_a", None]
        store = RedisStore(mock_client)

        assert await store.all() == {"a": b"data_a"}

    @pytest.mark.asyncio
    async def test_duplicate_scan_results_read_once(self, mock_client):
        mock_client.scan_iter = _scan(b"scs:session:a", b"scs:session:a")
        mock_client.get.return_value = b"data_a"
        store = RedisStore(mock_client)

        assert await store.all() == {"a": b"data_a"}
        mock_client.get.assert_awaited_once_with("scs:session:a")


class TestHealthCheckFailures:
    """health_check() reports problems as False instead of raising."""

    @pytest.mark.asyncio
    async def test_connection_error(self, mock_client):
        mock_client.ping.side_effect = RedisConnectionError("Connection refused")
        store = RedisStore(mock_client)

        assert await store.health_check() is False

    @pytest.mark.asyncio
    async def test_timeout(self, mock_client):
        mock_client.ping = _slow
        store = RedisStore(mock_client, timeout=0.01)

        assert await store.health_check() is False


class TestClientOwnership:
    """The store borrows the client and never closes it."""

    @pytest.mark.asyncio
    async def test_client_not_closed(self, mock_client):
        store = RedisStore(mock_client)

        await store.find("session_token")
        await store.delete("session_token")
        await store.all()

        mock_client.close.assert_not_called()
        mock_client.aclose.assert_not_called()
