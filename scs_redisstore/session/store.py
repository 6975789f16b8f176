"""
Session store abstraction.

This module defines the contract a session framework uses to persist
encoded session data: look a record up by token, write it with an absolute
expiry, remove it, and list every live record. Record contents are opaque
bytes; the store never interprets them.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional


class SessionStore(ABC):
    """
    Abstract base class for session storage implementations.

    All methods are async so implementations can talk to network backends
    without blocking the event loop. Every method accepts an optional
    ``timeout`` in seconds that overrides the store's default for that call.
    Passing None keeps the store default; a call cannot lift the bound on
    its own.

    A missing or expired session is a normal outcome, reported through
    return values. Backend failures raise
    scs_redisstore.errors.SessionStoreError.
    """

    @abstractmethod
    async def find(
        self,
        token: str,
        timeout: Optional[float] = None
    ) -> tuple[Optional[bytes], bool]:
        """
        Retrieve the encoded session data for a token.

        Args:
            token: Session token.
            timeout: Optional per-call timeout in seconds. None uses the
                store default.

        Returns:
            ``(data, True)`` if the session exists, ``(None, False)`` if it
            never existed, was deleted or has expired.

        Raises:
            SessionStoreError: If the backend cannot be reached or fails.
        """
        pass

    @abstractmethod
    async def commit(
        self,
        token: str,
        data: bytes,
        expiry: Optional[datetime],
        timeout: Optional[float] = None
    ) -> None:
        """
        Store session data with an absolute expiry.

        The data and the expiry are applied together. An existing session
        for the token is overwritten unconditionally.

        Args:
            token: Session token.
            data: Encoded session data.
            expiry: Point in time after which the session is gone, or None
                for a session that never expires.
            timeout: Optional per-call timeout in seconds. None uses the
                store default.

        Raises:
            SessionStoreError: If the backend cannot be reached or fails.
        """
        pass

    @abstractmethod
    async def delete(self, token: str, timeout: Optional[float] = None) -> None:
        """
        Delete the session for a token.

        This operation is idempotent - deleting a non-existent
        session does not raise an error.

        Raises:
            SessionStoreError: If the backend cannot be reached or fails.
        """
        pass

    @abstractmethod
    async def all(self, timeout: Optional[float] = None) -> dict[str, bytes]:
        """
        Return every live session as a token to data mapping.

        Raises:
            SessionStoreError: If listing or reading any session fails.
                No partial mapping is returned.
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check connectivity and health of the session store.

        Returns:
            True if the store is healthy and accessible, False otherwise.

        Note:
            This method should not raise exceptions - connectivity issues
            should be caught and result in a False return value.
        """
        pass
