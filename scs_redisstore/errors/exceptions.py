"""
Exception classes for the session store.

This module provides the StoreException base class, the SessionStoreError
raised by store operations, and the factory functions that translate
redis-py and asyncio failures into the error catalog.
"""

import asyncio
from typing import Any, Optional

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from scs_redisstore.errors.codes import ErrorCode, get_default_status_code


class StoreException(Exception):
    """
    Base exception class for all session store errors.
    
    This exception provides structured error information including:
    - error_code: A standardized error code from the ErrorCode enum
    - message: A human-readable error message
    - status_code: The HTTP status code a web layer should return
    - details: Optional additional context
    
    Example:
        raise StoreException(
            error_code=ErrorCode.CONFIGURATION_ERROR,
            message="redis_url is not set",
        )
    """
    
    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None
    ):
        """
        Initialize a StoreException.
        
        Args:
            error_code: The error code from the ErrorCode enum
            message: A human-readable error message
            status_code: The HTTP status code (defaults to the error code's default)
            details: Optional dictionary with additional error context
        """
        self.error_code = error_code
        self.message = message
        self.status_code = status_code or get_default_status_code(error_code)
        self.details = details
        super().__init__(message)
    
    def to_dict(self) -> dict[str, Any]:
        """
        Convert the exception to a dictionary for JSON serialization.
        
        Returns:
            Dictionary containing error_code, message, and details
        """
        result = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result
    
    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(error_code={self.error_code.value!r}, "
            f"message={self.message!r}, status_code={self.status_code}, "
            f"details={self.details!r})"
        )


class SessionStoreError(StoreException):
    """
    Raised when the backend fails to serve a store operation.
    
    The originating redis-py or asyncio exception is kept as ``__cause__``
    so callers can still inspect it. A missing session never raises this.
    """
    
    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        operation: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[dict[str, Any]] = None
    ):
        self.operation = operation
        self.key = key
        context = dict(details or {})
        if operation is not None:
            context.setdefault("operation", operation)
        if key is not None:
            context.setdefault("key", key)
        super().__init__(error_code, message, details=context or None)


# Convenience factory functions for common error types

def session_store_unavailable(
    message: str = "Session store unavailable",
    operation: Optional[str] = None,
    key: Optional[str] = None,
) -> SessionStoreError:
    """Create a session store unavailable exception."""
    return SessionStoreError(
        error_code=ErrorCode.SESSION_STORE_UNAVAILABLE,
        message=message,
        operation=operation,
        key=key
    )


def session_store_timeout(
    message: str = "Session store request timed out",
    operation: Optional[str] = None,
    key: Optional[str] = None,
) -> SessionStoreError:
    """Create a session store timeout exception."""
    return SessionStoreError(
        error_code=ErrorCode.SESSION_STORE_TIMEOUT,
        message=message,
        operation=operation,
        key=key
    )


def session_store_error(
    message: str = "Session store request failed",
    operation: Optional[str] = None,
    key: Optional[str] = None,
) -> SessionStoreError:
    """Create a generic session store exception."""
    return SessionStoreError(
        error_code=ErrorCode.SESSION_STORE_ERROR,
        message=message,
        operation=operation,
        key=key
    )


def translate_backend_error(
    exc: BaseException,
    operation: str,
    key: Optional[str] = None
) -> SessionStoreError:
    """
    Map a backend failure onto the error catalog.
    
    Args:
        exc: The exception raised by the client or by asyncio.wait_for
        operation: Store operation that failed (find, commit, delete, all)
        key: Backend key involved, if any
        
    Returns:
        A SessionStoreError to be raised ``from exc``
    """
    if isinstance(exc, (asyncio.TimeoutError, RedisTimeoutError)):
        return session_store_timeout(
            f"Session store {operation} timed out",
            operation=operation,
            key=key
        )
    if isinstance(exc, RedisConnectionError):
        return session_store_unavailable(
            f"Session store unavailable during {operation}: {exc}",
            operation=operation,
            key=key
        )
    return session_store_error(
        f"Session store {operation} failed: {exc}",
        operation=operation,
        key=key
    )
