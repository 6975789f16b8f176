"""
Error handling module for the session store.

This module provides structured error handling with:
- ErrorCode enum for standardized error codes
- StoreException base class with structured context
- SessionStoreError raised when the backend fails
- translate_backend_error for mapping redis-py failures
"""

from scs_redisstore.errors.codes import ErrorCode, get_default_status_code
from scs_redisstore.errors.exceptions import (
    SessionStoreError,
    StoreException,
    session_store_error,
    session_store_timeout,
    session_store_unavailable,
    translate_backend_error,
)

__all__ = [
    "ErrorCode",
    "get_default_status_code",
    "SessionStoreError",
    "StoreException",
    "session_store_error",
    "session_store_timeout",
    "session_store_unavailable",
    "translate_backend_error",
]
