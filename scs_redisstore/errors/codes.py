"""
Error code catalog for the session store.

This module defines the error codes raised by the store, covering backend
availability, timeouts, protocol failures and configuration problems.
Each code carries the HTTP status a surrounding web framework should
surface when the error escapes a request handler.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """
    Enumeration of all error codes used by the session store.
    
    - Backend errors (5xx): Redis could not serve the request
    - Configuration errors (5xx): settings could not be loaded
    
    "Not found" is deliberately absent: a missing session is a normal
    result, never an error.
    """
    
    # Backend errors (5xx)
    SESSION_STORE_UNAVAILABLE = "SESSION_STORE_UNAVAILABLE"
    """Redis connection refused or dropped (HTTP 503)"""
    
    SESSION_STORE_TIMEOUT = "SESSION_STORE_TIMEOUT"
    """Redis did not answer within the operation timeout (HTTP 504)"""
    
    SESSION_STORE_ERROR = "SESSION_STORE_ERROR"
    """Redis replied with an error or an unexpected response (HTTP 500)"""
    
    # Configuration errors (5xx)
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Settings are missing or invalid (HTTP 500)"""


# Mapping of error codes to their default HTTP status codes
ERROR_CODE_STATUS_MAP: dict[ErrorCode, int] = {
    ErrorCode.SESSION_STORE_UNAVAILABLE: 503,
    ErrorCode.SESSION_STORE_TIMEOUT: 504,
    ErrorCode.SESSION_STORE_ERROR: 500,
    ErrorCode.CONFIGURATION_ERROR: 500,
}


def get_default_status_code(error_code: ErrorCode) -> int:
    """
    Get the default HTTP status code for an error code.
    
    Args:
        error_code: The error code to look up
        
    Returns:
        The default HTTP status code for the error code
    """
    return ERROR_CODE_STATUS_MAP.get(error_code, 500)
