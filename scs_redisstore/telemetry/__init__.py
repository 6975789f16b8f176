"""
Telemetry module for structured logging.

This module provides:
- JSONFormatter for structured JSON log output
- setup_logging to install it on the root logger
"""

from scs_redisstore.telemetry.service import JSONFormatter, setup_logging

__all__ = [
    "JSONFormatter",
    "setup_logging",
]
