"""
Logging setup for the session store.

This module provides structured JSON logging. Store modules log through
``logging.getLogger(__name__)`` and attach context as
``extra={"extra_data": {...}}``; the JSONFormatter merges that context into
each log line.

Nothing here is configured on import. Applications that want this output
call setup_logging() once at startup.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """
    Log formatter that outputs one JSON object per record.
    
    Each log entry contains:
    - timestamp: ISO 8601 formatted UTC timestamp
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - message: The log message
    - logger: Name of the logger that produced the entry
    
    Additional fields can be included via the 'extra_data' attribute
    on the log record.
    """
    
    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as a JSON string.
        
        Args:
            record: The log record to format
            
        Returns:
            JSON-formatted string containing the log entry
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        
        if record.module:
            log_data["module"] = record.module
        if record.funcName and record.funcName != "<module>":
            log_data["function"] = record.funcName
        if record.lineno:
            log_data["line"] = record.lineno
        
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            log_data.update(extra_data)
        
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        
        if record.stack_info:
            log_data["stack_trace"] = record.stack_info
        
        return json.dumps(log_data, default=str)


def setup_logging(settings: Optional[Any] = None) -> logging.Logger:
    """
    Configure the root logger from settings.
    
    Existing root handlers are replaced by a single stdout handler using
    JSONFormatter, or a plain text formatter when ``log_json`` is False.
    
    Args:
        settings: Object with ``log_level`` and ``log_json`` attributes,
            usually scs_redisstore.config.Settings. Defaults to INFO/JSON.
            
    Returns:
        The package logger, ready for use
    """
    log_level_str = getattr(settings, "log_level", "INFO") if settings else "INFO"
    log_json = getattr(settings, "log_json", True) if settings else True
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)
    
    if log_json:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(PLAIN_FORMAT)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    
    # Remove existing handlers to avoid duplicate logs
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)
    
    logger = logging.getLogger("scs_redisstore")
    logger.debug("Logging configured", extra={
        "extra_data": {"log_level": log_level_str, "log_json": log_json}
    })
    return logger
