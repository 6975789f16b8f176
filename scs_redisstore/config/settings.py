"""
Configuration management for the session store.

This module provides configuration loading and validation using Pydantic
settings. Values come from ``SCS_``-prefixed environment variables or .env
files, with an environment-specific file layered over the base one.

The store itself never reads settings; they are consumed by the client and
store factories and by the logging setup.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scs_redisstore.errors.codes import ErrorCode
from scs_redisstore.errors.exceptions import StoreException


ENV_PREFIX = "SCS_"

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


class Environment(str, Enum):
    """Supported deployment environments."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


def _detect_environment() -> Environment:
    """
    Detect the current environment from the SCS_ENVIRONMENT variable.

    Returns:
        Environment: The detected environment, defaults to DEVELOPMENT if not set.
    """
    env_value = os.environ.get(f"{ENV_PREFIX}ENVIRONMENT", "development").lower().strip()
    try:
        return Environment(env_value)
    except ValueError:
        return Environment.DEVELOPMENT


def _get_env_files(environment: Environment) -> Tuple[str, ...]:
    """
    Get the .env files to load for the given environment.

    Files are loaded in order, with later files overriding earlier ones.

    Args:
        environment: The target environment.

    Returns:
        Tuple of .env file paths to load.
    """
    return (".env", f".env.{environment.value}")


class Settings(BaseSettings):
    """
    Session store settings loaded from environment variables.

    Every field has a default, so an empty environment yields a store that
    talks to a local Redis. Environment-specific configuration is read from
    .env.development, .env.staging or .env.production depending on
    SCS_ENVIRONMENT.
    """

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Deployment environment (development, staging, production)"
    )

    # Redis Configuration
    redis_url: str = Field(
        default=DEFAULT_REDIS_URL,
        description="Redis connection URL (redis://, rediss:// or unix://)"
    )
    redis_password: Optional[str] = Field(
        default=None,
        description="Redis password, used when redis_url carries none"
    )
    socket_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=300,
        description="Socket connect/read timeout for the Redis client"
    )

    # Session Store Configuration
    session_key_prefix: str = Field(
        default="scs:session:",
        description="Prefix prepended to every session token to form the Redis key"
    )
    operation_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=300,
        description="Upper bound for each store operation"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_json: bool = Field(
        default=True,
        description="Emit JSON log lines instead of plain text"
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str) -> str:
        """Validate that redis_url is not empty and uses a Redis scheme."""
        if not v or not v.strip():
            raise ValueError("redis_url cannot be empty")
        v = v.strip()
        if urlparse(v).scheme not in {"redis", "rediss", "unix"}:
            raise ValueError("redis_url must start with redis://, rediss:// or unix://")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a valid logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.strip().upper()
        if v not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(valid_levels))}")
        return v

    @model_validator(mode="after")
    def validate_production_redis(self) -> "Settings":
        """Reject a localhost Redis in production."""
        if self.environment == Environment.PRODUCTION:
            host = urlparse(self.redis_url).hostname or ""
            if host in {"localhost", "127.0.0.1", "::1"}:
                raise ValueError(
                    "redis_url must point at a non-localhost Redis "
                    "in the production environment"
                )
        return self


class ConfigurationError(StoreException):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None,
                 invalid_fields: Optional[dict] = None):
        self.missing_fields = missing_fields or []
        self.invalid_fields = invalid_fields or {}
        super().__init__(
            ErrorCode.CONFIGURATION_ERROR,
            message,
            details={
                "missing_fields": self.missing_fields,
                "invalid_fields": self.invalid_fields,
            }
        )

    def format_error_message(self) -> str:
        """Format a descriptive error message listing all issues."""
        parts = [self.message]

        if self.missing_fields:
            parts.append(f"\nMissing required fields: {', '.join(self.missing_fields)}")

        if self.invalid_fields:
            invalid_parts = [f"  - {field}: {error}" for field, error in self.invalid_fields.items()]
            parts.append("\nInvalid field values:\n" + "\n".join(invalid_parts))

        return "".join(parts)

    def __str__(self) -> str:
        return self.format_error_message()


def create_settings_for_environment(environment: Optional[Environment] = None) -> Settings:
    """
    Create Settings for a specific environment.

    Detects the environment from SCS_ENVIRONMENT when not given and loads
    the matching environment-specific .env file.

    Args:
        environment: Optional environment override.

    Returns:
        Settings: Validated settings for the specified environment.

    Raises:
        ConfigurationError: If settings are missing or invalid.
    """
    if environment is None:
        environment = _detect_environment()

    env_files = [f for f in _get_env_files(environment) if Path(f).exists()]

    try:
        class EnvironmentSettings(Settings):
            model_config = SettingsConfigDict(
                env_prefix=ENV_PREFIX,
                env_file=tuple(env_files) or None,
                env_file_encoding="utf-8",
                case_sensitive=False,
                extra="ignore"
            )

        return EnvironmentSettings(environment=environment)
    except Exception as e:
        missing_fields = []
        invalid_fields = {}

        # Extract field-level errors from Pydantic ValidationError
        if hasattr(e, "errors"):
            for error in e.errors():
                field_name = ".".join(str(loc) for loc in error.get("loc", [])) or "settings"
                if error.get("type", "") == "missing":
                    missing_fields.append(field_name)
                else:
                    invalid_fields[field_name] = error.get("msg", str(error))

        raise ConfigurationError(
            f"Failed to load configuration for environment '{environment.value}'",
            missing_fields=missing_fields,
            invalid_fields=invalid_fields
        ) from e


# Global settings cache
_settings_cache: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the settings singleton.

    Settings are loaded once and cached for subsequent calls.

    Raises:
        ConfigurationError: If settings are missing or invalid.
    """
    global _settings_cache

    if _settings_cache is None:
        _settings_cache = create_settings_for_environment()

    return _settings_cache


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    Mostly useful in tests that reload settings with different
    environment variables.
    """
    global _settings_cache
    _settings_cache = None


def get_environment_info() -> dict[str, Any]:
    """Describe the detected environment and which .env files were found."""
    environment = _detect_environment()
    env_files = _get_env_files(environment)

    return {
        "environment": environment.value,
        "env_files_checked": list(env_files),
        "env_files_loaded": [f for f in env_files if Path(f).exists()],
    }
