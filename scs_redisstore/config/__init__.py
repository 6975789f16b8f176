# Configuration module for the session store
from .settings import (
    ConfigurationError,
    Environment,
    Settings,
    clear_settings_cache,
    create_settings_for_environment,
    get_environment_info,
    get_settings,
)

__all__ = [
    "ConfigurationError",
    "Environment",
    "Settings",
    "clear_settings_cache",
    "create_settings_for_environment",
    "get_environment_info",
    "get_settings",
]
