"""Configuration module for headershim."""

from .discovery import find_toml_config_file
from .settings import (
    ConfigurationError,
    HTTPSettings,
    LoggingSettings,
    Settings,
    get_settings,
)


__all__ = [
    "ConfigurationError",
    "HTTPSettings",
    "LoggingSettings",
    "Settings",
    "find_toml_config_file",
    "get_settings",
]
