"""Configuration management for tapoctl."""

from .settings import (
    ConfigurationError,
    Settings,
    ValidationResult,
    get_default_config_file,
    load_settings,
)

__all__ = [
    "ConfigurationError",
    "Settings",
    "ValidationResult",
    "get_default_config_file",
    "load_settings",
]
