"""Configuration settings for tapoctl.

This module provides configuration management with Pydantic validation,
environment variable support, and file-based configuration loading.
"""

import ipaddress
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import TapoCtlError

OUTPUT_FORMATS = ("text", "json", "choria")


class ConfigurationError(TapoCtlError):
    """Exception raised for configuration validation errors."""

    pass


class ValidationResult:
    """Container for validation results with error details."""

    def __init__(self) -> None:
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def add_error(self, error: str) -> None:
        """Add a validation error."""
        self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        """Add a validation warning."""
        self.warnings.append(warning)

    @property
    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        """Check if validation has warnings."""
        return len(self.warnings) > 0

    def get_summary(self) -> str:
        """Get a summary of validation results."""
        parts = []
        if self.errors:
            parts.append(f"{len(self.errors)} error(s)")
        if self.warnings:
            parts.append(f"{len(self.warnings)} warning(s)")
        return ", ".join(parts) if parts else "validation passed"

    def raise_if_invalid(self) -> None:
        """Raise ConfigurationError if validation failed."""
        if not self.is_valid:
            error_msg = "Configuration validation failed:\n" + "\n".join(
                f"  - {error}" for error in self.errors
            )
            raise ConfigurationError(
                error_msg, {"errors": self.errors, "warnings": self.warnings}
            )


class Settings(BaseSettings):
    """Application settings with validation."""

    # Device settings
    address: Optional[str] = Field(default=None)
    user: Optional[str] = Field(default=None)
    password: Optional[SecretStr] = Field(default=None)
    timeout_seconds: int = Field(default=30)

    # Logging settings
    log_level: str = Field(default="WARNING")
    log_dir: Path = Field(default_factory=lambda: Path.cwd() / "logs")
    log_file: Optional[str] = Field(default=None)
    log_file_max_size: int = Field(default=10 * 1024 * 1024)  # 10MB
    log_file_backup_count: int = Field(default=5)

    # Console output settings
    verbose: bool = Field(default=False)
    quiet: bool = Field(default=False)

    # Report settings
    output_format: str = Field(default="text")
    labels: Dict[str, str] = Field(default_factory=dict)

    model_config = SettingsConfigDict(
        env_prefix="TAPO_",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: Optional[str]) -> Optional[str]:
        """Validate the device address is an IPv4 or IPv6 address."""
        if v is None:
            return v

        # Normalize so "::1" and "0:0::1" compare equal
        v = v.strip()
        try:
            return str(ipaddress.ip_address(v))
        except ValueError:
            raise ValueError(f"Device address must be an IP address, got: {v!r}")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout_seconds(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is supported."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @field_validator("log_file_max_size")
    @classmethod
    def validate_log_file_max_size(cls, v: int) -> int:
        """Validate log file max size is positive."""
        if v <= 0:
            raise ValueError("Log file max size must be positive")
        return v

    @field_validator("log_file_backup_count")
    @classmethod
    def validate_log_file_backup_count(cls, v: int) -> int:
        """Validate log file backup count is non-negative."""
        if v < 0:
            raise ValueError("Log file backup count must be non-negative")
        return v

    @field_validator("log_dir")
    @classmethod
    def validate_log_dir(cls, v: Union[str, Path]) -> Path:
        """Convert string paths to Path objects and validate."""
        # Convert string to Path
        if isinstance(v, str):
            v = Path(v)

        v = v.expanduser()

        # Resolve relative paths against the working directory
        if not v.is_absolute():
            v = Path.cwd() / v

        return v

    @field_validator("quiet")
    @classmethod
    def validate_quiet_verbose_conflict(cls, v: bool, info: Any) -> bool:
        """Ensure quiet and verbose are not both True."""
        if v and info.data.get("verbose", False):
            raise ValueError("Cannot use both --quiet and --verbose flags")
        return v

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Validate output format is known."""
        if v.lower() not in OUTPUT_FORMATS:
            raise ValueError(
                f"Output format must be one of: {', '.join(OUTPUT_FORMATS)}"
            )
        return v.lower()

    @field_validator("labels")
    @classmethod
    def validate_labels(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Validate metric label keys are non-empty."""
        for key in v:
            if not key or not key.strip():
                raise ValueError("Label keys cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_cross_field_constraints(self) -> "Settings":
        """Comprehensive cross-field validation."""
        result: ValidationResult = ValidationResult()

        # Validate logging configuration
        self._validate_logging_config(result)

        # Validate report and device configuration
        self._validate_report_config(result)

        # Raise errors, warnings are reported by the CLI
        result.raise_if_invalid()

        return self

    def _validate_logging_config(self, result: ValidationResult) -> None:
        """Validate logging configuration."""
        if self.log_file_max_size > 100 * 1024 * 1024:  # 100MB
            size_mb = self.log_file_max_size / (1024 * 1024)
            result.add_warning(f"Log file max size is quite large: {size_mb:.1f}MB")

        if self.log_file_backup_count > 20:
            result.add_warning(
                f"Log file backup count is quite high: {self.log_file_backup_count}"
            )

        if self.log_file and Path(self.log_file).name != self.log_file:
            result.add_error(
                f"Log file must be a file name inside log_dir, got: {self.log_file}"
            )

    def _validate_report_config(self, result: ValidationResult) -> None:
        """Validate report and device configuration."""
        if self.labels and self.output_format != "choria":
            result.add_warning(
                "Labels are only applied to Choria metric output and will be ignored"
            )

        if self.timeout_seconds < 3:
            result.add_warning(
                f"Device timeout is very short ({self.timeout_seconds}s) - "
                "the handshake may not complete"
            )

    def validate_comprehensive(self) -> ValidationResult:
        """Perform comprehensive validation and return detailed results.

        Returns:
            ValidationResult with detailed error and warning information
        """
        result: ValidationResult = ValidationResult()

        try:
            self._validate_logging_config(result)
            self._validate_report_config(result)
        except Exception as e:
            result.add_error(f"Validation error: {e}")

        return result

    def missing_device_fields(self) -> List[str]:
        """List the device connection settings that are not set."""
        missing = []
        if not self.address:
            missing.append("address (argument or TAPO_ADDRESS)")
        if not self.user:
            missing.append("username (argument or TAPO_USER)")
        if self.password is None or not self.password.get_secret_value():
            missing.append("password (argument or TAPO_PASSWORD)")
        return missing

    def get_effective_log_level(self) -> str:
        """Get the effective log level considering verbose/quiet flags."""
        if self.quiet:
            return "ERROR"
        elif self.verbose:
            return "DEBUG"
        else:
            return self.log_level

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for serialization.

        The password is never serialized.
        """
        return {
            key: str(value) if isinstance(value, Path) else value
            for key, value in self.model_dump(exclude={"password"}).items()
        }

    @classmethod
    def load_config(cls, config_file: Optional[Path] = None) -> "Settings":
        """Load configuration from file and environment variables.

        Priority order:
        1. Environment variables (handled automatically by BaseSettings)
        2. Config file
        3. Default values
        """
        init_kwargs: Dict[str, Any] = {}

        if config_file and config_file.exists():
            try:
                with open(config_file, "r") as f:
                    file_config = json.load(f)
                init_kwargs.update(file_config)
            except (json.JSONDecodeError, TypeError) as e:
                logging.warning(f"Failed to load config from {config_file}: {e}")

        # Environment variables take precedence over the file. Empty ones are
        # ignored by BaseSettings, so they must not shadow file values either.
        env_names = {name.upper() for name, value in os.environ.items() if value}
        for field_name in cls.model_fields:
            if f"TAPO_{field_name}".upper() in env_names:
                init_kwargs.pop(field_name, None)

        return cls(**init_kwargs)


def get_default_config_file() -> Path:
    """Get the default configuration file path."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home) / "tapoctl" / "config.json"

    return Path.home() / ".config" / "tapoctl" / "config.json"


def load_settings(config_file: Optional[Path] = None) -> Settings:
    """Load application settings from configuration file and environment.

    Args:
        config_file: Optional path to configuration file.
                    If None, uses default location.

    Returns:
        Settings instance with loaded configuration.

    Raises:
        ConfigurationError: If validation fails with errors.
    """
    if config_file is None:
        config_file = get_default_config_file()

    return Settings.load_config(config_file)
