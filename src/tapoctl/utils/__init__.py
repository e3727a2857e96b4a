"""Utility functions for tapoctl."""

from .logging import (
    get_logger,
    operation_context,
    setup_logging,
)
from .time_format import (
    InvalidDurationError,
    decompose_duration,
    format_duration_human_readable,
    pluralize,
)

__all__ = [
    # Logging utilities
    "get_logger",
    "operation_context",
    "setup_logging",
    # Time formatting utilities
    "InvalidDurationError",
    "decompose_duration",
    "format_duration_human_readable",
    "pluralize",
]
