"""Base service class for tapoctl services.

This module provides a common base class for tapoctl services with shared
functionality like settings injection, logging setup, and operation logging.
"""

from typing import Any

from ..config.settings import Settings
from ..utils.logging import get_logger


class BaseService:
    """Base class for all tapoctl services.

    Provides common functionality including:
    - Settings injection and management
    - Logging setup with service-specific loggers
    - Consistent operation start/complete/error log lines
    """

    def __init__(self, settings: Settings):
        """Initialize the base service.

        Args:
            settings: Application settings object
        """
        self.settings = settings
        self.logger = get_logger(self.__class__.__module__)

        service_name = self.__class__.__name__
        self.logger.debug(f"{service_name} initialized with settings")

    @staticmethod
    def _format_context(context: dict) -> str:
        return ", ".join(f"{k}={v}" for k, v in context.items())

    def _log_operation_start(self, operation: str, **context: Any) -> None:
        """Log the start of an operation with context."""
        context_str = self._format_context(context)
        if context_str:
            self.logger.info(f"Starting {operation} (context: {context_str})")
        else:
            self.logger.info(f"Starting {operation}")

    def _log_operation_complete(self, operation: str, **context: Any) -> None:
        """Log the completion of an operation with context."""
        context_str = self._format_context(context)
        if context_str:
            self.logger.info(f"Completed {operation} (context: {context_str})")
        else:
            self.logger.info(f"Completed {operation}")

    def _log_operation_error(
        self, operation: str, error: Exception, **context: Any
    ) -> None:
        """Log an operation error with context.

        Args:
            operation: Name of the operation that failed
            error: The exception that occurred
            **context: Additional context to include in the log
        """
        context_str = self._format_context(context)
        if context_str:
            self.logger.error(f"Failed {operation}: {error} (context: {context_str})")
        else:
            self.logger.error(f"Failed {operation}: {error}")
