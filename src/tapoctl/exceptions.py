"""Common base exception class for tapoctl.

This module provides the base exception class that all tapoctl exceptions
should inherit from for consistent error handling and context support.
"""

from typing import Any, Dict, Optional


class TapoCtlError(Exception):
    """Base exception for all tapoctl errors.

    Attributes:
        context: Optional dictionary containing additional error context
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Initialize the tapoctl error.

        Args:
            message: The error message
            context: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        base_message = super().__str__()
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_message} (context: {context_str})"
        return base_message
