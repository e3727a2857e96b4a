"""Logging utilities for structured JSON logging with TRACE level support.

Console records go to stderr so that report and JSON output on stdout stays
machine-readable. An optional rotating file log receives one JSON object per
record, tagged with the command being run and the device it talks to.
"""

import json
import logging
import logging.handlers
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Generator, Iterable, Optional

# Add TRACE level
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")


def trace(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    """Log a message with severity 'TRACE'."""
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


# Add trace method to Logger class
logging.Logger.trace = trace  # type: ignore[attr-defined]

# Attributes every LogRecord carries; anything else was passed via extra=
_STANDARD_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "correlation_id", "command", "address"}

REDACTED = "[REDACTED]"


@dataclass(frozen=True)
class OperationState:
    """The CLI command currently running on this thread."""

    command: str
    correlation_id: str
    address: Optional[str] = None


# Thread-local storage for the active operation
_local = threading.local()


def _current_operation() -> Optional[OperationState]:
    return getattr(_local, "operation", None)


class ContextFilter(logging.Filter):
    """Filter to tag log records with the active command and device."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add operation information to the log record."""
        state = _current_operation()
        record.correlation_id = state.correlation_id if state else None
        record.command = state.command if state else None
        record.address = state.address if state else None
        return True


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def __init__(self, include_traceback: bool = True) -> None:
        """Initialize JSON formatter.

        Args:
            include_traceback: Whether to include traceback in error logs
        """
        super().__init__()
        self.include_traceback = include_traceback

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        # Base log entry
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        # Operation tags set by ContextFilter
        for key in ("correlation_id", "command", "address"):
            value = getattr(record, key, None)
            if value:
                log_entry[key] = value

        # Fields passed with extra=
        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            log_entry["extra"] = extra

        # Add exception information if present
        if record.exc_info and self.include_traceback:
            exc_type, exc_value, _ = record.exc_info
            log_entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class SensitiveDataFilter(logging.Filter):
    """Filter to keep credentials out of log output.

    Known secret values (the device password) are masked wherever they
    appear in a message. Messages that talk about credentials at all are
    replaced entirely, and extra fields with credential-like names are
    redacted.
    """

    SENSITIVE_PATTERNS = (
        "password",
        "passwd",
        "token",
        "secret",
        "credential",
        "session_id",
    )

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self.secrets = [secret for secret in secrets if secret]

    def _mentions_sensitive(self, name: str) -> bool:
        return any(pattern in name.lower() for pattern in self.SENSITIVE_PATTERNS)

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter sensitive data from log records."""
        # Check message
        message = record.getMessage()
        masked = message
        for secret in self.secrets:
            masked = masked.replace(secret, REDACTED)

        if self._mentions_sensitive(masked):
            record.msg, record.args = "[SENSITIVE DATA REDACTED]", ()
        elif masked != message:
            record.msg, record.args = masked, ()

        # Check extra fields
        for key in list(vars(record)):
            if key not in _STANDARD_RECORD_ATTRS and self._mentions_sensitive(key):
                setattr(record, key, REDACTED)

        return True


def setup_logging(
    log_level: str = "WARNING",
    log_path: Optional[Path] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    console_output: bool = True,
    secrets: Iterable[str] = (),
) -> None:
    """Set up logging configuration.

    Args:
        log_level: Logging level name, TRACE included
        log_path: Rotating JSON log file, or None for console only
        max_file_size: Maximum size of the log file before rotation
        backup_count: Number of rotated files to keep
        console_output: Whether to log to stderr
        secrets: Values to mask in every record, such as the device password
    """
    # Convert log level
    numeric_level = logging.getLevelName(log_level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    # Root logger configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(TRACE_LEVEL)  # Capture all levels

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    sensitive_filter = SensitiveDataFilter(secrets)

    # File handler with rotation
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(JSONFormatter(include_traceback=True))
        file_handler.addFilter(ContextFilter())
        file_handler.addFilter(sensitive_filter)
        root_logger.addHandler(file_handler)

    # Console handler (if enabled)
    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
            )
        )
        console_handler.addFilter(sensitive_filter)
        root_logger.addHandler(console_handler)

    # The tapo library is chatty at DEBUG
    logging.getLogger("tapo").setLevel(max(numeric_level, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


@contextmanager
def operation_context(
    command: str,
    address: Optional[str] = None,
    correlation_id: Optional[str] = None,
) -> Generator[str, None, None]:
    """Tag log records emitted inside the block with a command and device.

    Args:
        command: CLI command being run
        address: Device address the command talks to
        correlation_id: Correlation ID (generates UUID if None)

    Yields:
        The correlation ID
    """
    previous = _current_operation()
    state = OperationState(
        command=command,
        correlation_id=correlation_id or str(uuid.uuid4()),
        address=address,
    )

    _local.operation = state
    try:
        yield state.correlation_id
    finally:
        # Restore the enclosing operation, if any
        _local.operation = previous
