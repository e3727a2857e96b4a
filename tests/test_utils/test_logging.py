"""Tests for logging utilities."""

import json
import logging
import logging.handlers
import sys
from pathlib import Path

import pytest

from tapoctl.utils.logging import (
    REDACTED,
    TRACE_LEVEL,
    ContextFilter,
    JSONFormatter,
    SensitiveDataFilter,
    get_logger,
    operation_context,
    setup_logging,
)


def _record(message: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="tapoctl.test",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )


def _read_entries(log_path: Path):
    for handler in logging.getLogger().handlers:
        handler.flush()
    return [json.loads(line) for line in log_path.read_text().splitlines()]


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore the root logger after each test."""
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


class TestTraceLevel:
    """Test the custom TRACE level."""

    def test_trace_level_registered(self):
        """Test TRACE is a named level below DEBUG."""
        assert logging.getLevelName(TRACE_LEVEL) == "TRACE"
        assert TRACE_LEVEL < logging.DEBUG

    def test_logger_has_trace_method(self):
        """Test loggers expose a trace method."""
        assert hasattr(get_logger("tapoctl.test"), "trace")

    def test_trace_written_at_trace_level(self, tmp_path):
        """Test trace records reach the file log when TRACE is enabled."""
        log_path = tmp_path / "tapoctl.log"
        setup_logging(log_level="TRACE", log_path=log_path, console_output=False)

        get_logger("tapoctl.test").trace("Validating DeviceInfo")

        assert _read_entries(log_path)[0]["level"] == "TRACE"


class TestSetupLogging:
    """Test setup_logging function."""

    def test_console_only_by_default(self):
        """Test no file handler is created without a log path."""
        setup_logging(log_level="INFO")

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].level == logging.INFO

    def test_file_handler_created(self, tmp_path):
        """Test a rotating file handler is added for a log path."""
        log_path = tmp_path / "logs" / "tapoctl.log"
        setup_logging(log_level="DEBUG", log_path=log_path, backup_count=2)

        file_handlers = [
            h
            for h in logging.getLogger().handlers
            if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert Path(file_handlers[0].baseFilename) == log_path
        assert file_handlers[0].backupCount == 2
        assert log_path.parent.exists()

    def test_file_log_is_tagged_json(self, tmp_path):
        """Test file log entries are JSON tagged with the running command."""
        log_path = tmp_path / "tapoctl.log"
        setup_logging(log_level="INFO", log_path=log_path, console_output=False)

        with operation_context("info", address="10.0.0.2") as correlation_id:
            get_logger("tapoctl.test").info("Device reached")

        entry = _read_entries(log_path)[0]
        assert entry["message"] == "Device reached"
        assert entry["level"] == "INFO"
        assert entry["command"] == "info"
        assert entry["address"] == "10.0.0.2"
        assert entry["correlation_id"] == correlation_id

    def test_password_masked_in_file_log(self, tmp_path):
        """Test the configured password never reaches the log file."""
        log_path = tmp_path / "tapoctl.log"
        setup_logging(
            log_level="INFO",
            log_path=log_path,
            console_output=False,
            secrets=["hunter2"],
        )

        get_logger("tapoctl.test").error("Handshake failed for hunter2@10.0.0.2")

        assert "hunter2" not in log_path.read_text()
        assert _read_entries(log_path)[0]["message"] == (
            f"Handshake failed for {REDACTED}@10.0.0.2"
        )

    def test_unknown_level_falls_back_to_warning(self):
        """Test an unknown level name falls back to WARNING."""
        setup_logging(log_level="NOPE")
        assert logging.getLogger().handlers[0].level == logging.WARNING

    def test_tapo_library_quieted(self):
        """Test the tapo library logger is kept at INFO or above."""
        setup_logging(log_level="DEBUG")
        assert logging.getLogger("tapo").level == logging.INFO


class TestSensitiveDataFilter:
    """Test SensitiveDataFilter."""

    def test_redacts_password_messages(self):
        """Test messages mentioning passwords are redacted."""
        record = _record("login with password hunter2")
        assert SensitiveDataFilter().filter(record)
        assert record.getMessage() == "[SENSITIVE DATA REDACTED]"

    def test_masks_known_secret(self):
        """Test a known secret value is masked in place."""
        record = _record("Failed to connect to device: bad login me:hunter2")
        SensitiveDataFilter(secrets=["hunter2"]).filter(record)
        assert record.getMessage() == (
            f"Failed to connect to device: bad login me:{REDACTED}"
        )

    def test_masks_secret_in_arguments(self):
        """Test secrets passed as format arguments are masked."""
        record = logging.LogRecord(
            "tapoctl.test", logging.INFO, __file__, 1, "user %s", ("hunter2",), None
        )
        SensitiveDataFilter(secrets=["hunter2"]).filter(record)
        assert record.getMessage() == f"user {REDACTED}"

    def test_empty_secret_ignored(self):
        """Test an unset password does not mask anything."""
        message = "Starting power_on (context: address=192.168.1.20)"
        record = _record(message)
        SensitiveDataFilter(secrets=[""]).filter(record)
        assert record.getMessage() == message

    def test_redacts_sensitive_extra_fields(self):
        """Test extra fields with credential-like names are redacted."""
        record = _record("request")
        record.auth_token = "abc"
        record.duration_seconds = 1.5
        SensitiveDataFilter().filter(record)
        assert record.auth_token == REDACTED
        assert record.duration_seconds == 1.5


class TestJSONFormatter:
    """Test JSONFormatter."""

    def test_extra_fields(self):
        """Test fields passed with extra= are grouped under extra."""
        record = _record("done")
        record.duration_seconds = 0.25

        entry = json.loads(JSONFormatter().format(record))

        assert entry["extra"] == {"duration_seconds": 0.25}
        assert "command" not in entry

    def test_exception_included(self):
        """Test exception details are serialized."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            exc_info = sys.exc_info()

        record = logging.LogRecord(
            "tapoctl.test", logging.ERROR, __file__, 1, "failed", (), exc_info
        )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["exception"]["type"] == "RuntimeError"
        assert entry["exception"]["message"] == "boom"
        assert "Traceback" in entry["exception"]["traceback"]


class TestOperationContext:
    """Test operation context handling."""

    def test_context_applied_to_records(self):
        """Test ContextFilter copies the active operation onto records."""
        with operation_context("energy", address="10.0.0.2") as correlation_id:
            record = _record("reading")
            ContextFilter().filter(record)

        assert record.correlation_id == correlation_id
        assert record.command == "energy"
        assert record.address == "10.0.0.2"

    def test_explicit_correlation_id(self):
        """Test a given correlation ID is used as is."""
        with operation_context("on", correlation_id="abc-123") as correlation_id:
            assert correlation_id == "abc-123"

    def test_context_restored(self):
        """Test the enclosing operation is restored on exit."""
        with operation_context("info", correlation_id="outer"):
            with operation_context("energy"):
                pass
            record = _record("after")
            ContextFilter().filter(record)

        assert record.command == "info"
        assert record.correlation_id == "outer"

    def test_no_operation(self):
        """Test records outside any operation carry empty tags."""
        record = _record("idle")
        ContextFilter().filter(record)

        assert record.command is None
        assert record.address is None
