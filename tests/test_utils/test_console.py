"""Tests for console output utilities."""

import io
import unittest
from unittest.mock import patch

from tapoctl.utils.console import (
    Colors,
    print_error,
    print_success,
    print_warning,
    supports_color,
)


class TestSupportsColor(unittest.TestCase):
    """Test color support detection."""

    def test_supports_color_no_tty(self):
        """Test color support when not in a TTY."""
        self.assertFalse(supports_color(io.StringIO()))

    @patch("sys.platform", "linux")
    @patch.dict("os.environ", {}, clear=True)
    def test_supports_color_unix_with_tty(self):
        """Test color support on Unix systems with TTY."""
        stream = io.StringIO()
        stream.isatty = lambda: True  # type: ignore[method-assign]
        self.assertTrue(supports_color(stream))

    @patch("sys.platform", "linux")
    @patch.dict("os.environ", {"NO_COLOR": "1"}, clear=True)
    def test_no_color_environment(self):
        """Test NO_COLOR disables colors."""
        stream = io.StringIO()
        stream.isatty = lambda: True  # type: ignore[method-assign]
        self.assertFalse(supports_color(stream))


class TestColoredPrint(unittest.TestCase):
    """Test colored print functions."""

    def setUp(self):
        """Set up test fixtures."""
        self.stderr_buffer = io.StringIO()
        self.stdout_buffer = io.StringIO()

    def test_print_error_with_color_support(self):
        """Test print_error with color support."""
        with patch("tapoctl.utils.console.supports_color", return_value=True):
            with patch("sys.stderr", self.stderr_buffer):
                print_error("Device unreachable", title="Error")
                output = self.stderr_buffer.getvalue()

        self.assertIn(Colors.RED, output)
        self.assertIn("Error:", output)
        self.assertIn("Device unreachable", output)
        self.assertIn(Colors.RESET, output)

    def test_print_error_without_color_support(self):
        """Test print_error falls back to plain text."""
        with patch("tapoctl.utils.console.supports_color", return_value=False):
            with patch("sys.stderr", self.stderr_buffer):
                print_error("Device unreachable", title="Error")

        self.assertEqual(self.stderr_buffer.getvalue(), "Error: Device unreachable\n")

    def test_print_warning_goes_to_stderr(self):
        """Test print_warning writes to stderr."""
        with patch("tapoctl.utils.console.supports_color", return_value=False):
            with patch("sys.stderr", self.stderr_buffer):
                print_warning("Short timeout")

        self.assertEqual(self.stderr_buffer.getvalue(), "Short timeout\n")

    def test_print_success_plain(self):
        """Test print_success prints plain text to stdout when piped."""
        with patch("tapoctl.utils.console.supports_color", return_value=False):
            with patch("sys.stdout", self.stdout_buffer):
                print_success("Powered on")

        self.assertEqual(self.stdout_buffer.getvalue(), "Powered on\n")

    def test_print_success_with_color(self):
        """Test print_success wraps the message in green."""
        with patch("tapoctl.utils.console.supports_color", return_value=True):
            with patch("sys.stdout", self.stdout_buffer):
                print_success("Powered off")

        output = self.stdout_buffer.getvalue()
        self.assertTrue(output.startswith(Colors.GREEN))
        self.assertIn("Powered off", output)
