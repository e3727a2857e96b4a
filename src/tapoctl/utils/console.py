"""Console output utilities with color support for tapoctl."""

import os
import sys
from typing import Optional, TextIO


class Colors:
    """ANSI color codes for console output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def supports_color(stream: Optional[TextIO] = None) -> bool:
    """Check if the given stream (stdout by default) supports ANSI colors."""
    stream = stream if stream is not None else sys.stdout
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False

    if "NO_COLOR" in os.environ:
        return False

    if sys.platform == "win32":
        return (
            os.environ.get("TERM", "").lower() in ("xterm", "xterm-256color")
            or "ANSICON" in os.environ
        )

    return True


def _colorize(
    message: str, color: str, title: Optional[str], stream: TextIO
) -> str:
    if not supports_color(stream):
        return f"{title}: {message}" if title else message

    if title:
        return (
            f"{color}{Colors.BOLD}{title}:{Colors.RESET} "
            f"{color}{message}{Colors.RESET}"
        )
    return f"{color}{message}{Colors.RESET}"


def print_error(message: str, title: Optional[str] = None) -> None:
    """Print an error message in red to stderr.

    Args:
        message: The error message to display
        title: Optional title/prefix for the error
    """
    print(
        _colorize(message, Colors.RED, title, sys.stderr),
        file=sys.stderr,
        flush=True,
    )


def print_warning(message: str, title: Optional[str] = None) -> None:
    """Print a warning message in yellow to stderr."""
    print(
        _colorize(message, Colors.YELLOW, title, sys.stderr),
        file=sys.stderr,
        flush=True,
    )


def print_success(message: str, title: Optional[str] = None) -> None:
    """Print a success message in green to stdout."""
    print(_colorize(message, Colors.GREEN, title, sys.stdout), flush=True)
