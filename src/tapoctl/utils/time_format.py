"""Time formatting utilities."""

from typing import List, Tuple

from ..exceptions import TapoCtlError

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR
SECONDS_PER_WEEK = 7 * SECONDS_PER_DAY
# Telemetry display approximations, not calendar units
SECONDS_PER_MONTH = 30 * SECONDS_PER_WEEK
SECONDS_PER_YEAR = 12 * SECONDS_PER_MONTH

DURATION_UNITS: Tuple[Tuple[str, int], ...] = (
    ("year", SECONDS_PER_YEAR),
    ("month", SECONDS_PER_MONTH),
    ("week", SECONDS_PER_WEEK),
    ("day", SECONDS_PER_DAY),
    ("hour", SECONDS_PER_HOUR),
    ("minute", SECONDS_PER_MINUTE),
    ("second", 1),
)


class InvalidDurationError(TapoCtlError, ValueError):
    """Raised when a duration is not a non-negative integer."""

    pass


def pluralize(count: int, singular: str) -> str:
    """Render a unit token with a trailing space.

    Zero and one both take the singular form.
    """
    if count in (0, 1):
        return f"{count} {singular} "
    return f"{count} {singular}s "


def decompose_duration(duration_seconds: int) -> List[Tuple[str, int]]:
    """Split a duration into (unit, count) pairs from years down to seconds.

    Every component after years is taken from the input total reduced
    modulo the previous unit's size, not from a running remainder.

    Args:
        duration_seconds: Duration in whole seconds

    Returns:
        List of (unit name, count) pairs in descending unit order

    Raises:
        InvalidDurationError: If the duration is negative or not an integer
    """
    if isinstance(duration_seconds, bool) or not isinstance(duration_seconds, int):
        raise InvalidDurationError(
            "Duration must be an integer number of seconds",
            {"value": repr(duration_seconds)},
        )
    if duration_seconds < 0:
        raise InvalidDurationError(
            "Duration must be non-negative", {"value": duration_seconds}
        )

    first_unit, first_size = DURATION_UNITS[0]
    components = [(first_unit, duration_seconds // first_size)]
    for (unit, size), (_, previous_size) in zip(DURATION_UNITS[1:], DURATION_UNITS):
        components.append((unit, (duration_seconds % previous_size) // size))

    return components


def format_duration_human_readable(duration_seconds: int) -> str:
    """Format duration in seconds to a human-readable string.

    Args:
        duration_seconds: Duration in seconds

    Returns:
        Formatted duration string starting at the largest non-zero unit
        (e.g., "1 hour 1 minute 1 second", "2 days 0 hour 5 minutes 0 second",
        "0 second")

    Raises:
        InvalidDurationError: If the duration is negative or not an integer
    """
    components = decompose_duration(duration_seconds)

    # Seconds are always shown, even when everything above them is zero
    start = len(components) - 1
    for index, (_, count) in enumerate(components[:-1]):
        if count > 0:
            start = index
            break

    tokens = [pluralize(count, unit) for unit, count in components[start:]]
    return "".join(tokens).strip()
