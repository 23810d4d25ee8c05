"""Conversion between "HH:MM" wall-clock strings and minutes since midnight."""

import re

from coworking.errors import InvalidTimeFormat

# Hours may be written with one digit ("9:30"), minutes always with two.
TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")

MINUTES_PER_DAY = 24 * 60


def is_valid_time(value: object) -> bool:
    """Return True when *value* is a well-formed 24h "HH:MM" string."""
    return isinstance(value, str) and TIME_PATTERN.match(value) is not None


def time_to_minutes(value: str) -> int:
    """Parse "HH:MM" into minutes since midnight.

    Raises:
        InvalidTimeFormat: if the value is not a valid 24h time.
    """
    match = TIME_PATTERN.match(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeFormat(f"Invalid time {value!r} (expected HH:MM)")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as a zero-padded "HH:MM" string."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minute offset out of range: {minutes}")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"
