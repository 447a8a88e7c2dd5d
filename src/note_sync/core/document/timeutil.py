"""ISO-8601 timestamp conversion and age checks for notes."""

import time
from datetime import UTC, datetime

SECONDS_PER_DAY = 86400


class InvalidTimestampError(ValueError):
    """Raised when a note's timestamp string cannot be parsed."""


def iso8601_to_timestamp(value: str) -> int:
    """Convert an ISO-8601 string to whole seconds since the epoch.

    Strings without an offset are taken as UTC.

    Raises:
        InvalidTimestampError: If the string is not ISO-8601.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        msg = f"invalid ISO-8601 timestamp: {value!r}"
        raise InvalidTimestampError(msg) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp())


def timestamp_to_iso8601(timestamp: int) -> str:
    """Format seconds since the epoch as an ISO-8601 UTC string."""
    return datetime.fromtimestamp(timestamp, tz=UTC).isoformat()


def is_days_older_than(timestamp: int, days: int, *, now: float | None = None) -> bool:
    """Return True if more than ``days`` days have passed since ``timestamp``."""
    current = time.time() if now is None else now
    return (current - timestamp) / SECONDS_PER_DAY > days
