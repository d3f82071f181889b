"""
Timestamp helpers.

All timestamps inside the service are naive datetimes in UTC. Values coming
from the outside (query strings, database JSON) are normalised on entry.
"""

from datetime import datetime, timezone
from typing import Optional


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are returned as is."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(text: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, returning None when it cannot be read."""
    try:
        return to_naive_utc(datetime.fromisoformat(text.strip()))
    except (AttributeError, ValueError, OverflowError):
        return None


def format_timestamp(value: datetime) -> str:
    """Render seconds precision, e.g. 2024-05-01T13:45:00."""
    return to_naive_utc(value).isoformat(timespec="seconds")
