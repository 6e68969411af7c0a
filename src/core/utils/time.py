"""
Time-related utilities for the application.

All timestamps are generated in UTC and serialized using
ISO-8601 format with timezone information to ensure
correct lexicographic ordering in DynamoDB.
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return the current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00

    This format is safe for:
    - DynamoDB range key comparisons
    - Sorting
    - JSON serialization
    """
    return utc_now().isoformat()


def days_from(moment: datetime, days: int) -> datetime:
    """Return `moment` shifted forward by a whole number of days."""
    return moment + timedelta(days=days)


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def epoch_seconds(moment: datetime) -> int:
    """Return whole epoch seconds, the format DynamoDB TTL attributes expect."""
    return int(moment.timestamp())


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)
