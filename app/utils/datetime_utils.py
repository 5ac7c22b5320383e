"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """
    Make a datetime timezone-aware.

    SQLite drops tzinfo on DateTime(timezone=True) columns; naive values
    read back are treated as UTC.

    Args:
        value: Naive or aware datetime

    Returns:
        Aware datetime in UTC
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def start_of_day(value: datetime | None = None) -> datetime:
    """Get midnight (UTC) of the given or current day."""
    value = ensure_utc(value) if value else utc_now()
    return value.replace(hour=0, minute=0, second=0, microsecond=0)
