"""DateTime utilities for HRPulse.

This module provides timezone-aware datetime helpers for consistent
datetime handling across the attempt lifecycle.
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        datetime: Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def normalize_datetime_to_utc(dt: datetime, source_timezone: Optional[str] = None) -> datetime:
    """Normalize datetime to UTC timezone.

    Args:
        dt: Datetime to normalize
        source_timezone: Source timezone name (if dt is naive)

    Returns:
        UTC datetime

    Examples:
        >>> local_dt = datetime(2024, 1, 15, 14, 30)
        >>> normalize_datetime_to_utc(local_dt, "America/New_York")
        datetime.datetime(2024, 1, 15, 19, 30, tzinfo=datetime.timezone.utc)
    """
    if dt.tzinfo is None:
        if source_timezone:
            try:
                dt = dt.replace(tzinfo=ZoneInfo(source_timezone))
            except (ZoneInfoNotFoundError, ValueError):
                dt = dt.replace(tzinfo=timezone.utc)
        else:
            # Naive datetimes from MongoDB are UTC
            dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def calculate_duration_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds elapsed between two datetimes, never negative.

    Args:
        start: Start datetime
        end: End datetime

    Returns:
        int: Elapsed seconds
    """
    delta = normalize_datetime_to_utc(end) - normalize_datetime_to_utc(start)
    return max(int(delta.total_seconds()), 0)
