"""
Timezone utilities module.

Provides unified time handling functions for the application.

Features:
1. All database times are stored in UTC
2. Provides unified time formatting functions
"""

from datetime import datetime, timezone
from typing import Optional


def get_utc_now() -> datetime:
    """
    Get the current UTC time.

    Returns:
        datetime: Current time with UTC timezone info.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime object to UTC time.

    Args:
        dt: The datetime object to convert.

    Returns:
        datetime: UTC time, or None if input is None.
    """
    if dt is None:
        return None

    # If already has timezone info, convert to UTC
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc)

    # If no timezone info, assume it's UTC (database time)
    return dt.replace(tzinfo=timezone.utc)


def format_datetime_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Format a datetime to ISO 8601 string (with timezone info).

    Args:
        dt: The datetime object to format.

    Returns:
        str: ISO 8601 formatted string, e.g., "2025-11-29T10:30:00+00:00"
             Returns None if input is None.
    """
    if dt is None:
        return None

    # Ensure it's UTC time
    utc_dt = to_utc(dt)

    return utc_dt.isoformat()
