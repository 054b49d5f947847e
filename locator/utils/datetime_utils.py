"""
DateTime Utilities
==================

All timestamps in the locator are timezone-aware UTC datetimes. MongoDB
returns naive datetimes that represent UTC, so everything read back from
the store passes through ensure_utc().

Functions:
- utc_now(): Current UTC time, timezone-aware
- ensure_utc(): Normalize naive/aware datetimes to UTC
- to_iso(): Serialize to ISO 8601 with a 'Z' suffix
"""
from datetime import datetime, timezone as dt_timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get current UTC time as a timezone-aware datetime.

    Use this for all timestamps that will be persisted to MongoDB (BSON Date).
    """
    return datetime.now(dt_timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime into a timezone-aware UTC datetime.

    - If dt is None -> None
    - If dt is naive -> assume it represents UTC (this matches MongoDB/PyMongo behavior)
    - If dt is aware -> convert to UTC
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime object to ISO 8601 string in UTC.
    
    Args:
        dt: datetime object (timezone-aware or naive UTC)
    
    Returns:
        ISO 8601 formatted string with millisecond precision
        (e.g., "2025-12-24T10:30:00.123Z"), or None if dt is None
    """
    if dt is None:
        return None
    dt = ensure_utc(dt)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
