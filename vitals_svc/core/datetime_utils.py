"""
UTC-first datetime utilities for Vitals Service API.

This module provides consistent datetime handling across the application:
- All datetimes are stored and processed in UTC
- ISO 8601 format used for string serialization
- Timezone-aware parsing and conversion
- One normalizer for every timestamp shape a stored record may carry

Design Principles:
- Internal processing: Always use datetime with UTC timezone
- Database storage: ISO 8601 strings in UTC (SQLite stores as TEXT)
- API responses: ISO 8601 strings with 'Z' suffix
- Analytics: only ever sees UTC datetimes, never raw storage values

Usage:
    from core.datetime_utils import utc_now, normalize_timestamp, format_iso

    now = utc_now()
    ts = normalize_timestamp({"seconds": 1736937000, "nanoseconds": 0})
    iso_str = format_iso(ts)  # "2025-01-15T10:30:00Z"
"""
import logging
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

# Epoch values above this are treated as milliseconds (year 5138 in seconds).
_EPOCH_MILLIS_THRESHOLD = 100_000_000_000


# =============================================================================
# CORE UTILITIES
# =============================================================================

def utc_now() -> datetime:
    """
    Get current datetime in UTC with timezone info.

    Returns:
        datetime: Current time as timezone-aware datetime in UTC.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    - If datetime is naive (no timezone), assumes it's already UTC
    - If datetime has timezone, converts to UTC

    Args:
        dt: A datetime object (naive or timezone-aware).

    Returns:
        datetime: Timezone-aware datetime in UTC.

    Example:
        >>> from datetime import timedelta
        >>> ist = timezone(timedelta(hours=5, minutes=30))
        >>> to_utc(datetime(2024, 1, 15, 16, 0, tzinfo=ist)).hour
        10
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_date_string(dt: datetime) -> str:
    """
    Calendar date (YYYY-MM-DD) of a capture instant in the offset it carries.

    A reading taken at 23:30 in UTC-05:00 belongs to that evening's date,
    even though its UTC instant falls on the next day. Naive datetimes are
    treated as UTC.

    Example:
        >>> from datetime import timedelta
        >>> est = timezone(timedelta(hours=-5))
        >>> local_date_string(datetime(2025, 1, 15, 23, 30, tzinfo=est))
        '2025-01-15'
    """
    return dt.date().isoformat()


# =============================================================================
# PARSING
# =============================================================================

def parse_datetime(value: Union[str, datetime]) -> datetime:
    """
    Parse a datetime value to UTC datetime.

    Accepts:
    - datetime object (returned after UTC conversion)
    - ISO 8601 string (with or without timezone, 'Z' suffix allowed)
    - Plain dates and a few common day-first formats

    Raises:
        ValueError: If the value cannot be parsed.

    Examples:
        >>> parse_datetime("2024-01-15T10:30:00+05:30")
        datetime.datetime(2024, 1, 15, 5, 0, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, datetime):
        return to_utc(value)

    if not isinstance(value, str):
        raise ValueError(f"Expected datetime or string, got {type(value).__name__}")

    value = value.strip()

    try:
        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        return to_utc(datetime.fromisoformat(value))
    except ValueError:
        pass

    formats = [
        "%Y-%m-%d %H:%M:%S",      # 2024-01-15 10:30:00
        "%Y-%m-%d %H:%M",         # 2024-01-15 10:30
        "%Y-%m-%d",               # 2024-01-15
        "%d-%m-%Y %H:%M:%S",      # 15-01-2024 10:30:00
        "%d-%m-%Y",               # 15-01-2024
        "%d/%m/%Y %H:%M:%S",      # 15/01/2024 10:30:00
        "%d/%m/%Y",               # 15/01/2024
    ]

    for fmt in formats:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    raise ValueError(f"Cannot parse datetime: '{value}'")


def parse_datetime_safe(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse datetime with graceful error handling.

    Returns:
        Parsed datetime in UTC, or None if parsing fails or input is None.
    """
    if value is None:
        return None
    try:
        return parse_datetime(value)
    except ValueError as e:
        logger.warning(f"Failed to parse datetime '{value}': {e}")
        return None


def _from_epoch(value: float) -> datetime:
    if abs(value) >= _EPOCH_MILLIS_THRESHOLD:
        value = value / 1000.0
    return datetime.fromtimestamp(value, tz=timezone.utc)


def normalize_timestamp(value: Any) -> datetime:
    """
    Normalize any supported timestamp representation to a UTC datetime.

    Records written by older clients carry their capture time in several
    shapes. This is the single place that knows about them:

    - ``datetime`` (naive values are treated as UTC)
    - ``date`` (midnight UTC)
    - ``int``/``float`` epoch seconds, or milliseconds for large values
    - provider timestamp mappings: ``{"seconds": ..., "nanoseconds": ...}``
      (also the underscore-prefixed ``_seconds``/``_nanoseconds`` export form)
    - strings understood by :func:`parse_datetime`

    Raises:
        ValueError: If the value has none of these shapes.
    """
    if isinstance(value, datetime):
        return to_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, bool):
        raise ValueError("Boolean is not a timestamp")

    if isinstance(value, (int, float)):
        return _from_epoch(float(value))

    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0)) or 0
        if seconds is None:
            raise ValueError(f"Timestamp mapping has no seconds field: {sorted(value)}")
        return datetime.fromtimestamp(int(seconds) + int(nanos) / 1e9, tz=timezone.utc)

    if isinstance(value, str):
        return parse_datetime(value)

    raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")


def capture_date_string(value: Any) -> str:
    """
    Local calendar date of a raw timestamp, in the offset it was written with.

    ISO strings keep their own offset, so "2025-01-15T23:30:00-05:00" is
    still the 15th. Other shapes are dated through normalize_timestamp.
    """
    if isinstance(value, datetime):
        return local_date_string(value)
    if isinstance(value, str):
        try:
            return local_date_string(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
        except ValueError:
            pass
    return local_date_string(normalize_timestamp(value))


# =============================================================================
# FORMATTING
# =============================================================================

def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string with UTC timezone.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00Z'
    """
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_for_display(dt: datetime, include_time: bool = True) -> str:
    """
    Format datetime for human-readable display.

    Example:
        >>> format_for_display(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '15 Jan 2024, 10:30 UTC'
    """
    utc_dt = to_utc(dt)
    if include_time:
        return utc_dt.strftime("%d %b %Y, %H:%M UTC")
    return utc_dt.strftime("%d %b %Y")


def format_month_day(date_string: str) -> str:
    """
    Short chart label for a YYYY-MM-DD calendar date.

    Example:
        >>> format_month_day("2025-01-05")
        '1/5'
    """
    parsed = date.fromisoformat(date_string)
    return f"{parsed.month}/{parsed.day}"


# =============================================================================
# DATABASE HELPERS
# =============================================================================

def to_db_string(dt: datetime) -> str:
    """
    Convert datetime to the fixed-width ISO 8601 text stored in SQLite.

    Microseconds are kept, so stored values round-trip exactly and sort
    lexicographically in capture order.

    Example:
        >>> to_db_string(datetime(2024, 1, 15, 10, 30, 0, 500, tzinfo=timezone.utc))
        '2024-01-15T10:30:00.000500Z'
    """
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def from_db_string(value: Optional[str]) -> Optional[datetime]:
    """Parse datetime string from SQLite storage, or None if missing/invalid."""
    return parse_datetime_safe(value)
