"""
Filtering and sorting of vital records by trailing day windows.

A window is either a number of days ("last 7 days") or the "all" sentinel.
Selectors arrive from query strings and UI filters in several forms
(7, "7", "7d", "all", None), so parse_window is the single place that
interprets them.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple, Union

from core.datetime_utils import to_utc, utc_now
from core.exceptions import InvalidWindowError
from models.vital_record import VitalRecord

logger = logging.getLogger(__name__)

ALL_WINDOW = "all"

WindowSelector = Union[int, str, None]


def parse_window(window: WindowSelector) -> Optional[int]:
    """
    Normalize a window selector to a day count, or None for "all".

    ``None``, ``0``, ``""`` and ``"all"`` all mean "no bound".

    Raises:
        InvalidWindowError: For negative, fractional or non-numeric selectors.
    """
    if window is None:
        return None

    if isinstance(window, bool):
        raise InvalidWindowError(window)

    if isinstance(window, int):
        days = window
    else:
        text = str(window).strip().lower()
        if text in ("", ALL_WINDOW):
            return None
        if text.endswith("d"):
            text = text[:-1]
        if not text.isdigit():
            raise InvalidWindowError(window)
        days = int(text)

    if days < 0:
        raise InvalidWindowError(window)
    return days or None


def window_label(days: Optional[int]) -> str:
    """Human label for a parsed window: 'All Time', 'Last 1 Day', 'Last 30 Days'."""
    if not days:
        return "All Time"
    return f"Last {days} Day" if days == 1 else f"Last {days} Days"


def window_bounds(days: Optional[int], now: Optional[datetime] = None) -> Tuple[Optional[datetime], datetime]:
    """Start and end instants of a trailing window. Start is None for 'all'."""
    end = to_utc(now) if now is not None else utc_now()
    if not days:
        return None, end
    # Windows reaching past datetime.min cover every record.
    if days > (end - datetime.min.replace(tzinfo=timezone.utc)).days:
        return None, end
    return end - timedelta(days=days), end


def sort_chronologically(records: Iterable[VitalRecord]) -> List[VitalRecord]:
    """New list ordered oldest first by capture timestamp."""
    return sorted(records, key=lambda record: record.timestamp)


def filter_by_range(
    records: Iterable[VitalRecord],
    window: WindowSelector = None,
    now: Optional[datetime] = None,
) -> List[VitalRecord]:
    """
    Records captured within the trailing window, oldest first.

    With a day count, keeps records where ``now - days <= timestamp <= now``.
    With the "all" sentinel, keeps everything. The input is never mutated,
    and applying the same window and ``now`` twice gives the same result.

    Args:
        records: Records in any order.
        window: Day count or "all" selector (see parse_window).
        now: Reference instant; defaults to the current UTC time.
    """
    days = parse_window(window)
    ordered = sort_chronologically(records)
    if days is None:
        return ordered

    start, end = window_bounds(days, now)
    if start is None:
        return ordered
    return [record for record in ordered if start <= record.timestamp <= end]


def filter_between(
    records: Iterable[VitalRecord],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[VitalRecord]:
    """Records captured within an explicit [start, end] range, oldest first."""
    start_utc = to_utc(start) if start is not None else None
    end_utc = to_utc(end) if end is not None else None
    return [
        record for record in sort_chronologically(records)
        if (start_utc is None or record.timestamp >= start_utc)
        and (end_utc is None or record.timestamp <= end_utc)
    ]
