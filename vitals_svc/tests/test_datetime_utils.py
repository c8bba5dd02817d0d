"""
Tests for timestamp normalization and formatting helpers.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from core.datetime_utils import (
    capture_date_string,
    format_iso,
    format_month_day,
    local_date_string,
    normalize_timestamp,
    to_db_string,
    to_utc,
)

EXPECTED = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [
    EXPECTED,
    datetime(2025, 1, 15, 10, 30),
    datetime(2025, 1, 15, 16, 0, tzinfo=timezone(timedelta(hours=5, minutes=30))),
    1736937000,
    1736937000.0,
    1736937000000,
    {"seconds": 1736937000, "nanoseconds": 0},
    {"_seconds": 1736937000, "_nanoseconds": 0},
    "2025-01-15T10:30:00Z",
    "2025-01-15T10:30:00+00:00",
    "2025-01-15 10:30:00",
])
def test_normalize_timestamp_shapes(value):
    assert normalize_timestamp(value) == EXPECTED


def test_normalize_plain_date():
    assert normalize_timestamp(date(2025, 1, 15)) == datetime(2025, 1, 15, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [True, None, [], {"nanoseconds": 5}, "not a date"])
def test_normalize_rejects_unknown_shapes(value):
    with pytest.raises(ValueError):
        normalize_timestamp(value)


def test_to_utc_assumes_naive_is_utc():
    assert to_utc(datetime(2025, 1, 15, 10, 30)).tzinfo == timezone.utc


def test_local_date_uses_capture_offset():
    est = timezone(timedelta(hours=-5))
    assert local_date_string(datetime(2025, 1, 15, 23, 30, tzinfo=est)) == "2025-01-15"


@pytest.mark.parametrize("value, expected", [
    ("2025-01-15T23:30:00-05:00", "2025-01-15"),
    ("2025-01-15T10:00:00Z", "2025-01-15"),
    ({"seconds": 1736935200, "nanoseconds": 0}, "2025-01-15"),
    (date(2025, 1, 15), "2025-01-15"),
])
def test_capture_date_string(value, expected):
    assert capture_date_string(value) == expected


def test_format_iso():
    assert format_iso(EXPECTED) == "2025-01-15T10:30:00Z"


def test_format_month_day():
    assert format_month_day("2025-01-05") == "1/5"
    assert format_month_day("2025-12-31") == "12/31"


def test_db_string_keeps_microseconds():
    value = EXPECTED.replace(microsecond=500)

    stored = to_db_string(value)

    assert stored == "2025-01-15T10:30:00.000500Z"
    assert normalize_timestamp(stored) == value
    assert to_db_string(EXPECTED) < stored
