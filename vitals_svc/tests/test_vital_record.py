"""
Tests for the VitalRecord model.
"""
from datetime import datetime, timedelta, timezone

import pytest

from models.vital_record import VitalRecord

CAPTURED = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)


def _record(timestamp, **overrides):
    fields = {
        "owner_id": "owner-123",
        "systolic": 120,
        "diastolic": 80,
        "heart_rate": 72,
        "spo2": 98,
        "temperature": 98.6,
        "weight": 165,
        "timestamp": timestamp,
    }
    fields.update(overrides)
    return VitalRecord(**fields)


class TestTimestampShapes:
    """Records accept every stored timestamp shape and derive their date."""

    @pytest.mark.parametrize("timestamp", [
        "2025-01-15T10:00:00Z",
        {"seconds": 1736935200, "nanoseconds": 0},
        {"_seconds": 1736935200, "_nanoseconds": 0},
        1736935200,
        1736935200000,
    ])
    def test_raw_timestamp_without_date(self, timestamp):
        record = _record(timestamp)

        assert record.timestamp == CAPTURED
        assert record.date == "2025-01-15"

    def test_string_keeps_its_own_offset_for_the_date(self):
        record = _record("2025-01-15T23:30:00-05:00")

        assert record.timestamp == datetime(2025, 1, 16, 4, 30, tzinfo=timezone.utc)
        assert record.date == "2025-01-15"

    def test_aware_datetime_keeps_its_own_offset_for_the_date(self):
        est = timezone(timedelta(hours=-5))
        record = _record(datetime(2025, 1, 15, 23, 30, tzinfo=est))

        assert record.timestamp.tzinfo == timezone.utc
        assert record.date == "2025-01-15"

    def test_explicit_date_is_kept(self):
        record = _record("2025-01-15T10:00:00Z", date="2025-01-14")
        assert record.date == "2025-01-14"

    def test_unknown_shape_raises(self):
        with pytest.raises(ValueError):
            _record("not a date")


def test_from_dict_mobile_layout():
    record = VitalRecord.from_dict({
        "id": "rec-1",
        "email": "jane.doe@example.com",
        "bloodPressure": {"systolic": 131, "diastolic": 85},
        "heartRate": 64,
        "spO2": 97,
        "temperature": 97.9,
        "weight": 180,
        "timestamp": {"seconds": 1736935200, "nanoseconds": 0},
    })

    assert record.owner_id == "jane.doe@example.com"
    assert record.blood_pressure == "131/85"
    assert record.timestamp == CAPTURED
    assert record.date == "2025-01-15"


def test_with_changes_ignores_fixed_fields():
    record = _record(CAPTURED, id="rec-1")

    changed = record.with_changes({"systolic": 125, "owner_id": "someone-else"})

    assert changed.systolic == 125
    assert changed.owner_id == "owner-123"
    assert record.systolic == 120
