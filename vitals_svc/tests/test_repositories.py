"""
Tests for the SQLite repositories.
"""
from datetime import timedelta

from models.shared_report import SharedReport


class TestVitalRecordRepository:
    """Test suite for VitalRecordRepository."""

    def test_create_assigns_id(self, record_repo, make_record):
        created = record_repo.create(make_record())

        assert created.id
        assert created.created_at is not None

    def test_round_trip_preserves_values(self, record_repo, make_record, now):
        created = record_repo.create(make_record(days_ago=2, temperature=99.1))

        fetched = record_repo.get_by_id(created.owner_id, created.id)

        assert fetched == created
        assert fetched.timestamp == now - timedelta(days=2)
        assert fetched.temperature == 99.1
        assert fetched.date == "2025-01-13"

    def test_sub_second_timestamp_round_trips(self, record_repo, make_record, now):
        captured = now + timedelta(microseconds=123456)
        created = record_repo.create(make_record(timestamp=captured))

        fetched = record_repo.get_by_id(created.owner_id, created.id)

        assert created.timestamp == captured
        assert fetched.timestamp == created.timestamp
        assert fetched.created_at == created.created_at

    def test_readings_within_one_second_keep_their_order(self, record_repo, make_record, now):
        later = record_repo.create(make_record(timestamp=now + timedelta(milliseconds=500)))
        earlier = record_repo.create(make_record(timestamp=now))

        records = record_repo.list_all("owner-123")

        assert [r.id for r in records] == [later.id, earlier.id]
        assert records[0].timestamp - records[1].timestamp == timedelta(milliseconds=500)

    def test_list_all_newest_first(self, record_repo, make_record):
        for days_ago in (3, 0, 7, 1):
            record_repo.create(make_record(days_ago=days_ago))

        records = record_repo.list_all("owner-123")

        timestamps = [r.timestamp for r in records]
        assert timestamps == sorted(timestamps, reverse=True)
        assert len(record_repo.list_all("owner-123", limit=2)) == 2

    def test_owner_scoping(self, record_repo, make_record):
        mine = record_repo.create(make_record())
        record_repo.create(make_record(owner_id="someone-else"))

        assert [r.id for r in record_repo.list_all("owner-123")] == [mine.id]
        assert record_repo.get_by_id("someone-else", mine.id) is None
        assert record_repo.delete_by_id("someone-else", mine.id) is False

    def test_list_by_range(self, record_repo, make_record, now):
        for days_ago in (1, 5, 10):
            record_repo.create(make_record(days_ago=days_ago))

        records = record_repo.list_by_range("owner-123", now - timedelta(days=5), now)

        assert len(records) == 2

    def test_update_fields(self, record_repo, make_record):
        created = record_repo.create(make_record())

        assert record_repo.update_fields(created.owner_id, created.id, {"heart_rate": 90, "owner_id": "x"})

        fetched = record_repo.get_by_id(created.owner_id, created.id)
        assert fetched.heart_rate == 90
        assert fetched.owner_id == "owner-123"

    def test_update_missing_record(self, record_repo):
        assert record_repo.update_fields("owner-123", "missing", {"heart_rate": 90}) is False

    def test_delete_all_only_touches_owner(self, record_repo, make_record):
        for _ in range(3):
            record_repo.create(make_record())
        record_repo.create(make_record(owner_id="someone-else"))

        assert record_repo.delete_all("owner-123") == 3
        assert record_repo.list_all("owner-123") == []
        assert len(record_repo.list_all("someone-else")) == 1


class TestSharedReportRepository:
    """Test suite for SharedReportRepository."""

    def _report(self, report_id, now, owner_id="owner-123"):
        return SharedReport(
            id=report_id,
            owner_id=owner_id,
            owner_name="Jane Doe",
            window_days=30,
            total_records=4,
            created_at=now,
            expires_at=now + timedelta(days=30),
            html_content="<html></html>",
            preview={"owner_name": "Jane Doe", "records": []},
        )

    def test_save_and_get(self, shared_repo, now):
        shared_repo.save(self._report("abc", now))

        report = shared_repo.get_by_id("abc")

        assert report.owner_name == "Jane Doe"
        assert report.window_days == 30
        assert report.expires_at == now + timedelta(days=30)
        assert report.preview == {"owner_name": "Jane Doe", "records": []}

    def test_get_unknown(self, shared_repo):
        assert shared_repo.get_by_id("nope") is None

    def test_list_for_owner_newest_first(self, shared_repo, now):
        shared_repo.save(self._report("old", now - timedelta(days=2)))
        shared_repo.save(self._report("new", now))
        shared_repo.save(self._report("other", now, owner_id="someone-else"))

        assert [r.id for r in shared_repo.list_for_owner("owner-123")] == ["new", "old"]
