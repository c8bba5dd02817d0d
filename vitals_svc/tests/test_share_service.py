"""
Tests for ShareService.
"""
from datetime import timedelta

import pytest

from core.exceptions import NotAuthenticatedError, SharedReportNotFoundError
from models.owner import Owner


class TestCreateSharedReport:

    def test_creates_snapshot(self, share_service, owner, make_record, now):
        records = [make_record(days_ago=d) for d in range(5)]

        report = share_service.create_shared_report(owner, records, window_days=30, now=now)

        assert report.id
        assert report.owner_name == "Jane Doe"
        assert report.total_records == 5
        assert report.window_days == 30
        assert report.expires_at == report.created_at + timedelta(days=30)
        assert "<html" in report.html_content
        assert report.preview["total_records"] == 5

    def test_ids_are_unique(self, share_service, owner, make_record, now):
        first = share_service.create_shared_report(owner, [make_record()], now=now)
        second = share_service.create_shared_report(owner, [make_record()], now=now)

        assert first.id != second.id

    def test_preview_has_no_private_fields(self, share_service, owner, make_record, now):
        report = share_service.create_shared_report(owner, [make_record()], window_days=7, now=now)

        stored = share_service.get_shared_report(report.id, now=now)

        assert "jane.doe@example.com" not in str(stored.preview)
        assert all("weight" not in row for row in stored.preview["records"])

    def test_requires_owner(self, share_service, make_record, now):
        with pytest.raises(NotAuthenticatedError):
            share_service.create_shared_report(Owner(owner_id=""), [make_record()], now=now)


class TestGetSharedReport:

    def test_readable_until_expiry_instant(self, share_service, owner, make_record, now):
        report = share_service.create_shared_report(owner, [make_record()], now=now)
        expires_at = now + timedelta(days=30)

        assert share_service.get_shared_report(report.id, now=expires_at).id == report.id

        with pytest.raises(SharedReportNotFoundError):
            share_service.get_shared_report(report.id, now=expires_at + timedelta(seconds=1))

    def test_unknown_id(self, share_service, now):
        with pytest.raises(SharedReportNotFoundError):
            share_service.get_shared_report("does-not-exist", now=now)

    def test_snapshot_survives_record_changes(self, share_service, owner, make_record, now):
        records = [make_record(systolic=150)]
        report = share_service.create_shared_report(owner, records, window_days=7, now=now)

        records.clear()

        stored = share_service.get_shared_report(report.id, now=now)
        assert stored.total_records == 1
        assert stored.preview["averages"]["blood_pressure"] == "150/76"


class TestListAndLinks:

    def test_list_shared_reports(self, share_service, owner, make_record, now):
        share_service.create_shared_report(owner, [make_record()], now=now - timedelta(days=1))
        latest = share_service.create_shared_report(owner, [make_record()], now=now)
        share_service.create_shared_report(Owner(owner_id="someone-else"), [make_record()], now=now)

        reports = share_service.list_shared_reports(owner)

        assert len(reports) == 2
        assert reports[0].id == latest.id

    def test_shareable_url(self, share_service):
        assert share_service.shareable_url("abc123") == "https://vitals.example.com/shared-report/abc123"
