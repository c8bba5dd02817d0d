"""
Service layer for shareable report links.

A shared report is a snapshot: the HTML page and a redacted preview are
rendered once at creation time and never change afterwards, even if the
owner edits or deletes the underlying records.

Architecture:
    API Layer (routers) → ShareService → SharedReportRepository → Database
                                       → report compiler + ReportRenderer
"""
import logging
import sqlite3
import uuid
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from repositories import SharedReportRepository
from models.owner import Owner
from models.shared_report import SharedReport
from models.vital_record import VitalRecord
from core.datetime_utils import to_utc, utc_now
from core.exceptions import DatabaseError, NotAuthenticatedError, SharedReportNotFoundError
from services.analytics.filtering import WindowSelector
from services.analytics.report_compiler import compile_report, compile_share_preview
from services.report.renderer import ReportRenderer

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_DAYS = 30
DEFAULT_BASE_URL = "https://healthmates.onrender.com"


class ShareService:
    """
    Creates and resolves expiring shared report snapshots.
    """

    def __init__(
        self,
        shared_report_repository: SharedReportRepository,
        renderer: Optional[ReportRenderer] = None,
        expiry_days: int = DEFAULT_EXPIRY_DAYS,
        base_url: str = DEFAULT_BASE_URL,
    ):
        """
        Initialize the share service.

        Args:
            shared_report_repository: Repository for persisted snapshots.
            renderer: HTML renderer. A default instance is created if omitted.
            expiry_days: Lifetime of a shared link in days.
            base_url: Public base URL used to build shareable links.
        """
        self._repo = shared_report_repository
        self._renderer = renderer or ReportRenderer()
        self._expiry_days = expiry_days
        self._base_url = base_url.rstrip("/")

    def create_shared_report(
        self,
        owner: Owner,
        records: Sequence[VitalRecord],
        window_days: WindowSelector = None,
        now: Optional[datetime] = None,
    ) -> SharedReport:
        """
        Compile, render and persist a report snapshot.

        Args:
            owner: Owner sharing the report.
            records: The owner's records (filtered to the window here).
            window_days: Day count or "all" selector.
            now: Creation instant; defaults to the current UTC time.

        Returns:
            SharedReport: The stored snapshot, expiring ``expiry_days`` later.

        Raises:
            NotAuthenticatedError: If the owner has no id.
            DatabaseError: If the snapshot cannot be stored.
        """
        if owner is None or not owner.owner_id:
            raise NotAuthenticatedError()

        created_at = to_utc(now) if now is not None else utc_now()
        document = compile_report(owner, records, window_days, created_at)
        preview = compile_share_preview(owner, records, window_days, created_at)

        report = SharedReport(
            id=uuid.uuid4().hex,
            owner_id=owner.owner_id,
            owner_name=owner.name,
            window_days=document.window_days,
            total_records=document.total_records,
            created_at=created_at,
            expires_at=created_at + timedelta(days=self._expiry_days),
            html_content=self._renderer.render_html(document),
            preview=preview.to_dict(),
        )

        try:
            self._repo.save(report)
        except sqlite3.Error as e:
            logger.error(f"Failed to store shared report: {e}")
            raise DatabaseError(operation="create_shared_report") from e

        logger.info(
            f"Shared report created: {report.id}",
            extra={"owner_id": owner.owner_id, "expires_at": report.expires_at.isoformat()},
        )
        return report

    def get_shared_report(self, report_id: str, now: Optional[datetime] = None) -> SharedReport:
        """
        Resolve a shared report by id.

        A report stays readable up to and including its expiry instant.

        Raises:
            SharedReportNotFoundError: If the id is unknown or the report has
                expired; the two cases are indistinguishable to the caller.
        """
        now = to_utc(now) if now is not None else utc_now()
        try:
            report = self._repo.get_by_id(report_id)
        except sqlite3.Error as e:
            logger.error(f"Failed to read shared report: {e}")
            raise DatabaseError(operation="get_shared_report") from e

        if report is None:
            raise SharedReportNotFoundError(report_id=report_id)
        if report.is_expired(now):
            logger.info(f"Shared report expired: {report_id}")
            raise SharedReportNotFoundError(report_id=report_id)
        return report

    def list_shared_reports(self, owner: Owner) -> List[SharedReport]:
        """Every report an owner has shared, newest first, expired ones included."""
        if owner is None or not owner.owner_id:
            raise NotAuthenticatedError()
        try:
            return self._repo.list_for_owner(owner.owner_id)
        except sqlite3.Error as e:
            logger.error(f"Failed to list shared reports: {e}")
            raise DatabaseError(operation="list_shared_reports") from e

    def shareable_url(self, report_id: str) -> str:
        """Public link for a shared report."""
        return f"{self._base_url}/shared-report/{report_id}"
