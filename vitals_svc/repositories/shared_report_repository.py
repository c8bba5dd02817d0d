"""
Repository for shared report snapshots.

Stores the rendered HTML and the redacted preview (as JSON text) of each
shared report. Rows are insert-only: there is no update and no purge.
"""
import json
import logging
from typing import Any, List, Optional, Sequence

from repositories.base import Database
from models.shared_report import SharedReport
from core.datetime_utils import normalize_timestamp, to_db_string

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, owner_id, owner_name, window_days, total_records, "
    "created_at, expires_at, html_content, preview"
)


def _row_to_report(row: Sequence[Any]) -> SharedReport:
    return SharedReport(
        id=row[0],
        owner_id=row[1],
        owner_name=row[2],
        window_days=row[3],
        total_records=int(row[4]),
        created_at=normalize_timestamp(row[5]),
        expires_at=normalize_timestamp(row[6]),
        html_content=row[7],
        preview=json.loads(row[8]) if row[8] else {},
    )


class SharedReportRepository:
    """Repository for SharedReport persistence."""

    def __init__(self, db: Database):
        self._db = db

    def save(self, report: SharedReport) -> SharedReport:
        """Insert a shared report snapshot."""
        conn = self._db.get_connection()
        try:
            conn.execute(
                f"INSERT INTO shared_reports ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    report.id,
                    report.owner_id,
                    report.owner_name,
                    report.window_days,
                    report.total_records,
                    to_db_string(report.created_at),
                    to_db_string(report.expires_at),
                    report.html_content,
                    json.dumps(report.preview, default=str, ensure_ascii=False),
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("Shared report inserted", extra={"report_id": report.id, "owner_id": report.owner_id})
        return report

    def get_by_id(self, report_id: str) -> Optional[SharedReport]:
        """Return the report with this id regardless of expiry, or None."""
        rows = self._fetch(f"SELECT {_COLUMNS} FROM shared_reports WHERE id = ?", [report_id])
        return rows[0] if rows else None

    def list_for_owner(self, owner_id: str) -> List[SharedReport]:
        """All reports created by an owner, newest first (expired ones included)."""
        return self._fetch(
            f"SELECT {_COLUMNS} FROM shared_reports WHERE owner_id = ? ORDER BY created_at DESC",
            [owner_id],
        )

    def _fetch(self, query: str, params: Sequence[Any]) -> List[SharedReport]:
        conn = self._db.get_connection()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()
        return [_row_to_report(row) for row in rows]
