"""
Repository for vital record database operations.

This is the record store adapter: every operation is scoped to an explicit
owner id, and every timestamp read back from storage is normalized to a UTC
datetime before it leaves this module.

Architecture:
    VitalRecordRepository is the data access layer for vital records.
    It should be injected via core.dependencies.get_vital_record_repository().

All SQL is encapsulated in this repository - no SQL in service or API layers.
"""
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from repositories.base import Database
from models.vital_record import VitalRecord, UPDATABLE_FIELDS
from core.datetime_utils import from_db_string, normalize_timestamp, to_db_string, utc_now

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, owner_id, systolic, diastolic, heart_rate, spo2, "
    "temperature, weight, timestamp, date, created_at"
)


def _row_to_record(row: Sequence[Any]) -> VitalRecord:
    """Build a VitalRecord from a vital_records row."""
    return VitalRecord(
        id=row[0],
        owner_id=row[1],
        systolic=int(row[2]),
        diastolic=int(row[3]),
        heart_rate=int(row[4]),
        spo2=int(row[5]),
        temperature=float(row[6]),
        weight=int(row[7]),
        timestamp=normalize_timestamp(row[8]),
        date=row[9],
        created_at=from_db_string(row[10]),
    )


class VitalRecordRepository:
    """
    Repository for owner-scoped vital record CRUD operations.

    Listings are always newest first, matching what history screens show.
    """

    def __init__(self, db: Database):
        """
        Initialize the vital record repository.

        Args:
            db: Database instance for data access.
                Injected via core.dependencies.get_vital_record_repository().
        """
        self._db = db

    def create(self, record: VitalRecord) -> VitalRecord:
        """
        Persist a new record and return it with its generated id.

        Args:
            record: Record to store. Its id, if any, is ignored.

        Returns:
            VitalRecord: The stored record with ``id`` and ``created_at`` set.
        """
        record_id = uuid.uuid4().hex
        created_at = utc_now()

        conn = self._db.get_connection()
        try:
            conn.execute(
                f"INSERT INTO vital_records ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    record_id,
                    record.owner_id,
                    record.systolic,
                    record.diastolic,
                    record.heart_rate,
                    record.spo2,
                    record.temperature,
                    record.weight,
                    to_db_string(record.timestamp),
                    record.date,
                    to_db_string(created_at),
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("Vital record inserted", extra={"record_id": record_id, "owner_id": record.owner_id})
        return replace(record, id=record_id, created_at=created_at)

    def list_all(self, owner_id: str, limit: Optional[int] = None) -> List[VitalRecord]:
        """
        Retrieve all records for an owner, newest first.

        Args:
            owner_id: Owner whose records to return.
            limit: Maximum number of records to return (optional).
        """
        query = f"SELECT {_COLUMNS} FROM vital_records WHERE owner_id = ? ORDER BY timestamp DESC, created_at DESC"
        params: List[Any] = [owner_id]
        if limit:
            query += " LIMIT ?"
            params.append(limit)
        return self._fetch(query, params)

    def list_by_range(self, owner_id: str, start: datetime, end: datetime) -> List[VitalRecord]:
        """
        Retrieve an owner's records captured within [start, end], newest first.
        """
        query = (
            f"SELECT {_COLUMNS} FROM vital_records "
            "WHERE owner_id = ? AND timestamp >= ? AND timestamp <= ? "
            "ORDER BY timestamp DESC, created_at DESC"
        )
        return self._fetch(query, [owner_id, to_db_string(start), to_db_string(end)])

    def get_by_id(self, owner_id: str, record_id: str) -> Optional[VitalRecord]:
        """Return the owner's record with this id, or None."""
        rows = self._fetch(
            f"SELECT {_COLUMNS} FROM vital_records WHERE owner_id = ? AND id = ?",
            [owner_id, record_id],
        )
        return rows[0] if rows else None

    def update_fields(self, owner_id: str, record_id: str, fields: Dict[str, Any]) -> bool:
        """
        Apply a partial update to one record.

        Only measurement fields may change; unknown keys are ignored.

        Returns:
            bool: True if a record was updated, False if it does not exist.
        """
        updates = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if not updates:
            return self.get_by_id(owner_id, record_id) is not None

        assignments = ", ".join(f"{column} = ?" for column in updates)
        params = [*updates.values(), owner_id, record_id]

        conn = self._db.get_connection()
        try:
            cursor = conn.execute(
                f"UPDATE vital_records SET {assignments} WHERE owner_id = ? AND id = ?",
                params,
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def delete_by_id(self, owner_id: str, record_id: str) -> bool:
        """
        Delete one record.

        Returns:
            bool: True if a record was deleted, False if it did not exist.
        """
        conn = self._db.get_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM vital_records WHERE owner_id = ? AND id = ?",
                (owner_id, record_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def delete_all(self, owner_id: str) -> int:
        """
        Delete every record owned by ``owner_id`` in one transaction.

        Returns:
            int: Number of records deleted.
        """
        conn = self._db.get_connection()
        try:
            cursor = conn.execute("DELETE FROM vital_records WHERE owner_id = ?", (owner_id,))
            conn.commit()
            deleted = cursor.rowcount
        except Exception as e:
            conn.rollback()
            logger.error(f"Error deleting records for owner: {e}. Transaction rolled back.")
            raise
        finally:
            conn.close()

        logger.info("Deleted all vital records for owner", extra={"owner_id": owner_id, "deleted": deleted})
        return deleted

    def _fetch(self, query: str, params: Sequence[Any]) -> List[VitalRecord]:
        conn = self._db.get_connection()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()
        return [_row_to_record(row) for row in rows]
