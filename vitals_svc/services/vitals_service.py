"""
Service layer for vital record operations.

This service contains the owner-scoped business rules around the record
store and hands materialized record sets to the analytics engine.

Architecture:
    API Layer (routers) → VitalsService → VitalRecordRepository → Database

Dependency Injection:
    VitalsService receives its repository via constructor injection.
    Use core.dependencies.get_vitals_service() in routers with Depends().
"""
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from repositories import VitalRecordRepository
from models.vital_record import VitalRecord, UPDATABLE_FIELDS
from core.datetime_utils import utc_now
from core.exceptions import (
    DatabaseError,
    InvalidRecordDataError,
    NotAuthenticatedError,
    RecordNotFoundError,
)
from services.analytics.filtering import WindowSelector, filter_by_range

logger = logging.getLogger(__name__)


@contextmanager
def _storage(operation: str) -> Iterator[None]:
    """Translate sqlite3 failures into DatabaseError."""
    try:
        yield
    except sqlite3.Error as e:
        logger.error(f"Database error during {operation}: {e}")
        raise DatabaseError(operation=operation) from e


def _require_owner(owner_id: Optional[str]) -> str:
    if not owner_id or not owner_id.strip():
        raise NotAuthenticatedError()
    return owner_id


class VitalsService:
    """
    Service layer for vital record operations.

    Every operation requires an owner id and only ever sees that owner's
    records.
    """

    def __init__(self, record_repository: VitalRecordRepository):
        """
        Initialize the vitals service.

        Args:
            record_repository: VitalRecordRepository instance for data access.
                               Injected via core.dependencies.get_vitals_service().
        """
        self._repo = record_repository

    def add_record(self, owner_id: Optional[str], data: Dict[str, Any]) -> VitalRecord:
        """
        Store a new measurement snapshot.

        Args:
            owner_id: Owner the record belongs to.
            data: Measurement fields plus an optional ``timestamp``
                  (defaults to now) and optional ``date``.

        Returns:
            VitalRecord: The stored record with its generated id.

        Raises:
            NotAuthenticatedError: If owner_id is missing.
            InvalidRecordDataError: If a measurement is missing or the
                timestamp cannot be parsed.
        """
        owner_id = _require_owner(owner_id)

        missing = [name for name in UPDATABLE_FIELDS if data.get(name) is None]
        if missing:
            raise InvalidRecordDataError(f"Missing measurements: {', '.join(missing)}")

        try:
            record = VitalRecord(
                owner_id=owner_id,
                systolic=data["systolic"],
                diastolic=data["diastolic"],
                heart_rate=data["heart_rate"],
                spo2=data["spo2"],
                temperature=data["temperature"],
                weight=data["weight"],
                timestamp=data.get("timestamp") or utc_now(),
                date=data.get("date") or "",
            )
        except ValueError as e:
            raise InvalidRecordDataError(f"Invalid timestamp: {e}") from e

        with _storage("add_record"):
            created = self._repo.create(record)

        logger.info(f"Vital record created: {created.id}", extra={"owner_id": owner_id})
        return created

    def list_records(self, owner_id: Optional[str], limit: Optional[int] = None) -> List[VitalRecord]:
        """All of an owner's records, newest first."""
        owner_id = _require_owner(owner_id)
        with _storage("list_records"):
            return self._repo.list_all(owner_id, limit=limit)

    def list_records_between(
        self,
        owner_id: Optional[str],
        start: datetime,
        end: datetime,
    ) -> List[VitalRecord]:
        """An owner's records captured within [start, end], newest first."""
        owner_id = _require_owner(owner_id)
        if start > end:
            raise InvalidRecordDataError("start must not be after end")
        with _storage("list_records_between"):
            return self._repo.list_by_range(owner_id, start, end)

    def records_for_window(
        self,
        owner_id: Optional[str],
        window: WindowSelector = None,
        now: Optional[datetime] = None,
    ) -> List[VitalRecord]:
        """
        An owner's records within a trailing window, oldest first.

        This is the materialized record set handed to the analytics engine.
        """
        return filter_by_range(self.list_records(owner_id), window, now)

    def get_record(self, owner_id: Optional[str], record_id: str) -> VitalRecord:
        """
        Get one record.

        Raises:
            RecordNotFoundError: If the owner has no record with this id.
        """
        owner_id = _require_owner(owner_id)
        with _storage("get_record"):
            record = self._repo.get_by_id(owner_id, record_id)
        if record is None:
            raise RecordNotFoundError(record_id=record_id)
        return record

    def update_record(
        self,
        owner_id: Optional[str],
        record_id: str,
        changes: Dict[str, Any],
    ) -> VitalRecord:
        """
        Apply a partial update to the measurement fields of one record.

        Raises:
            InvalidRecordDataError: If no updatable field is given, or the
                result would have diastolic above systolic.
            RecordNotFoundError: If the owner has no record with this id.
        """
        updates = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS and v is not None}
        if not updates:
            raise InvalidRecordDataError("No fields to update")

        current = self.get_record(owner_id, record_id)
        updated = current.with_changes(updates)
        if updated.diastolic > updated.systolic:
            raise InvalidRecordDataError("Diastolic pressure cannot exceed systolic pressure")

        with _storage("update_record"):
            found = self._repo.update_fields(current.owner_id, record_id, updates)
        if not found:
            raise RecordNotFoundError(record_id=record_id)

        logger.info(f"Vital record updated: {record_id}", extra={"fields": sorted(updates)})
        return updated

    def delete_record(self, owner_id: Optional[str], record_id: str) -> None:
        """
        Delete one record.

        Raises:
            RecordNotFoundError: If the owner has no record with this id.
        """
        owner_id = _require_owner(owner_id)
        with _storage("delete_record"):
            deleted = self._repo.delete_by_id(owner_id, record_id)
        if not deleted:
            raise RecordNotFoundError(record_id=record_id)
        logger.info(f"Vital record deleted: {record_id}")

    def delete_all_records(self, owner_id: Optional[str]) -> int:
        """Delete every record of an owner. Returns the number deleted."""
        owner_id = _require_owner(owner_id)
        with _storage("delete_all_records"):
            return self._repo.delete_all(owner_id)
