"""
Vitals router - owner-scoped vital record endpoints.

All endpoints require API key authentication and an X-Owner-Id header.

Architecture:
    HTTP Request → Router (this file) → VitalsService → VitalRecordRepository → Database

Dependency Injection:
    Services are injected via FastAPI's Depends() mechanism.
    The DI chain is defined in core/dependencies.py.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from schemas import (
    DeleteAllResponse,
    VitalRecordCreate,
    VitalRecordResponse,
    VitalRecordUpdate,
)
from models.owner import Owner
from services import VitalsService
from core.auth import get_current_owner, verify_api_key
from core.datetime_utils import utc_now
from core.dependencies import get_vitals_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/vitals",
    tags=["Vitals"],
    dependencies=[Depends(verify_api_key)],  # Require API key for all endpoints
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@router.post(
    "",
    response_model=VitalRecordResponse,
    status_code=201,
    summary="Record vital signs",
    description="Store one measurement snapshot (blood pressure, heart rate, SpO2, temperature, weight) for the owner."
)
async def create_vital_record(
    record: VitalRecordCreate,
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    """
    Create a vital record.

    - **timestamp**: optional; defaults to now. Its UTC offset decides the record's calendar date.

    Raises:
    - 401 Unauthorized: If no owner is given (NotAuthenticatedError)
    - 422 Unprocessable Entity: If a measurement is out of range
    """
    created = vitals_service.add_record(owner.owner_id, record.model_dump())
    return VitalRecordResponse.from_record(created)


@router.get(
    "",
    response_model=List[VitalRecordResponse],
    summary="List vital records",
    description="Retrieve the owner's records, newest first, optionally limited to a trailing window or an explicit range."
)
async def list_vital_records(
    window: Optional[str] = Query(None, description="Trailing window in days, or 'all'", example="7"),
    start: Optional[datetime] = Query(None, description="Range start (ISO 8601)"),
    end: Optional[datetime] = Query(None, description="Range end (ISO 8601)"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number of records to return (1-1000)"),
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    """
    Get the owner's records.

    Query Parameters:
    - **window**: trailing window ('7', '30', '90', 'all'); ignored when start/end are given
    - **start** / **end**: explicit capture-time range
    - **limit**: maximum number of records to return
    """
    if start is not None or end is not None:
        records = vitals_service.list_records_between(
            owner.owner_id,
            start or _EPOCH,
            end or utc_now(),
        )
    elif window is not None:
        records = list(reversed(vitals_service.records_for_window(owner.owner_id, window)))
    else:
        records = vitals_service.list_records(owner.owner_id)

    if limit:
        records = records[:limit]
    return [VitalRecordResponse.from_record(r) for r in records]


@router.delete(
    "",
    response_model=DeleteAllResponse,
    summary="Delete all vital records",
    description="Delete every record belonging to the owner."
)
async def delete_all_vital_records(
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    deleted = vitals_service.delete_all_records(owner.owner_id)
    return DeleteAllResponse(deleted=deleted)


@router.get(
    "/{record_id}",
    response_model=VitalRecordResponse,
    summary="Get a vital record",
)
async def get_vital_record(
    record_id: str,
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    """
    Raises:
    - 404 Not Found: If the owner has no record with this id
    """
    return VitalRecordResponse.from_record(vitals_service.get_record(owner.owner_id, record_id))


@router.patch(
    "/{record_id}",
    response_model=VitalRecordResponse,
    summary="Update a vital record",
    description="Partially update the measurement fields of a record. Capture time cannot be changed."
)
async def update_vital_record(
    record_id: str,
    changes: VitalRecordUpdate,
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    """
    Raises:
    - 400 Bad Request: If no field is given, or diastolic would exceed systolic
    - 404 Not Found: If the owner has no record with this id
    """
    updated = vitals_service.update_record(
        owner.owner_id,
        record_id,
        changes.model_dump(exclude_none=True),
    )
    return VitalRecordResponse.from_record(updated)


@router.delete(
    "/{record_id}",
    status_code=204,
    summary="Delete a vital record",
)
async def delete_vital_record(
    record_id: str,
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    """
    Raises:
    - 404 Not Found: If the owner has no record with this id
    """
    vitals_service.delete_record(owner.owner_id, record_id)
    return Response(status_code=204)
