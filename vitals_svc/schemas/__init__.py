"""
Pydantic schemas for API request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from schemas.vital_record import (
    VitalRecordCreate,
    VitalRecordUpdate,
    VitalRecordResponse,
    DeleteAllResponse,
)
from schemas.report import (
    SummaryResponse,
    ChartResponse,
    InsightsResponse,
    TrendsResponse,
    SharedReportCreatedResponse,
    SharedReportSummary,
    SharedReportResponse,
)

__all__ = [
    # Vital record schemas
    "VitalRecordCreate",
    "VitalRecordUpdate",
    "VitalRecordResponse",
    "DeleteAllResponse",
    # Analytics and report schemas
    "SummaryResponse",
    "ChartResponse",
    "InsightsResponse",
    "TrendsResponse",
    "SharedReportCreatedResponse",
    "SharedReportSummary",
    "SharedReportResponse",
]
