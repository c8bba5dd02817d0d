"""
Pydantic schemas for analytics, report and shared report API operations.

Analytics value objects are plain dataclasses; pydantic serializes them
directly, so these schemas only add the envelope around them.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from core.datetime_utils import format_iso
from models.shared_report import SharedReport
from services.analytics.aggregation import AggregateVitals
from services.analytics.chart_series import ChartSeries
from services.analytics.insights import Insight
from services.analytics.trends import BloodPressureStatus, VitalTrends


class SummaryResponse(BaseModel):
    """Headline numbers for a window."""
    window_label: str = Field(..., example="Last 7 Days")
    total_records: int = Field(..., example=7)
    date_range: str = Field(..., example="1/9/2025 - 1/15/2025")
    averages: Optional[AggregateVitals] = Field(None, description="Null when the window has no records")
    statistics: Optional[Dict[str, Dict[str, float]]] = Field(
        None, description="Per-field min/max/avg; null when the window has no records"
    )
    average_displays: Dict[str, str] = Field(default_factory=dict, example={"bloodPressure": "120/80"})


class ChartResponse(BaseModel):
    """Chart series for one vital type plus its formatted average."""
    window_label: str = Field(..., example="Last 7 Days")
    average: str = Field(..., description="Formatted average, or N/A when empty", example="120/80")
    series: ChartSeries


class InsightsResponse(BaseModel):
    """Insights and recommendations for a window."""
    window_label: str = Field(..., example="Last 30 Days")
    insights: List[Insight] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class TrendsResponse(BaseModel):
    """Week-over-week changes and the blood pressure category of the last week."""
    trends: Optional[VitalTrends] = Field(None, description="Null unless both weeks have records")
    blood_pressure_status: Optional[BloodPressureStatus] = Field(
        None, description="Category of the last week's average blood pressure"
    )


class SharedReportCreatedResponse(BaseModel):
    """Schema returned after creating a shared report."""
    id: str = Field(..., description="Opaque shared report identifier")
    url: str = Field(..., description="Public link to the report", example="https://healthmates.onrender.com/shared-report/1c9e...")
    created_at: str = Field(..., example="2025-01-15T10:00:00Z")
    expires_at: str = Field(..., example="2025-02-14T10:00:00Z")
    total_records: int = Field(..., example=12)


class SharedReportSummary(BaseModel):
    """One entry in the owner's list of shared reports."""
    id: str
    url: str
    owner_name: str
    window_days: Optional[int] = None
    total_records: int
    created_at: str
    expires_at: str
    expired: bool = Field(..., description="True once the public link stops resolving")

    @classmethod
    def from_report(cls, report: SharedReport, url: str, expired: bool) -> "SharedReportSummary":
        return cls(
            id=report.id,
            url=url,
            owner_name=report.owner_name,
            window_days=report.window_days,
            total_records=report.total_records,
            created_at=format_iso(report.created_at),
            expires_at=format_iso(report.expires_at),
            expired=expired,
        )


class SharedReportResponse(BaseModel):
    """Public view of a shared report: metadata plus the redacted preview."""
    id: str
    owner_name: str
    window_days: Optional[int] = None
    total_records: int
    created_at: str
    expires_at: str
    preview: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_report(cls, report: SharedReport) -> "SharedReportResponse":
        return cls(
            id=report.id,
            owner_name=report.owner_name,
            window_days=report.window_days,
            total_records=report.total_records,
            created_at=format_iso(report.created_at),
            expires_at=format_iso(report.expires_at),
            preview=report.preview,
        )
