"""
Report compiler.

Assembles the analytics outputs into document models consumed by the HTML
renderer, the share service and the API. Pure data assembly: no I/O and
no rendering. Every figure in a document comes from the standalone
analytics functions, so a report always agrees with /analytics endpoints
over the same records.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from core.datetime_utils import format_iso, to_utc, utc_now
from models.owner import Owner
from models.vital_record import VitalRecord
from services.analytics.aggregation import (
    AggregateVitals,
    VitalsStatistics,
    aggregate,
    statistics,
)
from services.analytics.chart_series import (
    DEFAULT_MAX_POINTS,
    ChartSeries,
    average_display,
    build_all_chart_series,
)
from services.analytics.filtering import (
    WindowSelector,
    filter_by_range,
    parse_window,
    window_bounds,
    window_label,
)
from services.analytics.insights import Insight, generate_insights, generate_recommendations
from services.analytics.trends import classify_blood_pressure

logger = logging.getLogger(__name__)

REPORT_ROW_LIMIT = 15
SHARE_PREVIEW_ROW_LIMIT = 10

DISCLAIMER = (
    "This report is for informational purposes only and should not replace "
    "professional medical advice. Always consult with your healthcare provider "
    "for medical decisions."
)


# =============================================================================
# DOCUMENT MODELS
# =============================================================================

@dataclass
class ReportRow:
    """One record as listed in the detailed records table."""
    record_id: Optional[str]
    timestamp: datetime
    date: str
    blood_pressure: str
    systolic: int
    diastolic: int
    heart_rate: int
    spo2: int
    temperature: float
    weight: int
    bp_status: str
    bp_status_color: str


@dataclass
class ReportDocument:
    """Everything a full health report shows, ready for any renderer."""
    owner_name: str
    owner_email: Optional[str]
    generated_at: datetime
    window_days: Optional[int]
    window_label: str
    period_start: Optional[datetime]
    period_end: datetime
    total_records: int
    averages: Optional[AggregateVitals]
    statistics: Optional[VitalsStatistics]
    insights: List[Insight]
    recommendations: List[str]
    charts: Dict[str, ChartSeries]
    average_displays: Dict[str, str]
    records: List[ReportRow]
    disclaimer: str = DISCLAIMER

    @property
    def has_data(self) -> bool:
        return self.total_records > 0


@dataclass
class PreviewRow:
    """Redacted record row for public share previews (no id, no weight)."""
    timestamp: datetime
    date: str
    systolic: int
    diastolic: int
    heart_rate: int
    spo2: int
    temperature: float


@dataclass
class SharePreviewDocument:
    """
    Public-safe subset of a report.

    Carries the owner's display name only: no email, no owner or record ids
    and no weight.
    """
    owner_name: str
    generated_at: datetime
    window_days: Optional[int]
    window_label: str
    total_records: int
    averages: Optional[AggregateVitals]
    insights: List[Insight]
    records: List[PreviewRow] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form stored alongside a shared report."""
        averages = None
        if self.averages is not None:
            averages = {
                "blood_pressure": self.averages.blood_pressure,
                "heart_rate": self.averages.heart_rate,
                "spo2": self.averages.spo2,
                "temperature": self.averages.temperature,
                "record_count": self.averages.record_count,
            }
        return {
            "owner_name": self.owner_name,
            "generated_at": format_iso(self.generated_at),
            "window_days": self.window_days,
            "window_label": self.window_label,
            "total_records": self.total_records,
            "averages": averages,
            "insights": [
                {
                    "category": insight.category.value,
                    "topic": insight.topic.value,
                    "title": insight.title,
                    "message": insight.message,
                    "color": insight.color,
                    "icon": insight.icon,
                }
                for insight in self.insights
            ],
            "records": [
                {
                    "timestamp": format_iso(row.timestamp),
                    "date": row.date,
                    "systolic": row.systolic,
                    "diastolic": row.diastolic,
                    "heart_rate": row.heart_rate,
                    "spo2": row.spo2,
                    "temperature": row.temperature,
                }
                for row in self.records
            ],
        }


# =============================================================================
# COMPILERS
# =============================================================================

def _most_recent_first(records: Sequence[VitalRecord], limit: int) -> List[VitalRecord]:
    return sorted(records, key=lambda r: r.timestamp, reverse=True)[:limit]


def _report_row(record: VitalRecord) -> ReportRow:
    status = classify_blood_pressure(record.systolic, record.diastolic)
    return ReportRow(
        record_id=record.id,
        timestamp=record.timestamp,
        date=record.date,
        blood_pressure=record.blood_pressure,
        systolic=record.systolic,
        diastolic=record.diastolic,
        heart_rate=record.heart_rate,
        spo2=record.spo2,
        temperature=record.temperature,
        weight=record.weight,
        bp_status=status.label,
        bp_status_color=status.color,
    )


def _preview_row(record: VitalRecord) -> PreviewRow:
    return PreviewRow(
        timestamp=record.timestamp,
        date=record.date,
        systolic=record.systolic,
        diastolic=record.diastolic,
        heart_rate=record.heart_rate,
        spo2=record.spo2,
        temperature=record.temperature,
    )


def compile_report(
    owner: Owner,
    records: Sequence[VitalRecord],
    window_days: WindowSelector = None,
    now: Optional[datetime] = None,
    max_chart_points: int = DEFAULT_MAX_POINTS,
) -> ReportDocument:
    """
    Compile the full report document for an owner's records.

    Records are filtered to the window first; passing records that were
    already filtered with the same window and ``now`` changes nothing.

    Args:
        owner: Owner the report is for (name and email appear in the header).
        records: The owner's records in any order.
        window_days: Day count or "all" selector.
        now: Generation instant; defaults to the current UTC time.
        max_chart_points: Points kept per chart series.

    Returns:
        ReportDocument: averages, statistics, insights and recommendations
        are exactly what the standalone functions return for the windowed
        records.
    """
    generated_at = to_utc(now) if now is not None else utc_now()
    days = parse_window(window_days)
    windowed = filter_by_range(records, days, generated_at)
    period_start, period_end = window_bounds(days, generated_at)
    if period_start is None and windowed:
        period_start = windowed[0].timestamp

    charts = build_all_chart_series(windowed, max_chart_points)

    document = ReportDocument(
        owner_name=owner.name,
        owner_email=owner.email,
        generated_at=generated_at,
        window_days=days,
        window_label=window_label(days),
        period_start=period_start,
        period_end=period_end,
        total_records=len(windowed),
        averages=aggregate(windowed),
        statistics=statistics(windowed),
        insights=generate_insights(windowed),
        recommendations=generate_recommendations(windowed),
        charts=charts,
        average_displays={key: average_display(windowed, key) for key in charts},
        records=[_report_row(r) for r in _most_recent_first(windowed, REPORT_ROW_LIMIT)],
    )

    logger.info(
        "Compiled report",
        extra={"owner_id": owner.owner_id, "window_days": days, "total_records": document.total_records},
    )
    return document


def compile_share_preview(
    owner: Owner,
    records: Sequence[VitalRecord],
    window_days: WindowSelector = None,
    now: Optional[datetime] = None,
) -> SharePreviewDocument:
    """Redacted preview of a report for public share links."""
    generated_at = to_utc(now) if now is not None else utc_now()
    days = parse_window(window_days)
    windowed = filter_by_range(records, days, generated_at)

    return SharePreviewDocument(
        owner_name=owner.name,
        generated_at=generated_at,
        window_days=days,
        window_label=window_label(days),
        total_records=len(windowed),
        averages=aggregate(windowed),
        insights=generate_insights(windowed),
        records=[_preview_row(r) for r in _most_recent_first(windowed, SHARE_PREVIEW_ROW_LIMIT)],
    )
