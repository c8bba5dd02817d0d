"""
Analytics router - summaries, chart series, insights and trends.

Every endpoint fetches the owner's records once and hands the materialized
set to the analytics engine. A window with no records is a normal
response (null averages, empty insights, placeholder chart), never an
error.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from schemas import ChartResponse, InsightsResponse, SummaryResponse, TrendsResponse
from models.owner import Owner
from services import VitalsService
from services.analytics import (
    aggregate,
    average_display,
    build_chart_series,
    calculate_trends,
    classify_blood_pressure,
    filter_by_range,
    generate_insights,
    generate_recommendations,
    parse_window,
    statistics,
    summarize,
    window_label,
)
from core.auth import get_current_owner, verify_api_key
from core.config import CHART_MAX_POINTS
from core.datetime_utils import utc_now
from core.dependencies import get_vitals_service
from core.vital_registry import VitalType, resolve_vital_type

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/analytics",
    tags=["Analytics"],
    dependencies=[Depends(verify_api_key)],
)

DEFAULT_WINDOW = "30"
DEFAULT_CHART_WINDOW = "7"


@router.get(
    "/summary",
    response_model=SummaryResponse,
    summary="Vitals summary",
    description="Averages, per-field min/max/avg and the covered date range for a trailing window."
)
async def get_summary(
    window: Optional[str] = Query(DEFAULT_WINDOW, description="Trailing window in days, or 'all'"),
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    days = parse_window(window)
    records = vitals_service.records_for_window(owner.owner_id, days)
    summary = summarize(records)
    stats = statistics(records)

    return SummaryResponse(
        window_label=window_label(days),
        total_records=summary.total_records,
        date_range=summary.date_range,
        averages=summary.averages,
        statistics=stats.to_dict() if stats is not None else None,
        average_displays={vt.value: average_display(records, vt) for vt in VitalType},
    )


@router.get(
    "/charts/{vital_type}",
    response_model=ChartResponse,
    summary="Chart series",
    description="Chart-ready series for one vital type (bloodPressure, heartRate, spO2, temperature or an alias)."
)
async def get_chart(
    vital_type: str,
    window: Optional[str] = Query(DEFAULT_CHART_WINDOW, description="Trailing window in days, or 'all'"),
    max_points: int = Query(CHART_MAX_POINTS, ge=1, le=365, description="Maximum number of points"),
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    """
    Raises:
    - 400 Bad Request: Unknown vital type or invalid window
    """
    resolved = resolve_vital_type(vital_type)
    days = parse_window(window)
    records = vitals_service.records_for_window(owner.owner_id, days)

    return ChartResponse(
        window_label=window_label(days),
        average=average_display(records, resolved),
        series=build_chart_series(records, resolved, max_points),
    )


@router.get(
    "/insights",
    response_model=InsightsResponse,
    summary="Insights and recommendations",
    description="Rule-based insights and recommendations over a trailing window."
)
async def get_insights(
    window: Optional[str] = Query(DEFAULT_WINDOW, description="Trailing window in days, or 'all'"),
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    days = parse_window(window)
    records = vitals_service.records_for_window(owner.owner_id, days)

    return InsightsResponse(
        window_label=window_label(days),
        insights=generate_insights(records),
        recommendations=generate_recommendations(records),
    )


@router.get(
    "/trends",
    response_model=TrendsResponse,
    summary="Week-over-week trends",
    description="Change of each average between the previous 7 days and the last 7 days."
)
async def get_trends(
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    now = utc_now()
    records = vitals_service.list_records(owner.owner_id)
    last_week = aggregate(filter_by_range(records, 7, now))

    return TrendsResponse(
        trends=calculate_trends(records, now),
        blood_pressure_status=(
            classify_blood_pressure(last_week.systolic, last_week.diastolic)
            if last_week is not None else None
        ),
    )
