"""
Reports router - compiled report documents, HTML export and share links.

All endpoints require API key authentication and an X-Owner-Id header.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from schemas import SharedReportCreatedResponse, SharedReportSummary
from models.owner import Owner
from services import ShareService, VitalsService
from services.analytics import ReportDocument, compile_report
from services.report import ReportRenderer
from core.auth import get_current_owner, verify_api_key
from core.config import CHART_MAX_POINTS
from core.datetime_utils import format_iso, utc_now
from core.dependencies import get_report_renderer, get_share_service, get_vitals_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/reports",
    tags=["Reports"],
    dependencies=[Depends(verify_api_key)],
)

DEFAULT_WINDOW = "30"


@router.get(
    "",
    response_model=ReportDocument,
    summary="Compiled report",
    description="The full report document (averages, statistics, insights, recommendations, "
                "chart series and the latest records) as JSON."
)
async def get_report(
    window: Optional[str] = Query(DEFAULT_WINDOW, description="Trailing window in days, or 'all'"),
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service)
):
    records = vitals_service.list_records(owner.owner_id)
    return compile_report(owner, records, window, max_chart_points=CHART_MAX_POINTS)


@router.get(
    "/html",
    response_class=HTMLResponse,
    summary="HTML report export",
    description="The compiled report rendered as a standalone HTML page, returned as a download."
)
async def export_report_html(
    window: Optional[str] = Query(DEFAULT_WINDOW, description="Trailing window in days, or 'all'"),
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service),
    renderer: ReportRenderer = Depends(get_report_renderer)
):
    now = utc_now()
    records = vitals_service.list_records(owner.owner_id)
    document = compile_report(owner, records, window, now, max_chart_points=CHART_MAX_POINTS)
    html_content = renderer.render_html(document)

    filename = f"vitals-report-{now.strftime('%Y-%m-%d')}.html"
    return HTMLResponse(
        content=html_content,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/share",
    response_model=SharedReportCreatedResponse,
    status_code=201,
    summary="Create a share link",
    description="Snapshot the report for a window and return a public link that expires after 30 days."
)
async def create_share_link(
    window: Optional[str] = Query(DEFAULT_WINDOW, description="Trailing window in days, or 'all'"),
    owner: Owner = Depends(get_current_owner),
    vitals_service: VitalsService = Depends(get_vitals_service),
    share_service: ShareService = Depends(get_share_service)
):
    records = vitals_service.list_records(owner.owner_id)
    report = share_service.create_shared_report(owner, records, window)

    return SharedReportCreatedResponse(
        id=report.id,
        url=share_service.shareable_url(report.id),
        created_at=format_iso(report.created_at),
        expires_at=format_iso(report.expires_at),
        total_records=report.total_records,
    )


@router.get(
    "/share",
    response_model=List[SharedReportSummary],
    summary="List share links",
    description="Every report the owner has shared, newest first, including expired ones."
)
async def list_share_links(
    owner: Owner = Depends(get_current_owner),
    share_service: ShareService = Depends(get_share_service)
):
    now = utc_now()
    return [
        SharedReportSummary.from_report(
            report,
            url=share_service.shareable_url(report.id),
            expired=report.is_expired(now),
        )
        for report in share_service.list_shared_reports(owner)
    ]
