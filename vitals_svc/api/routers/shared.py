"""
Shared reports router - public read access to shared report snapshots.

No API key is required: possession of the report id is the credential.
Expired and unknown ids both return 404.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from schemas import SharedReportResponse
from services import ShareService
from core.dependencies import get_share_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/shared-reports",
    tags=["Shared Reports"],
)


@router.get(
    "/{report_id}",
    response_model=SharedReportResponse,
    summary="Shared report preview",
    description="Redacted preview of a shared report: display name, window, averages, insights and recent readings."
)
async def get_shared_report(
    report_id: str,
    share_service: ShareService = Depends(get_share_service)
):
    """
    Raises:
    - 404 Not Found: If the id is unknown or the report has expired
    """
    return SharedReportResponse.from_report(share_service.get_shared_report(report_id))


@router.get(
    "/{report_id}/html",
    response_class=HTMLResponse,
    summary="Shared report page",
    description="The HTML page rendered when the report was shared."
)
async def get_shared_report_html(
    report_id: str,
    share_service: ShareService = Depends(get_share_service)
):
    report = share_service.get_shared_report(report_id)
    return HTMLResponse(content=report.html_content)
