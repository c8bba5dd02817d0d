"""
Service layer for business logic.

This module contains the record and share services. The analytics engine
(services.analytics) and the HTML renderer (services.report) are imported
from their own packages.
"""
from services.vitals_service import VitalsService
from services.share_service import ShareService

__all__ = [
    "VitalsService",
    "ShareService",
]
