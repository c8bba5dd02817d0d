"""
Repository layer for database access.

This module contains all database access operations, encapsulating SQL and data persistence logic.
"""
from repositories.base import Database
from repositories.vital_record_repository import VitalRecordRepository
from repositories.shared_report_repository import SharedReportRepository

__all__ = [
    "Database",
    "VitalRecordRepository",
    "SharedReportRepository",
]
