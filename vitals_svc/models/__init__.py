"""
Domain models for the vitals service.

This module contains internal domain models shared by repositories and services.
"""
from models.owner import Owner
from models.vital_record import VitalRecord, UPDATABLE_FIELDS
from models.shared_report import SharedReport

__all__ = ["Owner", "VitalRecord", "UPDATABLE_FIELDS", "SharedReport"]
