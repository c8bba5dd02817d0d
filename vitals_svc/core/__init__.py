"""
Core module for application configuration, logging, and shared constants.

This module provides:
- Settings: Application configuration via pydantic-settings
- Exceptions: Domain-specific exception classes with HTTP status codes
- Datetime utilities: UTC-first datetime handling and timestamp normalization
- Vital registry: Chartable vital type definitions

Dependency injection functions live in core.dependencies and are imported
from there directly; they pull in repositories and services, which
themselves import from this package.
"""
from core.config import settings, Settings

# Exception classes for consistent error handling
from core.exceptions import (
    VitalsServiceError,
    NotAuthenticatedError,
    RecordNotFoundError,
    InvalidRecordDataError,
    SharedReportNotFoundError,
    InvalidWindowError,
    UnknownVitalTypeError,
    DatabaseError,
    setup_exception_handlers,
)

# UTC datetime utilities
from core.datetime_utils import (
    utc_now,
    to_utc,
    parse_datetime,
    normalize_timestamp,
    format_iso,
    to_db_string,
    from_db_string,
)
from core.config import (
    # Backwards-compatible exports
    DATABASE_DIR,
    DATABASE_FILE,
    DATABASE_PATH,
    API_HOST,
    API_PORT,
    API_RELOAD,
    SHARE_BASE_URL,
    SHARE_EXPIRY_DAYS,
    CHART_MAX_POINTS,
)

# Vital registry exports
from core.vital_registry import (
    VitalType,
    VitalDefinition,
    get_vital,
    list_vitals,
    resolve_vital_type,
    get_insight_color,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Exceptions
    "VitalsServiceError",
    "NotAuthenticatedError",
    "RecordNotFoundError",
    "InvalidRecordDataError",
    "SharedReportNotFoundError",
    "InvalidWindowError",
    "UnknownVitalTypeError",
    "DatabaseError",
    "setup_exception_handlers",
    # Datetime utilities
    "utc_now",
    "to_utc",
    "parse_datetime",
    "normalize_timestamp",
    "format_iso",
    "to_db_string",
    "from_db_string",
    # Backwards-compatible exports
    "DATABASE_DIR",
    "DATABASE_FILE",
    "DATABASE_PATH",
    "API_HOST",
    "API_PORT",
    "API_RELOAD",
    "SHARE_BASE_URL",
    "SHARE_EXPIRY_DAYS",
    "CHART_MAX_POINTS",
    # Vital registry
    "VitalType",
    "VitalDefinition",
    "get_vital",
    "list_vitals",
    "resolve_vital_type",
    "get_insight_color",
]
