"""
Configuration module for Vitals Service API.
Uses Pydantic BaseSettings for validation - app fails fast if required config is missing.
"""
import logging
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Required fields will cause the app to fail fast if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    vitals_svc_db_dir: str = Field(default="data", description="Database directory")
    vitals_svc_db_file: str = Field(default="vitals.db", description="Database filename")
    vitals_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # API Configuration
    vitals_svc_host: str = Field(default="0.0.0.0", description="API host")
    vitals_svc_port: int = Field(default=8000, description="API port")
    vitals_svc_reload: bool = Field(default=False, description="Enable hot reload")

    # Sharing Configuration
    vitals_svc_share_base_url: str = Field(
        default="https://healthmates.onrender.com",
        description="Public base URL used to build shareable report links",
    )
    vitals_svc_share_expiry_days: int = Field(default=30, ge=1, description="Days before a shared report expires")

    # Analytics Configuration
    vitals_svc_chart_max_points: int = Field(default=7, ge=1, description="Default number of points per chart")

    # Logging Configuration
    vitals_svc_log_level: str = Field(default="INFO", description="Root log level")
    vitals_svc_log_format: str = Field(default="json", description="Log format: 'json' or 'text'")

    # API Authentication Configuration
    vitals_svc_api_key: str = Field(
        ...,  # Required - no default means fail fast if missing
        description="API key for authenticating requests to the Vitals Service API",
        min_length=32,  # Enforce minimum key length for security
    )

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Warn about settings that are valid but probably unintended."""
        if self.vitals_svc_log_format.lower() not in ("json", "text"):
            logger.warning(
                "Unknown VITALS_SVC_LOG_FORMAT, falling back to json",
                extra={"log_format": self.vitals_svc_log_format}
            )
            self.vitals_svc_log_format = "json"

        if not self.vitals_svc_share_base_url.startswith(("http://", "https://")):
            logger.warning(
                "VITALS_SVC_SHARE_BASE_URL has no scheme - shared links may not open",
                extra={"share_base_url": self.vitals_svc_share_base_url}
            )

        return self

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.vitals_svc_db_dir) / self.vitals_svc_db_file)

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.vitals_svc_db_dir).mkdir(parents=True, exist_ok=True)


# Create global settings instance - fails fast if required config is missing
settings = Settings()

# Ensure directories exist on import
settings.ensure_directories()

# Backwards-compatible exports for existing code
DATABASE_DIR = settings.vitals_svc_db_dir
DATABASE_FILE = settings.vitals_svc_db_file
DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.vitals_svc_db_busy_timeout

API_HOST = settings.vitals_svc_host
API_PORT = settings.vitals_svc_port
API_RELOAD = settings.vitals_svc_reload

SHARE_BASE_URL = settings.vitals_svc_share_base_url.rstrip("/")
SHARE_EXPIRY_DAYS = settings.vitals_svc_share_expiry_days

CHART_MAX_POINTS = settings.vitals_svc_chart_max_points

LOG_LEVEL = settings.vitals_svc_log_level
LOG_FORMAT = settings.vitals_svc_log_format

API_KEY = settings.vitals_svc_api_key
