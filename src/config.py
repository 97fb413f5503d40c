"""Configuration for the HAR report service."""

from __future__ import annotations

from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    api_prefix: str = "/api/v1"
    api_version: str = "1.0.0"
    debug: bool = False
    log_format: str = "text"

    # Service-to-service auth; empty disables the check
    api_key: str = ""

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Analysis backend
    analysis_api_base: str = "http://localhost:8000"
    analysis_timeout: float = 300.0  # large archives take minutes to analyze
    analysis_max_retries: int = 3
    analysis_retry_delay: float = 1.0  # seconds
    default_file_path: str = "trace.har"

    # Report
    resort_rankings: bool = False
    display_timezone: str = "UTC"

    model_config = {"env_prefix": "HAR_REPORT_"}


settings = Settings()


def display_tz() -> tzinfo:
    """Resolve the configured display timezone, falling back to UTC."""
    try:
        return ZoneInfo(settings.display_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc
