# ABOUTME: Runtime settings loaded from environment variables and an optional .env file.
# ABOUTME: Holds the Open-Meteo endpoints, the trailing window size, and the optional job deadline.

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"

ENV_PREFIX = "TODAYLASTYEAR_"


class Settings(BaseModel):
    """Configuration for one aggregator instance."""

    forecast_url: str = FORECAST_URL
    archive_url: str = ARCHIVE_URL
    trailing_days: int = Field(default=7, ge=1, le=7)
    # None keeps the unbounded wait: a hung sub-fetch stalls the weekly delivery.
    job_timeout: float | None = Field(default=None, gt=0)
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Build Settings from TODAYLASTYEAR_* environment variables, loading .env first."""
    load_dotenv()
    values = {}
    for field in Settings.model_fields:
        raw = os.environ.get(f"{ENV_PREFIX}{field.upper()}")
        if raw:
            values[field] = raw
    return Settings(**values)
