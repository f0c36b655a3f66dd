# ABOUTME: Dependency container for the comparison endpoint using Pydantic BaseModel.
# ABOUTME: Holds the shared httpx.AsyncClient, settings, and clock used by the aggregator.

from collections.abc import Callable
from datetime import date

import httpx
from pydantic import BaseModel, ConfigDict

from todaylastyear import __version__
from todaylastyear.config import Settings


class ComparisonDeps(BaseModel):
    """Long-lived collaborators shared by every aggregation run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_client: httpx.AsyncClient
    settings: Settings
    today: Callable[[], date] = date.today


def create_http_client() -> httpx.AsyncClient:
    """Create a plain httpx client.

    No retry transport and no timeout override: a failed request is reported
    once and the httpx default timeout applies.
    """
    return httpx.AsyncClient(headers={"User-Agent": f"todaylastyear/{__version__}"})
