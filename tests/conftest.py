# ABOUTME: Shared test fixtures for the comparison aggregator test suite.
# ABOUTME: Provides a fake Open-Meteo backend behind a mocked httpx.AsyncClient.

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from todaylastyear.config import Settings


class FakeOpenMeteo:
    """Answers forecast and archive requests from in-memory data.

    Archive temperatures are keyed by ISO date. Dates in `failures` raise a
    connection error, dates in `hangs` never answer. The key "current" targets
    the forecast request.
    """

    def __init__(self):
        self.current = {"temperature": 18.3, "windspeed": 11.0, "winddirection": 240.0}
        self.temps: dict[str, float] = {}
        self.failures: set[str] = set()
        self.hangs: set[str] = set()
        self.calls: list[tuple[str, dict]] = []
        self.client = AsyncMock(spec=httpx.AsyncClient)
        self.client.get.side_effect = self._get

    async def _get(self, url, params=None):
        self.calls.append((url, params))
        request = httpx.Request("GET", url)
        key = "current" if "current_weather" in params else params["start_date"]
        if key in self.hangs:
            await asyncio.Event().wait()
        if key in self.failures:
            raise httpx.ConnectError("connection refused", request=request)
        if key == "current":
            return httpx.Response(200, json={"current_weather": self.current}, request=request)
        body = {"hourly": {"time": [f"{key}T00:00"], "temperature_2m": [self.temps.get(key, 10.0)]}}
        return httpx.Response(200, json=body, request=request)

    def archive_dates(self) -> list[str]:
        return [params["start_date"] for _, params in self.calls if "start_date" in params]


@pytest.fixture
def open_meteo() -> FakeOpenMeteo:
    return FakeOpenMeteo()


@pytest.fixture
def settings() -> Settings:
    return Settings()
