# ABOUTME: One date's paired (current, last-year) archive fetch and its two-of-two join.
# ABOUTME: Tracks a tagged terminal state so failures and timeouts are distinguishable from pending.

import asyncio
import logging
from datetime import date
from enum import Enum

import httpx

from todaylastyear.config import ARCHIVE_URL
from todaylastyear.dates import resolve_last_year
from todaylastyear.errors import FetchError
from todaylastyear.models import ComparisonRecord, Coordinate, TemperaturePoint
from todaylastyear.weather_service import get_first_hourly_temperature

logger = logging.getLogger(__name__)


class JobState(str, Enum):
    PENDING = "pending"
    MATERIALIZED = "materialized"
    DISCARDED = "discarded"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class FetchJob:
    """Fetch one day and the same day last year, then join both results.

    Both sub-fetches are issued as tasks on construction, so a job must be
    created inside a running event loop. They are never reissued.
    """

    def __init__(
        self,
        day: date,
        coordinate: Coordinate,
        client: httpx.AsyncClient,
        archive_url: str = ARCHIVE_URL,
    ):
        self.day = day
        self.last_year = resolve_last_year(day)
        self.state = JobState.PENDING
        self.record: ComparisonRecord | None = None
        self.failed_dates: list[date] = []
        self._client = client
        self._coordinate = coordinate
        self._archive_url = archive_url
        self._current = asyncio.create_task(self._fetch_point(day))
        self._previous = asyncio.create_task(self._fetch_point(self.last_year))

    def __repr__(self) -> str:
        return f"FetchJob({self.day.isoformat()}, state={self.state.value})"

    async def cancel(self) -> None:
        """Cancel whichever sub-fetches are still running and wait for them to unwind."""
        pending = [t for t in (self._current, self._previous) if not t.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if self.state is JobState.PENDING:
            self.state = JobState.CANCELLED

    async def _fetch_point(self, day: date) -> TemperaturePoint | None:
        try:
            return await get_first_hourly_temperature(self._client, self._coordinate, day, self._archive_url)
        except FetchError:
            self.failed_dates.append(day)
            return None

    async def join(self, timeout: float | None = None) -> ComparisonRecord | None:
        """Wait until both sub-fetches are terminal and return the record, if any.

        With a timeout, a job still pending at the deadline has its sub-fetches
        cancelled and ends TIMED_OUT.
        """
        if self.state is not JobState.PENDING:
            return self.record

        try:
            current, previous = await asyncio.wait_for(asyncio.gather(self._current, self._previous), timeout)
        except asyncio.TimeoutError:
            self.state = JobState.TIMED_OUT
            logger.warning("Job %s timed out after %ss", self.day.isoformat(), timeout)
            return None

        if current is None or previous is None:
            self.state = JobState.DISCARDED
            logger.info(
                "Job %s discarded, failed fetches: %s",
                self.day.isoformat(),
                ", ".join(d.isoformat() for d in self.failed_dates),
            )
            return None

        self.record = ComparisonRecord(date=self.day, current_temp=current.celsius, last_year_temp=previous.celsius)
        self.state = JobState.MATERIALIZED
        return self.record
