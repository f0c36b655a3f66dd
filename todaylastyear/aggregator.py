# ABOUTME: Fans out the today pair and the weekly fetch jobs, then fans their results back in.
# ABOUTME: The weekly set is assembled behind a single-consumer completion barrier and delivered once.

import asyncio
import logging
from collections.abc import Callable
from datetime import date

import httpx

from todaylastyear.config import Settings
from todaylastyear.dates import resolve_last_year, trailing_days
from todaylastyear.errors import FetchError
from todaylastyear.job import FetchJob
from todaylastyear.models import ComparisonRecord, ComparisonSet, Coordinate
from todaylastyear.store import ComparisonStore
from todaylastyear.weather_service import get_current_conditions, get_first_hourly_temperature

logger = logging.getLogger(__name__)


async def _cancel_pending(tasks: list[asyncio.Task]) -> None:
    """Cancel tasks that are still running and wait until they have unwound."""
    pending = [t for t in tasks if not t.done()]
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)


class CompletionBarrier:
    """Counting join over a known number of jobs.

    Finished jobs are queued by whichever task completed them; only the
    coroutine awaiting `wait()` reads the queue, so the countdown and the
    record accumulator have a single writer.
    """

    def __init__(self, expected: int):
        self._remaining = expected
        self._queue: asyncio.Queue[FetchJob] = asyncio.Queue()

    def report(self, job: FetchJob) -> None:
        self._queue.put_nowait(job)

    async def wait(self) -> ComparisonSet:
        records: list[ComparisonRecord] = []
        while self._remaining:
            job = await self._queue.get()
            self._remaining -= 1
            if job.record is not None:
                records.append(job.record)
        return ComparisonSet.from_records(records)


class Aggregator:
    """Builds today-vs-last-year comparisons for a coordinate."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings | None = None,
        today: Callable[[], date] | None = None,
    ):
        self.client = client
        self.settings = settings or Settings()
        self._today = today or date.today

    async def run(self, coordinate: Coordinate, store: ComparisonStore | None = None) -> ComparisonStore:
        """Run the single-pair and weekly views concurrently and return the filled store."""
        store = store if store is not None else ComparisonStore()
        tasks = [
            asyncio.create_task(self.fetch_today(coordinate, store)),
            asyncio.create_task(self.fetch_weekly(coordinate, store)),
        ]
        try:
            await asyncio.gather(*tasks)
        finally:
            await _cancel_pending(tasks)
        return store

    async def fetch_today(self, coordinate: Coordinate, store: ComparisonStore) -> None:
        """Fetch today's conditions and last year's temperature as two independent publishers."""
        last_year = resolve_last_year(self._today())
        tasks = [
            asyncio.create_task(self._publish_current(coordinate, store)),
            asyncio.create_task(self._publish_last_year(coordinate, last_year, store)),
        ]
        try:
            await asyncio.gather(*tasks)
        finally:
            await _cancel_pending(tasks)

    async def _publish_current(self, coordinate: Coordinate, store: ComparisonStore) -> None:
        try:
            conditions = await get_current_conditions(self.client, coordinate, self.settings.forecast_url)
        except FetchError:
            return
        store.publish_current(conditions)

    async def _publish_last_year(self, coordinate: Coordinate, day: date, store: ComparisonStore) -> None:
        try:
            point = await get_first_hourly_temperature(self.client, coordinate, day, self.settings.archive_url)
        except FetchError:
            return
        store.publish_last_year(point)

    async def fetch_weekly(self, coordinate: Coordinate, store: ComparisonStore) -> ComparisonSet:
        """Compare each of the trailing days with the same day last year.

        Delivers to the store only after every job is terminal. Without a
        job_timeout a sub-fetch that never resolves blocks the delivery.
        """
        days = trailing_days(self._today(), self.settings.trailing_days)
        jobs = [FetchJob(day, coordinate, self.client, self.settings.archive_url) for day in days]
        barrier = CompletionBarrier(len(jobs))

        async def complete(job: FetchJob) -> None:
            try:
                await job.join(self.settings.job_timeout)
            finally:
                barrier.report(job)

        tasks = [asyncio.create_task(complete(job)) for job in jobs]
        try:
            comparisons = await barrier.wait()
            # Every task has reported; re-raise anything that was not a fetch failure.
            await asyncio.gather(*tasks)
        finally:
            # Only does work when the run is cancelled or a job raised.
            await _cancel_pending(tasks)
            for job in jobs:
                await job.cancel()

        logger.info(
            "Weekly run for (%s, %s): %d/%d jobs materialized",
            coordinate.latitude,
            coordinate.longitude,
            len(comparisons),
            len(jobs),
        )
        store.deliver_weekly(comparisons)
        return comparisons
