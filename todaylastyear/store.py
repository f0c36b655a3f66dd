# ABOUTME: Observable output of one aggregation run: the today snapshot and the weekly set.
# ABOUTME: Today fields update independently; the weekly ComparisonSet is delivered exactly once.

import asyncio
import logging
from collections.abc import Callable

from todaylastyear.models import ComparisonSet, CurrentConditions, TemperaturePoint, TodaySnapshot

logger = logging.getLogger(__name__)

TodayListener = Callable[[TodaySnapshot], None]
WeeklyListener = Callable[[ComparisonSet], None]


class ComparisonStore:
    """Results handed to the presentation layer.

    Listeners are called synchronously on every today update and once on the
    weekly delivery.
    """

    def __init__(self):
        self.today = TodaySnapshot()
        self.weekly: ComparisonSet | None = None
        self.weekly_deliveries = 0
        self.weekly_ready = asyncio.Event()
        self._today_listeners: list[TodayListener] = []
        self._weekly_listeners: list[WeeklyListener] = []

    def on_today(self, listener: TodayListener) -> None:
        self._today_listeners.append(listener)

    def on_weekly(self, listener: WeeklyListener) -> None:
        self._weekly_listeners.append(listener)

    def publish_current(self, conditions: CurrentConditions) -> None:
        self._update_today(current_temp=conditions.temperature_celsius, current_conditions=conditions)

    def publish_last_year(self, point: TemperaturePoint) -> None:
        self._update_today(last_year_temp=point.celsius)

    def _update_today(self, **fields) -> None:
        self.today = self.today.model_copy(update=fields)
        for listener in self._today_listeners:
            listener(self.today)

    def deliver_weekly(self, comparisons: ComparisonSet) -> None:
        """Publish the weekly set. A store accepts exactly one delivery."""
        if self.weekly is not None:
            raise RuntimeError("weekly comparison already delivered for this run")
        self.weekly = comparisons
        self.weekly_deliveries += 1
        logger.info("Delivered weekly comparison with %d days", len(comparisons))
        self.weekly_ready.set()
        for listener in self._weekly_listeners:
            listener(comparisons)
