"""Navigable date cursor over daily statistics, clamped at today."""

from __future__ import annotations

import datetime as dt
from typing import Callable, Optional

from .records import DailyCounts
from .store import StatisticsStore


class DateCursor:
    def __init__(
        self,
        store: StatisticsStore,
        *,
        today_fn: Optional[Callable[[], dt.date]] = None,
    ):
        self._store = store
        self._today_fn = today_fn or store.today
        self._current = self._today_fn()

    @property
    def current(self) -> dt.date:
        return self._current

    @property
    def can_go_forward(self) -> bool:
        return self._current < self._today_fn()

    def step(self, offset: int) -> DailyCounts:
        """Move by `offset` days; never past today."""
        target = self._current + dt.timedelta(days=offset)
        self._current = min(target, self._today_fn())
        return self.counts()

    def reset(self) -> DailyCounts:
        self._current = self._today_fn()
        return self.counts()

    def counts(self) -> DailyCounts:
        return self._store.derive_counts(self._current)
