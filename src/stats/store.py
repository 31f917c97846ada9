"""Per-day append-only phase record log with derived counters."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from pomodoro.constants import RECORD_TYPES

from .backends import KeyValueStore
from .dates import date_range, local_date_key, local_now, stats_key
from .records import (
    DailyCounts,
    DailyStats,
    PhaseRecord,
    decode_daily_stats,
    derive_counts,
    encode_daily_stats,
)

DEFAULT_WINDOW_DAYS = 7


@dataclass(frozen=True)
class WindowCount:
    date: dt.date
    completed_count: int


class StatisticsStore:
    """Reads and appends daily logs stored as JSON under `stats-YYYY-MM-DD` keys.

    Dates are always local calendar dates in `tz` (system zone when omitted).
    """

    def __init__(
        self,
        backend: KeyValueStore,
        *,
        now_fn: Optional[Callable[[], dt.datetime]] = None,
        tz: Optional[dt.tzinfo] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._backend = backend
        self._tz = tz
        self._now_fn = now_fn or (lambda: local_now(self._tz))
        self._logger = logger or logging.getLogger("stats")

    def today(self) -> dt.date:
        return local_date_key(self._now_fn(), self._tz)

    def read(self, day: dt.date) -> DailyStats:
        try:
            raw = self._backend.get(stats_key(day))
        except OSError as error:
            self._logger.warning("Reading stats for %s failed, treating as empty: %s", day, error)
            return DailyStats(day=day)
        return decode_daily_stats(day, raw)

    def append(
        self,
        day: dt.date,
        kind: str,
        *,
        timestamp: Optional[dt.datetime] = None,
    ) -> PhaseRecord:
        if kind not in RECORD_TYPES:
            raise ValueError(f"Unknown record type: {kind!r}")

        record = PhaseRecord(kind=kind, timestamp=timestamp or self._now_fn())
        updated = self.read(day).appended(record)
        self._backend.set(stats_key(day), encode_daily_stats(updated))
        self._logger.info(
            "Recorded %s on %s (%d records)",
            kind,
            day.isoformat(),
            len(updated.records),
        )
        return record

    def record(self, kind: str) -> PhaseRecord:
        """Append `kind` stamped with the current time under its local date."""
        now = self._now_fn()
        return self.append(local_date_key(now, self._tz), kind, timestamp=now)

    def derive_counts(self, day: dt.date) -> DailyCounts:
        return derive_counts(self.read(day))

    def window_counts(
        self,
        end: dt.date,
        days: int = DEFAULT_WINDOW_DAYS,
    ) -> list[WindowCount]:
        return [
            WindowCount(date=day, completed_count=self.derive_counts(day).completed)
            for day in date_range(end, days)
        ]
