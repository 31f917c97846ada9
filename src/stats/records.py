"""Persisted daily record log types and their JSON layout."""

from __future__ import annotations

import datetime as dt
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pomodoro.constants import (
    BREAK_PHASES,
    RECORD_CANCELLED,
    RECORD_TYPES,
    RECORD_WORK,
)

from .dates import format_timestamp, parse_timestamp

_logger = logging.getLogger("stats.records")


@dataclass(frozen=True)
class PhaseRecord:
    """One terminal phase outcome: `work`, `shortBreak`, `longBreak` or `cancelled`."""
    kind: str
    timestamp: dt.datetime

    def to_payload(self) -> dict[str, str]:
        return {"type": self.kind, "timestamp": format_timestamp(self.timestamp)}


@dataclass(frozen=True)
class DailyCounts:
    completed: int = 0
    breaks: int = 0
    cancelled: int = 0


@dataclass(frozen=True)
class DailyStats:
    """Record log of one local date plus any legacy counters stored beside it.

    `has_record_log` is set when a non-empty `records` array was stored, even
    if none of its entries could be decoded.
    """
    day: dt.date
    records: tuple[PhaseRecord, ...] = ()
    legacy_counts: Optional[DailyCounts] = None
    has_record_log: bool = False

    def appended(self, record: PhaseRecord) -> "DailyStats":
        return DailyStats(
            day=self.day,
            records=self.records + (record,),
            legacy_counts=self.legacy_counts,
            has_record_log=True,
        )


def count_records(records: tuple[PhaseRecord, ...]) -> DailyCounts:
    return DailyCounts(
        completed=sum(1 for record in records if record.kind == RECORD_WORK),
        breaks=sum(1 for record in records if record.kind in BREAK_PHASES),
        cancelled=sum(1 for record in records if record.kind == RECORD_CANCELLED),
    )


def derive_counts(stats: DailyStats) -> DailyCounts:
    """Counts from the record log; legacy counters only when no log was stored."""
    if stats.records or stats.has_record_log:
        return count_records(stats.records)
    if stats.legacy_counts is not None:
        return stats.legacy_counts
    return DailyCounts()


def encode_daily_stats(stats: DailyStats) -> str:
    counts = count_records(stats.records)
    return json.dumps(
        {
            "completed": counts.completed,
            "breaks": counts.breaks,
            "cancelled": counts.cancelled,
            "records": [record.to_payload() for record in stats.records],
        }
    )


def decode_daily_stats(day: dt.date, raw: Optional[str]) -> DailyStats:
    """Parse a stored entry; anything malformed reads as an empty day."""
    if not raw:
        return DailyStats(day=day)

    try:
        payload = json.loads(raw)
    except ValueError as error:
        _logger.warning("Ignoring unreadable stats entry for %s: %s", day, error)
        return DailyStats(day=day)

    if not isinstance(payload, Mapping):
        _logger.warning("Ignoring stats entry for %s: root is not an object", day)
        return DailyStats(day=day)

    raw_records = payload.get("records")
    if raw_records is None:
        raw_records = []
    if not isinstance(raw_records, list):
        _logger.warning("Ignoring stats entry for %s: records is not a list", day)
        return DailyStats(day=day)

    records = tuple(
        record
        for record in (_decode_record(day, item) for item in raw_records)
        if record is not None
    )

    legacy_counts: Optional[DailyCounts] = None
    if any(field in payload for field in ("completed", "breaks", "cancelled")):
        legacy_counts = DailyCounts(
            completed=_as_count(payload.get("completed")),
            breaks=_as_count(payload.get("breaks")),
            cancelled=_as_count(payload.get("cancelled")),
        )

    return DailyStats(
        day=day,
        records=records,
        legacy_counts=legacy_counts,
        has_record_log=bool(raw_records),
    )


def _decode_record(day: dt.date, item: Any) -> Optional[PhaseRecord]:
    if not isinstance(item, Mapping):
        _logger.warning("Skipping non-object record on %s", day)
        return None

    kind = item.get("type")
    if kind not in RECORD_TYPES:
        _logger.warning("Skipping record with unknown type %r on %s", kind, day)
        return None

    timestamp = item.get("timestamp")
    if not isinstance(timestamp, str):
        _logger.warning("Skipping %s record without timestamp on %s", kind, day)
        return None
    try:
        parsed = parse_timestamp(timestamp)
    except ValueError:
        _logger.warning("Skipping %s record with bad timestamp %r on %s", kind, timestamp, day)
        return None

    return PhaseRecord(kind=kind, timestamp=parsed)


def _as_count(value: Any) -> int:
    # bool is an int subclass but never a valid counter.
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(0, value)
