"""Local calendar date helpers shared by record filing, reads and the weekly window."""

from __future__ import annotations

import datetime as dt
from typing import Optional

STATS_KEY_PREFIX = "stats-"


def local_now(tz: Optional[dt.tzinfo] = None) -> dt.datetime:
    """Return an aware "now" in `tz`, or in the system local zone."""
    if tz is not None:
        return dt.datetime.now(tz)
    return dt.datetime.now().astimezone()


def local_date_key(instant: dt.datetime, tz: Optional[dt.tzinfo] = None) -> dt.date:
    """Return the local calendar date of `instant`.

    Aware instants are converted to `tz` (system local zone when omitted)
    before the date is taken; naive instants are treated as already local.
    """
    if instant.tzinfo is None:
        return instant.date()
    if tz is not None:
        return instant.astimezone(tz).date()
    return instant.astimezone().date()


def date_key(day: dt.date) -> str:
    return day.strftime("%Y-%m-%d")


def stats_key(day: dt.date) -> str:
    return f"{STATS_KEY_PREFIX}{date_key(day)}"


def date_range(end: dt.date, days: int) -> list[dt.date]:
    """Return `days` consecutive dates ending at `end`, oldest first."""
    if days <= 0:
        raise ValueError("days must be greater than zero")
    return [end - dt.timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def format_timestamp(instant: dt.datetime) -> str:
    """Serialize as UTC ISO-8601 with milliseconds and a `Z` suffix.

    Sub-millisecond parts round up, so the stored value never precedes `instant`.
    """
    if instant.tzinfo is None:
        instant = instant.astimezone()
    utc = instant.astimezone(dt.timezone.utc)
    utc += dt.timedelta(microseconds=(1000 - utc.microsecond % 1000) % 1000)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(text: str) -> dt.datetime:
    raw = text.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    parsed = dt.datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed
