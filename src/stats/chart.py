"""Bar model for the rolling seven-day completed-pomodoro chart."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Sequence

from .store import WindowCount

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MAX_BAR_HEIGHT = 100
MIN_BAR_HEIGHT = 4


@dataclass(frozen=True)
class ChartBar:
    date: dt.date
    label: str
    count: int
    height: int
    is_today: bool

    def to_payload(self) -> dict[str, object]:
        return {
            "date": self.date.isoformat(),
            "label": self.label,
            "value": self.count,
            "height": self.height,
            "today": self.is_today,
        }


def weekly_chart(window: Sequence[WindowCount]) -> list[ChartBar]:
    """Scale counts against the busiest day; the last entry is today."""
    max_count = max([entry.completed_count for entry in window] + [1])
    last_index = len(window) - 1
    bars = []
    for index, entry in enumerate(window):
        # Half-up rounding, not round()'s banker's rounding.
        height = int(entry.completed_count / max_count * MAX_BAR_HEIGHT + 0.5)
        bars.append(
            ChartBar(
                date=entry.date,
                label=WEEKDAY_LABELS[entry.date.weekday()],
                count=entry.completed_count,
                height=height if height > 0 else MIN_BAR_HEIGHT,
                is_today=index == last_index,
            )
        )
    return bars
