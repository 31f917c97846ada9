from __future__ import annotations

import datetime as dt
from typing import Any, Optional, Protocol, Sequence

from contracts.ui_protocol import (
    EVENT_CHART,
    EVENT_NOTIFICATION,
    EVENT_STATS,
    EVENT_TIMER,
)
from pomodoro import PomodoroSnapshot
from stats import ChartBar, DailyCounts

from .messages import NOTIFICATION_TITLE, format_time, phase_label


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        ...


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        if self._ui_server:
            self._ui_server.publish_state(state, message=message, **payload)

    def publish_timer_update(
        self,
        snapshot: PomodoroSnapshot,
        *,
        action: str,
        accepted: Optional[bool] = None,
        reason: str = "",
    ) -> None:
        payload: dict[str, Any] = {
            "action": action,
            "phase": snapshot.phase,
            "label": phase_label(snapshot.phase),
            "display": format_time(snapshot.remaining_seconds),
            "remaining_seconds": snapshot.remaining_seconds,
            "total_seconds": snapshot.total_seconds,
            "progress": round(snapshot.progress, 4),
            "running": snapshot.is_running,
        }
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        self.publish(EVENT_TIMER, **payload)

    def publish_stats_update(
        self,
        day: dt.date,
        counts: DailyCounts,
        *,
        can_go_forward: bool,
    ) -> None:
        self.publish(
            EVENT_STATS,
            date=day.isoformat(),
            completed=counts.completed,
            breaks=counts.breaks,
            cancelled=counts.cancelled,
            can_go_forward=can_go_forward,
        )

    def publish_chart_update(self, bars: Sequence[ChartBar]) -> None:
        self.publish(EVENT_CHART, bars=[bar.to_payload() for bar in bars])

    def publish_notification(self, message: str, *, phase: str) -> None:
        self.publish(
            EVENT_NOTIFICATION,
            title=NOTIFICATION_TITLE,
            body=message,
            phase=phase,
        )
