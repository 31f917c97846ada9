"""Runtime wiring between UI commands, the pomodoro timer and daily statistics."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from contracts.ui_protocol import (
    COMMAND_CANCEL,
    COMMAND_NEXT_DAY,
    COMMAND_PREV_DAY,
    COMMAND_START,
    COMMAND_SYNC,
    COMMAND_TODAY,
    EVENT_ERROR,
    STATE_IDLE,
    STATE_RUNNING,
)
from pomodoro import PhaseDurations, PomodoroActionResult, PomodoroTick, PomodoroTimer
from pomodoro.constants import (
    ACTION_COMPLETED,
    ACTION_SYNC,
    ACTION_TICK,
    DEFAULT_TICK_PERIOD_MS,
    REASON_COMPLETED,
    REASON_STARTUP,
    REASON_TICK,
)
from pomodoro.contracts import TickSourceLike
from stats import DateCursor, StatisticsStore, weekly_chart

from .messages import completion_message
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    store: StatisticsStore
    tick_source: TickSourceLike
    ui: RuntimeUIPublisher
    durations: PhaseDurations = PhaseDurations()
    tick_period_ms: int = DEFAULT_TICK_PERIOD_MS


class RuntimeEngine:
    """Routes page commands and timer ticks to UI updates.

    All entry points are expected to run on the one event loop thread that
    also drives the tick source.
    """

    def __init__(self, bootstrap: RuntimeBootstrap):
        self._logger = bootstrap.logger
        self._store = bootstrap.store
        self._ui = bootstrap.ui
        self._cursor = DateCursor(bootstrap.store)
        self._timer = PomodoroTimer(
            recorder=bootstrap.store,
            tick_source=bootstrap.tick_source,
            durations=bootstrap.durations,
            tick_period_ms=bootstrap.tick_period_ms,
            on_phase_completed=self._handle_phase_completed,
            logger=logging.getLogger("pomodoro"),
        )
        self._timer.add_listener(self._handle_tick)

    @property
    def timer(self) -> PomodoroTimer:
        return self._timer

    @property
    def cursor(self) -> DateCursor:
        return self._cursor

    def publish_all(self, *, action: str = ACTION_SYNC, reason: str = REASON_STARTUP) -> None:
        snapshot = self._timer.snapshot()
        self._ui.publish_timer_update(snapshot, action=action, reason=reason)
        self._publish_stats()
        self._publish_chart()
        self._ui.publish_state(STATE_RUNNING if snapshot.is_running else STATE_IDLE)

    def handle_command(self, command: str) -> bool:
        """Apply one page command; returns whether it changed anything."""
        if command in (COMMAND_START, COMMAND_CANCEL):
            result = self._timer.apply(command)
            self._publish_action_result(result)
            return result.accepted

        if command == COMMAND_PREV_DAY:
            self._cursor.step(-1)
            self._publish_stats()
            return True

        if command == COMMAND_NEXT_DAY:
            before = self._cursor.current
            self._cursor.step(1)
            self._publish_stats()
            return self._cursor.current != before

        if command == COMMAND_TODAY:
            self._cursor.reset()
            self._publish_stats()
            return True

        if command == COMMAND_SYNC:
            self.publish_all(reason=COMMAND_SYNC)
            return True

        self._logger.warning("Ignoring unknown UI command: %r", command)
        self._ui.publish(EVENT_ERROR, message=f"Unknown command: {command}")
        return False

    def _publish_action_result(self, result: PomodoroActionResult) -> None:
        self._ui.publish_timer_update(
            result.snapshot,
            action=result.action,
            accepted=result.accepted,
            reason=result.reason,
        )
        if not result.accepted:
            self._logger.debug("Command %s rejected: %s", result.action, result.reason)
            return

        if result.event is not None:
            self._publish_stats()
            self._publish_chart()
        self._ui.publish_state(STATE_RUNNING if result.snapshot.is_running else STATE_IDLE)

    def _handle_tick(self, tick: PomodoroTick) -> None:
        if not tick.completed:
            self._ui.publish_timer_update(
                tick.snapshot,
                action=ACTION_TICK,
                accepted=True,
                reason=REASON_TICK,
            )
            return

        self._ui.publish_timer_update(
            tick.snapshot,
            action=ACTION_COMPLETED,
            accepted=True,
            reason=REASON_COMPLETED,
        )
        self._publish_stats()
        self._publish_chart()
        self._ui.publish_state(STATE_IDLE)

    def _handle_phase_completed(self, phase: str, was_cancelled: bool) -> None:
        message = completion_message(phase, was_cancelled)
        if message is None:
            return
        self._logger.info("Notifying: %s", message)
        self._ui.publish_notification(message, phase=phase)

    def _publish_stats(self) -> None:
        self._ui.publish_stats_update(
            self._cursor.current,
            self._cursor.counts(),
            can_go_forward=self._cursor.can_go_forward,
        )

    def _publish_chart(self) -> None:
        window = self._store.window_counts(self._store.today())
        self._ui.publish_chart_update(weekly_chart(window))


def build_runtime(
    *,
    store: StatisticsStore,
    tick_source: TickSourceLike,
    ui: RuntimeUIPublisher,
    durations: Optional[PhaseDurations] = None,
    tick_period_ms: int = DEFAULT_TICK_PERIOD_MS,
    logger: Optional[logging.Logger] = None,
) -> RuntimeEngine:
    return RuntimeEngine(
        RuntimeBootstrap(
            logger=logger or logging.getLogger("runtime"),
            store=store,
            tick_source=tick_source,
            ui=ui,
            durations=durations or PhaseDurations(),
            tick_period_ms=tick_period_ms,
        )
    )
