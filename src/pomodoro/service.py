"""In-memory pomodoro session state machine driven by a periodic tick source."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Hashable, Literal, Optional

from .constants import (
    ACTION_CANCEL,
    ACTION_START,
    DEFAULT_TICK_PERIOD_MS,
    EVENT_BREAK_COMPLETED,
    EVENT_CANCELLED,
    EVENT_WORK_COMPLETED,
    LONG_BREAK_SECONDS,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
    PHASE_WORK,
    POMODOROS_UNTIL_LONG_BREAK,
    REASON_ALREADY_RUNNING,
    REASON_CANCELLED,
    REASON_NOT_RUNNING,
    REASON_STARTED,
    REASON_UNSUPPORTED_ACTION,
    RECORD_CANCELLED,
    SHORT_BREAK_SECONDS,
    TEST_MODE_SECONDS,
    WORK_SECONDS,
)
from .contracts import PhaseRecorderLike, TickSourceLike

PomodoroPhase = Literal["work", "shortBreak", "longBreak"]
PhaseEventKind = Literal["work_completed", "break_completed", "cancelled"]


@dataclass(frozen=True)
class PhaseDurations:
    """Fixed per-phase countdown lengths in seconds."""
    work: int = WORK_SECONDS
    short_break: int = SHORT_BREAK_SECONDS
    long_break: int = LONG_BREAK_SECONDS

    def __post_init__(self) -> None:
        for name in ("work", "short_break", "long_break"):
            if int(getattr(self, name)) <= 0:
                raise ValueError(f"{name} duration must be greater than zero")

    @classmethod
    def for_mode(cls, test_mode: bool) -> "PhaseDurations":
        if test_mode:
            return cls(
                work=TEST_MODE_SECONDS,
                short_break=TEST_MODE_SECONDS,
                long_break=TEST_MODE_SECONDS,
            )
        return cls()

    def seconds_for(self, phase: PomodoroPhase) -> int:
        if phase == PHASE_SHORT_BREAK:
            return self.short_break
        if phase == PHASE_LONG_BREAK:
            return self.long_break
        return self.work


@dataclass(frozen=True)
class PomodoroSnapshot:
    """Immutable session snapshot exposed to the runtime and UI publishers."""
    phase: PomodoroPhase
    remaining_seconds: int
    total_seconds: int
    is_running: bool
    completed_work_count: int

    @property
    def progress(self) -> float:
        elapsed = self.total_seconds - self.remaining_seconds
        return max(0.0, min(1.0, elapsed / self.total_seconds))


@dataclass(frozen=True)
class PhaseEvent:
    """Terminal outcome of a phase: completion or user cancellation."""
    kind: PhaseEventKind
    phase: PomodoroPhase

    @property
    def was_cancelled(self) -> bool:
        return self.kind == EVENT_CANCELLED

    @property
    def record_type(self) -> str:
        if self.was_cancelled:
            return RECORD_CANCELLED
        return self.phase


@dataclass(frozen=True)
class PomodoroActionResult:
    """Result envelope returned after applying a start or cancel command."""
    action: str
    accepted: bool
    reason: str
    snapshot: PomodoroSnapshot
    event: Optional[PhaseEvent] = None


@dataclass(frozen=True)
class PomodoroTick:
    """Tick payload; `event` is set on the tick that finishes a phase."""
    snapshot: PomodoroSnapshot
    event: Optional[PhaseEvent] = None

    @property
    def completed(self) -> bool:
        return self.event is not None


PhaseCompletedHook = Callable[[PomodoroPhase, bool], None]
TickListener = Callable[[PomodoroTick], None]


class PomodoroTimer:
    """Work/break cycle state machine.

    The timer owns the only tick subscription. Every terminal transition is
    written to the recorder before the phase flips and before listeners or
    the completion hook run, so observers never see an unrecorded outcome.
    """

    def __init__(
        self,
        *,
        recorder: PhaseRecorderLike,
        tick_source: TickSourceLike,
        durations: Optional[PhaseDurations] = None,
        tick_period_ms: int = DEFAULT_TICK_PERIOD_MS,
        on_phase_completed: Optional[PhaseCompletedHook] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if tick_period_ms <= 0:
            raise ValueError("tick_period_ms must be greater than zero")

        self._recorder = recorder
        self._tick_source = tick_source
        self._durations = durations or PhaseDurations()
        self._tick_period_ms = int(tick_period_ms)
        self._on_phase_completed = on_phase_completed
        self._logger = logger or logging.getLogger("pomodoro")
        self._listeners: list[TickListener] = []

        self._phase: PomodoroPhase = PHASE_WORK
        self._total_seconds = self._durations.work
        self._remaining_seconds = self._total_seconds
        self._tick_token: Optional[Hashable] = None
        self._completed_work_count = 0

    @property
    def is_running(self) -> bool:
        return self._tick_token is not None

    def add_listener(self, listener: TickListener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> PomodoroSnapshot:
        return PomodoroSnapshot(
            phase=self._phase,
            remaining_seconds=self._remaining_seconds,
            total_seconds=self._total_seconds,
            is_running=self.is_running,
            completed_work_count=self._completed_work_count,
        )

    def start(self) -> PomodoroActionResult:
        return self.apply(ACTION_START)

    def cancel(self) -> PomodoroActionResult:
        return self.apply(ACTION_CANCEL)

    def apply(self, action: str) -> PomodoroActionResult:
        if action == ACTION_START:
            if self.is_running:
                return self._result(action, False, REASON_ALREADY_RUNNING)

            self._tick_token = self._tick_source.subscribe(self._tick_period_ms, self.tick)
            self._logger.info(
                "Pomodoro started: phase=%s remaining=%ss",
                self._phase,
                self._remaining_seconds,
            )
            return self._result(action, True, REASON_STARTED)

        if action == ACTION_CANCEL:
            if not self.is_running:
                return self._result(action, False, REASON_NOT_RUNNING)

            cancelled_phase = self._phase
            self._stop_ticking()
            event = PhaseEvent(kind=EVENT_CANCELLED, phase=cancelled_phase)
            self._record(event)
            # Cancelling always returns to work, discarding break progress.
            self._enter(PHASE_WORK)
            self._logger.info(
                "Pomodoro cancelled: phase=%s completed_work=%d",
                cancelled_phase,
                self._completed_work_count,
            )
            self._fire_completed(event)
            return self._result(action, True, REASON_CANCELLED, event=event)

        return self._result(action, False, REASON_UNSUPPORTED_ACTION)

    def tick(self) -> Optional[PomodoroTick]:
        """Advance the countdown by one second; the tick source callback."""
        if not self.is_running:
            return None

        if self._remaining_seconds > 1:
            self._remaining_seconds -= 1
            self._logger.debug(
                "Pomodoro tick: phase=%s remaining=%ss",
                self._phase,
                self._remaining_seconds,
            )
            tick = PomodoroTick(snapshot=self.snapshot())
            self._notify(tick)
            return tick

        finished_phase = self._phase
        self._stop_ticking()
        if finished_phase == PHASE_WORK:
            event = PhaseEvent(kind=EVENT_WORK_COMPLETED, phase=finished_phase)
            self._record(event)
            self._completed_work_count += 1
            if self._completed_work_count % POMODOROS_UNTIL_LONG_BREAK == 0:
                next_phase: PomodoroPhase = PHASE_LONG_BREAK
            else:
                next_phase = PHASE_SHORT_BREAK
        else:
            event = PhaseEvent(kind=EVENT_BREAK_COMPLETED, phase=finished_phase)
            self._record(event)
            next_phase = PHASE_WORK

        self._enter(next_phase)
        self._logger.info(
            "Pomodoro phase completed: phase=%s next=%s completed_work=%d",
            finished_phase,
            next_phase,
            self._completed_work_count,
        )
        tick = PomodoroTick(snapshot=self.snapshot(), event=event)
        self._fire_completed(event)
        self._notify(tick)
        return tick

    def _enter(self, phase: PomodoroPhase) -> None:
        self._phase = phase
        self._total_seconds = self._durations.seconds_for(phase)
        self._remaining_seconds = self._total_seconds

    def _stop_ticking(self) -> None:
        token = self._tick_token
        self._tick_token = None
        if token is not None:
            self._tick_source.cancel(token)

    def _record(self, event: PhaseEvent) -> None:
        try:
            self._recorder.record(event.record_type)
        except OSError as error:
            self._logger.error(
                "Failed to persist %s record: %s",
                event.record_type,
                error,
            )

    def _fire_completed(self, event: PhaseEvent) -> None:
        if self._on_phase_completed is None:
            return
        try:
            self._on_phase_completed(event.phase, event.was_cancelled)
        except Exception:
            self._logger.exception("Phase completion hook failed for %s", event.phase)

    def _notify(self, tick: PomodoroTick) -> None:
        for listener in tuple(self._listeners):
            listener(tick)

    def _result(
        self,
        action: str,
        accepted: bool,
        reason: str,
        *,
        event: Optional[PhaseEvent] = None,
    ) -> PomodoroActionResult:
        return PomodoroActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self.snapshot(),
            event=event,
        )
