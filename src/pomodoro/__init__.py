from .service import (
    PhaseDurations,
    PhaseEvent,
    PomodoroActionResult,
    PomodoroPhase,
    PomodoroSnapshot,
    PomodoroTick,
    PomodoroTimer,
)

__all__ = [
    "PhaseDurations",
    "PhaseEvent",
    "PomodoroActionResult",
    "PomodoroPhase",
    "PomodoroSnapshot",
    "PomodoroTick",
    "PomodoroTimer",
]
