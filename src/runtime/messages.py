"""Display text builders for timer phases and completion notifications."""

from __future__ import annotations

from pomodoro.constants import PHASE_LONG_BREAK, PHASE_SHORT_BREAK, PHASE_WORK

NOTIFICATION_TITLE = "PomodoroTech"
WORK_COMPLETED_MESSAGE = "Work session completed! Time for a break."
BREAK_COMPLETED_MESSAGE = "Break is over! Time to work."

_PHASE_LABELS = {
    PHASE_WORK: "Work",
    PHASE_SHORT_BREAK: "Short Break",
    PHASE_LONG_BREAK: "Long Break",
}


def format_time(seconds: int) -> str:
    """Format a countdown as `M:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{remainder:02d}"


def phase_label(phase: str) -> str:
    return _PHASE_LABELS.get(phase, phase)


def completion_message(phase: str, was_cancelled: bool) -> str | None:
    """Notification body for a finished phase; cancellations are silent."""
    if was_cancelled:
        return None
    if phase == PHASE_WORK:
        return WORK_COMPLETED_MESSAGE
    return BREAK_COMPLETED_MESSAGE
