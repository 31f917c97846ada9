"""Phase, record, action and reason constants used by the pomodoro state machine."""

from __future__ import annotations

WORK_SECONDS = 25 * 60
SHORT_BREAK_SECONDS = 5 * 60
LONG_BREAK_SECONDS = 15 * 60
TEST_MODE_SECONDS = 1
POMODOROS_UNTIL_LONG_BREAK = 4
DEFAULT_TICK_PERIOD_MS = 1000

PHASE_WORK = "work"
PHASE_SHORT_BREAK = "shortBreak"
PHASE_LONG_BREAK = "longBreak"

BREAK_PHASES: frozenset[str] = frozenset({PHASE_SHORT_BREAK, PHASE_LONG_BREAK})

# Persisted record types; completed phases are stored under their phase name.
RECORD_WORK = PHASE_WORK
RECORD_SHORT_BREAK = PHASE_SHORT_BREAK
RECORD_LONG_BREAK = PHASE_LONG_BREAK
RECORD_CANCELLED = "cancelled"

RECORD_TYPES: frozenset[str] = frozenset(
    {RECORD_WORK, RECORD_SHORT_BREAK, RECORD_LONG_BREAK, RECORD_CANCELLED}
)

EVENT_WORK_COMPLETED = "work_completed"
EVENT_BREAK_COMPLETED = "break_completed"
EVENT_CANCELLED = "cancelled"

ACTION_START = "start"
ACTION_CANCEL = "cancel"
ACTION_TICK = "tick"
ACTION_COMPLETED = "completed"
ACTION_SYNC = "sync"

REASON_STARTED = "started"
REASON_CANCELLED = "cancelled"
REASON_ALREADY_RUNNING = "already_running"
REASON_NOT_RUNNING = "not_running"
REASON_UNSUPPORTED_ACTION = "unsupported_action"
REASON_TICK = "tick"
REASON_COMPLETED = "completed"
REASON_STARTUP = "startup"
