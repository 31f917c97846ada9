"""Web UI websocket event, state and command constants."""

from __future__ import annotations

# Websocket event types
EVENT_HELLO = "hello"
EVENT_STATE_UPDATE = "state_update"
EVENT_TIMER = "timer"
EVENT_STATS = "stats"
EVENT_CHART = "chart"
EVENT_NOTIFICATION = "notification"
EVENT_ERROR = "error"

# UI runtime states
STATE_IDLE = "idle"
STATE_RUNNING = "running"

# Commands sent by the page
COMMAND_START = "start"
COMMAND_CANCEL = "cancel"
COMMAND_PREV_DAY = "prev_day"
COMMAND_NEXT_DAY = "next_day"
COMMAND_TODAY = "today"
COMMAND_SYNC = "sync"

COMMANDS: frozenset[str] = frozenset(
    {
        COMMAND_START,
        COMMAND_CANCEL,
        COMMAND_PREV_DAY,
        COMMAND_NEXT_DAY,
        COMMAND_TODAY,
        COMMAND_SYNC,
    }
)

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_STATE_UPDATE,
        EVENT_TIMER,
        EVENT_STATS,
        EVENT_CHART,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_TIMER,
    EVENT_STATS,
    EVENT_CHART,
    EVENT_STATE_UPDATE,
)
