"""Websocket event serialization, command decoding and sticky state replay."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import COMMANDS, STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


class CommandError(ValueError):
    """Raised when an incoming websocket message is not a known command."""


def make_event(
    event_type: str,
    *,
    now_fn: Callable[[], datetime] | None = None,
    **payload: Any,
) -> str:
    """Serialize an event payload with type and timestamp for websocket delivery."""
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    return json.dumps(
        {
            "type": event_type,
            "timestamp": now.isoformat(),
            **payload,
        }
    )


def parse_command(message: str | bytes) -> str:
    """Decode `{"command": "<name>"}` (or a bare command name) from the page."""
    if isinstance(message, bytes):
        try:
            message = message.decode("utf-8")
        except UnicodeDecodeError as error:
            raise CommandError("Command is not valid UTF-8") from error

    text = message.strip()
    command: Optional[Any] = text
    if text.startswith("{"):
        try:
            decoded = json.loads(text)
        except ValueError as error:
            raise CommandError(f"Malformed command JSON: {error}") from error
        if not isinstance(decoded, dict):
            raise CommandError("Command payload must be an object")
        command = decoded.get("command")

    if not isinstance(command, str) or command not in COMMANDS:
        raise CommandError(f"Unknown command: {command!r}")
    return command


class StickyEventStore:
    """Cache of the latest sticky events, replayed to newly connected clients."""
    def __init__(self):
        self._events: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> None:
        if event_type not in STICKY_EVENT_TYPES:
            return
        with self._lock:
            self._events[event_type] = message

    def snapshot(self) -> list[str]:
        with self._lock:
            return [self._events[key] for key in STICKY_EVENT_ORDER if key in self._events]
