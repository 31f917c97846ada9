"""Protocols for the collaborators the pomodoro state machine drives."""

from __future__ import annotations

from typing import Any, Callable, Hashable, Protocol


class TickSourceLike(Protocol):
    """Periodic callback scheduler; at most one subscription is used at a time."""
    def subscribe(self, period_ms: int, callback: Callable[[], Any]) -> Hashable:
        ...

    def cancel(self, token: Hashable) -> None:
        ...


class PhaseRecorderLike(Protocol):
    """Durable sink for phase outcomes, keyed by the local date of the call."""
    def record(self, kind: str) -> Any:
        ...
