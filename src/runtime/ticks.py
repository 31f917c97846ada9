"""Asyncio-backed periodic tick source for the pomodoro state machine."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Callable, Optional


class AsyncioTickSource:
    """Runs callbacks on the running event loop via `call_later`.

    Each subscription re-arms only after its callback returns, so ticks never
    overlap. Cancelling an unknown or finished token does nothing.
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._loop = loop
        self._logger = logger or logging.getLogger("ticks")
        self._handles: dict[int, asyncio.TimerHandle] = {}
        self._tokens = itertools.count(1)

    @property
    def active_count(self) -> int:
        return len(self._handles)

    def subscribe(self, period_ms: int, callback: Callable[[], Any]) -> int:
        if period_ms <= 0:
            raise ValueError("period_ms must be greater than zero")

        loop = self._loop or asyncio.get_running_loop()
        token = next(self._tokens)
        delay = period_ms / 1000.0

        def fire() -> None:
            if token not in self._handles:
                return
            try:
                callback()
            except Exception:
                self._logger.exception("Tick callback failed; stopping subscription %d", token)
                self._handles.pop(token, None)
                return
            # The callback may have cancelled its own subscription.
            if token in self._handles:
                self._handles[token] = loop.call_later(delay, fire)

        self._handles[token] = loop.call_later(delay, fire)
        self._logger.debug("Tick subscription %d started (%d ms)", token, period_ms)
        return token

    def cancel(self, token: Any) -> None:
        handle = self._handles.pop(token, None)
        if handle is None:
            return
        handle.cancel()
        self._logger.debug("Tick subscription %s cancelled", token)
