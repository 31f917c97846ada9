from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import ServerConnection, broadcast
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_ERROR, EVENT_HELLO, EVENT_STATE_UPDATE, STATE_IDLE

from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH, UIServerConfig
from .events import CommandError, StickyEventStore, make_event, parse_command
from .static_files import guess_content_type, resolve_static_file

CommandHandler = Callable[[str], Any]

_TEXT = "text/plain; charset=utf-8"
_HTML = "text/html; charset=utf-8"


class UIServer:
    """Threaded asyncio server for the static UI, websocket events and commands.

    Commands and `call_soon` callbacks run on the server loop thread, which is
    also where tick sources created on that loop fire.
    """

    def __init__(
        self,
        config: UIServerConfig,
        logger: Optional[logging.Logger] = None,
        command_handler: Optional[CommandHandler] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_server")
        self._command_handler = command_handler
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_async: Optional[asyncio.Event] = None
        self._started = threading.Event()
        self._startup_error: Optional[Exception] = None
        self._clients: set[ServerConnection] = set()
        self._sticky_events = StickyEventStore()
        self._index_html = Path(self._config.index_file).read_bytes()

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._startup_error is None
        )

    def set_command_handler(self, handler: CommandHandler) -> None:
        self._command_handler = handler

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._startup_error = None
        self._started.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=True, name="ui-server")
        self._thread.start()

        if not self._started.wait(timeout_seconds):
            raise RuntimeError(f"UI server did not start within {timeout_seconds:.1f}s")
        if self._startup_error is not None:
            raise RuntimeError(f"UI server startup failed: {self._startup_error}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        if self._thread is None:
            return

        if self._loop and self._stop_async:
            self._loop.call_soon_threadsafe(self._stop_async.set)

        self._thread.join(timeout=timeout_seconds)
        if self._thread.is_alive():
            self._logger.error("UI server thread did not stop within %.1fs", timeout_seconds)

        self._thread = None
        self._loop = None
        self._stop_async = None

    def call_soon(self, callback: Callable[[], Any]) -> None:
        """Run `callback` on the server loop thread."""
        if self._loop is None:
            raise RuntimeError("UI server is not running")
        self._loop.call_soon_threadsafe(self._run_callback, callback)

    def publish_state(self, state: str, *, message: Optional[str] = None, **payload) -> None:
        event_payload = {"state": state, **payload}
        if message:
            event_payload["message"] = message
        self.publish(EVENT_STATE_UPDATE, **event_payload)

    def publish(self, event_type: str, **payload) -> None:
        """Remember sticky events and broadcast to every open client.

        Safe to call from any thread; delivery happens on the loop thread.
        """
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)
        loop = self._loop
        if loop is None or not self.is_running:
            return
        # The loop raises RuntimeError once it is closed during shutdown.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(broadcast, self._clients, message)

    def _run_callback(self, callback: Callable[[], Any]) -> None:
        try:
            callback()
        except Exception:
            self._logger.exception("UI server callback failed")

    def _run_loop(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)
        self._stop_async = asyncio.Event()

        try:
            self._loop.run_until_complete(self._serve())
        except Exception as error:  # pragma: no cover - exercised manually
            self._startup_error = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
            self._started.set()
        finally:
            pending = asyncio.all_tasks(self._loop)
            for task in pending:
                task.cancel()
            with contextlib.suppress(Exception):
                self._loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            self._loop.close()

    async def _serve(self) -> None:
        # Leaving the context closes open client connections with 1001.
        async with websockets.serve(
            self._handler,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ):
            self._logger.info(
                "UI server running at http://%s:%d (websocket: %s)",
                self._config.host,
                self._config.port,
                self._config.websocket_path,
            )
            self._started.set()
            await self._stop_async.wait()

    async def _handler(self, websocket: ServerConnection) -> None:
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            await websocket.send(
                make_event(EVENT_HELLO, state=STATE_IDLE, message="UI websocket connected")
            )
            for message in self._sticky_events.snapshot():
                await websocket.send(message)
            # Join the broadcast set only after the replay so events stay ordered.
            self._clients.add(websocket)
            async for message in websocket:
                await self._dispatch(websocket, message)
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            self._clients.discard(websocket)
            self._logger.info("Client disconnected: %s", websocket.remote_address)

    async def _dispatch(self, websocket: ServerConnection, message: str | bytes) -> None:
        self._logger.debug("Received from UI: %s", message)
        try:
            command = parse_command(message)
        except CommandError as error:
            self._logger.warning("Rejected UI message: %s", error)
            await websocket.send(make_event(EVENT_ERROR, message=str(error)))
            return

        if self._command_handler is None:
            self._logger.warning("No command handler registered; dropping %s", command)
            return

        try:
            self._command_handler(command)
        except Exception as error:
            self._logger.exception("Command %s failed", command)
            await websocket.send(make_event(EVENT_ERROR, message=f"{command} failed: {error}"))

    def _process_request(self, connection: ServerConnection, request: Request) -> Response | None:
        del connection  # Unused in static routing.
        path = urlsplit(request.path).path

        if path == self._config.websocket_path:
            return None
        if path in (ROOT_PATH, INDEX_PATH):
            return _response(200, "OK", self._index_html, _HTML)
        if path == HEALTHZ_PATH:
            return _response(200, "OK", b"ok\n", _TEXT)

        static_file = resolve_static_file(self._config.ui_root, path)
        if static_file is None:
            return _response(404, "Not Found", b"not found\n", _TEXT)
        return _response(200, "OK", static_file.read_bytes(), guess_content_type(static_file))


def _response(status_code: int, reason_phrase: str, body: bytes, content_type: str) -> Response:
    headers = Headers()
    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))
    headers["Cache-Control"] = "no-store"
    return Response(status_code, reason_phrase, headers, body)
