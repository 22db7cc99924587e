from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import threading
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import ServerConnection, serve
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_ERROR, EVENT_HELLO

from .commands import ClientCommand, CommandParseError, parse_client_command
from .config import HEALTHZ_PATH, STATS_PATH, UIServerConfig
from .events import StickyEventStore, make_event

CommandHandler = Callable[[ClientCommand], None]
StatsProvider = Callable[[], dict[str, Any]]


class _ClientRegistry:
    """Connected presenter sockets; only touched from the server loop."""

    def __init__(self, logger: logging.Logger):
        self._clients: set[ServerConnection] = set()
        self._logger = logger

    def __len__(self) -> int:
        return len(self._clients)

    def add(self, client: ServerConnection) -> None:
        self._clients.add(client)

    def discard(self, client: ServerConnection) -> None:
        self._clients.discard(client)

    async def broadcast(self, message: str) -> None:
        clients = list(self._clients)
        if not clients:
            return

        outcomes = await asyncio.gather(
            *(client.send(message) for client in clients),
            return_exceptions=True,
        )
        for client, outcome in zip(clients, outcomes):
            if isinstance(outcome, Exception):
                self._logger.warning("Dropping presenter after send failure: %s", outcome)
                self._clients.discard(client)

    async def close_all(self) -> None:
        clients = list(self._clients)
        self._clients.clear()
        await asyncio.gather(
            *(client.close(code=1001, reason="Server shutting down") for client in clients),
            return_exceptions=True,
        )


class UIServer:
    """Websocket bridge between the runtime loop and presenters.

    The server runs its own asyncio loop on a daemon thread. ``publish`` may be
    called from any thread; incoming commands are parsed on the server loop and
    handed to ``on_command``, which is expected to only enqueue them.
    """

    def __init__(
        self,
        config: UIServerConfig,
        *,
        on_command: Optional[CommandHandler] = None,
        stats_provider: Optional[StatsProvider] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._on_command = on_command
        self._stats_provider = stats_provider
        self._logger = logger or logging.getLogger("ui_server")
        self._clients = _ClientRegistry(self._logger)
        self._sticky_events = StickyEventStore()

        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._shutdown: Optional[asyncio.Event] = None
        self._ready = threading.Event()
        self._failure: Optional[BaseException] = None

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def websocket_path(self) -> str:
        return self._config.websocket_path

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and self._failure is None

    # --- Lifecycle ------------------------------------------------------
    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._failure = None
        self._ready.clear()
        self._thread = threading.Thread(
            target=self._thread_main,
            name="ui-server",
            daemon=True,
        )
        self._thread.start()

        if not self._ready.wait(timeout_seconds):
            raise RuntimeError(f"UI server did not start within {timeout_seconds:.1f}s")
        if self._failure is not None:
            raise RuntimeError(f"UI server startup failed: {self._failure}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        thread = self._thread
        if thread is None:
            return

        loop, shutdown = self._loop, self._shutdown
        if loop is not None and shutdown is not None:
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(shutdown.set)

        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error("UI server thread did not stop within %.1fs", timeout_seconds)

        self._thread = None
        self._loop = None
        self._shutdown = None

    # --- Outbound events ------------------------------------------------
    def publish(self, event_type: str, **payload: Any) -> None:
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)
        self._schedule_broadcast(message)

    def forget(self, event_type: str) -> None:
        """Stop replaying a sticky event to clients that connect later."""
        self._sticky_events.forget(event_type)

    def _schedule_broadcast(self, message: str) -> None:
        loop = self._loop
        if loop is None or not self.is_running:
            return
        coroutine = self._clients.broadcast(message)
        try:
            future = asyncio.run_coroutine_threadsafe(coroutine, loop)
        except RuntimeError:
            # Loop closed between the check and the submit.
            coroutine.close()
            return
        future.add_done_callback(self._log_broadcast_failure)

    def _log_broadcast_failure(self, future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self._logger.debug("Broadcast failed: %s", error)

    # --- Server loop ----------------------------------------------------
    def _thread_main(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._shutdown = asyncio.Event()
        try:
            loop.run_until_complete(self._serve())
        except Exception as error:  # pragma: no cover - bind failures are environment specific
            self._failure = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
            self._ready.set()
        finally:
            leftovers = asyncio.all_tasks(loop)
            for task in leftovers:
                task.cancel()
            loop.run_until_complete(asyncio.gather(*leftovers, return_exceptions=True))
            loop.close()

    async def _serve(self) -> None:
        async with serve(
            self._handle_connection,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ):
            self._logger.info("UI server listening on %s", self._config.websocket_url)
            self._ready.set()
            await self._shutdown.wait()
            await self._clients.close_all()

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        request = websocket.request
        if request is None or urlsplit(request.path).path != self._config.websocket_path:
            await websocket.close(code=1008, reason="Invalid websocket path")
            return

        self._clients.add(websocket)
        self._logger.info(
            "Presenter connected: %s (%d total)",
            websocket.remote_address,
            len(self._clients),
        )
        try:
            await websocket.send(make_event(EVENT_HELLO, message="Break scheduler connected"))
            for message in self._sticky_events.snapshot():
                await websocket.send(message)
            async for message in websocket:
                await self._handle_client_message(websocket, message)
        except websockets.exceptions.ConnectionClosed:
            self._logger.info("Presenter disconnected: %s", websocket.remote_address)
        finally:
            self._clients.discard(websocket)

    async def _handle_client_message(
        self,
        websocket: ServerConnection,
        message: str | bytes,
    ) -> None:
        self._logger.debug("Received from presenter: %s", message)
        try:
            command = parse_client_command(message)
        except CommandParseError as error:
            self._logger.warning("Rejected presenter command: %s", error)
            await websocket.send(make_event(EVENT_ERROR, message=str(error)))
            return

        if self._on_command is None:
            self._logger.debug("No command handler registered; dropping %s", command.type)
            return
        self._on_command(command)

    # --- Plain HTTP routes ----------------------------------------------
    async def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response | None:
        del connection
        path = urlsplit(request.path).path
        if path == self._config.websocket_path:
            return None
        if path == HEALTHZ_PATH:
            return _text_response(200, "OK", "ok\n")
        if path == STATS_PATH and self._stats_provider is not None:
            return _json_response(self._stats_provider())
        return _text_response(404, "Not Found", "not found\n")


def _text_response(status_code: int, reason_phrase: str, text: str) -> Response:
    return _response(
        status_code,
        reason_phrase,
        text.encode("utf-8"),
        "text/plain; charset=utf-8",
    )


def _json_response(payload: dict[str, Any]) -> Response:
    return _response(
        200,
        "OK",
        json.dumps(payload).encode("utf-8"),
        "application/json; charset=utf-8",
    )


def _response(
    status_code: int,
    reason_phrase: str,
    body: bytes,
    content_type: str,
) -> Response:
    headers = Headers()
    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))
    headers["Cache-Control"] = "no-store"
    return Response(status_code, reason_phrase, headers, body)
