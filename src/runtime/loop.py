"""Runtime orchestration loop for scheduler ticks and presenter commands."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Any, Callable, Optional

from breaks import BreakScheduler, BreakStartedEvent, MenuRefreshEvent
from contracts.ui_protocol import EVENT_ERROR
from server import ClientCommand, UIServer

from .commands import RuntimeCommandDispatcher
from .ticks import EventDependencies, SchedulerEventProcessor
from .ui import RuntimeUIPublisher

MAX_POLL_SECONDS = 0.25


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup and shutdown flow."""
    setup_signal_handlers: Callable[["RuntimeEngine"], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine.

    ``event_queue`` carries both scheduler events (through the scheduler's
    ``QueueEventPublisher``) and ``ClientCommand`` items put by the UI server.
    """
    logger: logging.Logger
    scheduler: BreakScheduler
    event_queue: Queue[Any]
    ui_server: Optional[UIServer]
    tick_interval_seconds: float
    hooks: Optional[RuntimeHooks] = None
    clock: Callable[[], float] = time.monotonic


class RuntimeEngine:
    """Main loop that ticks the scheduler and applies queued commands in order."""
    def __init__(self, bootstrap: RuntimeBootstrap):
        if bootstrap.tick_interval_seconds <= 0:
            raise ValueError("tick_interval_seconds must be > 0")

        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._scheduler = bootstrap.scheduler
        self._queue = bootstrap.event_queue
        self._clock = bootstrap.clock
        self._stop_requested = threading.Event()
        self._next_tick_at: Optional[float] = None

        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._dispatcher = RuntimeCommandDispatcher(
            logger=self._logger,
            scheduler=self._scheduler,
            ui=self._ui,
        )
        self._event_processor = SchedulerEventProcessor(
            EventDependencies(logger=self._logger, ui=self._ui)
        )

    @property
    def ui(self) -> RuntimeUIPublisher:
        return self._ui

    def submit(self, command: ClientCommand) -> None:
        """Queue a presenter command; safe to call from any thread."""
        self._queue.put(command)

    def request_stop(self) -> None:
        self._stop_requested.set()

    def run(self) -> int:
        hooks = self._bootstrap.hooks
        if hooks is not None:
            hooks.setup_signal_handlers(self)

        try:
            self._logger.info("Starting break scheduler...")
            self._scheduler.activate()
            self.process_pending()

            while not self._stop_requested.is_set():
                self.run_due_tick()
                item = self._poll(self._poll_timeout())
                if item is not None:
                    self.handle_item(item)
            self._logger.info("Shutdown requested.")
            return 0
        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            self._ui.publish(EVENT_ERROR, message=f"Runtime failed: {error}")
            return 1
        finally:
            self._shutdown()

    def run_due_tick(self) -> bool:
        """Tick the scheduler when the tick interval has elapsed."""
        now = self._clock()
        if self._next_tick_at is not None and now < self._next_tick_at:
            return False
        self._next_tick_at = now + self._bootstrap.tick_interval_seconds
        self._scheduler.tick()
        return True

    def process_pending(self) -> int:
        """Handle every queued item without blocking; returns the count."""
        handled = 0
        while True:
            item = self._poll(None)
            if item is None:
                return handled
            self.handle_item(item)
            handled += 1

    def handle_item(self, item: Any) -> None:
        if isinstance(item, ClientCommand):
            self._dispatcher.handle_command(item)
            return

        if isinstance(item, (BreakStartedEvent, MenuRefreshEvent)):
            self._event_processor.handle(item)
            return

        self._logger.warning("Ignoring unknown queue item: %s", type(item).__name__)

    def _poll_timeout(self) -> float:
        if self._next_tick_at is None:
            return 0.0
        remaining = self._next_tick_at - self._clock()
        return min(max(0.0, remaining), MAX_POLL_SECONDS)

    def _poll(self, timeout: Optional[float]) -> Optional[Any]:
        try:
            if timeout is None or timeout <= 0:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except Empty:
            return None

    def _shutdown(self) -> None:
        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)
