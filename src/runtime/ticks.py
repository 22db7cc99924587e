"""Handlers that turn scheduler events into presenter updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from breaks import BreakStartedEvent, MenuRefreshEvent, SchedulerEvent

from .messages import break_message, status_title
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class EventDependencies:
    """Dependencies required for processing scheduler events."""
    logger: logging.Logger
    ui: RuntimeUIPublisher


class SchedulerEventProcessor:
    """Publishes break notifications and menu refreshes to presenters."""
    def __init__(self, dependencies: EventDependencies):
        self._dependencies = dependencies

    def handle(self, event: SchedulerEvent) -> bool:
        """Handle a scheduler event; returns False for unknown event types."""
        if isinstance(event, BreakStartedEvent):
            self.handle_break_started(event)
            return True
        if isinstance(event, MenuRefreshEvent):
            self.handle_menu_refresh(event)
            return True
        return False

    def handle_break_started(self, event: BreakStartedEvent) -> None:
        deps = self._dependencies
        deps.logger.info(break_message(event.kind, event.duration_seconds))
        deps.ui.publish_break_started(
            event.kind,
            event.duration_seconds,
            event.stats,
        )

    def handle_menu_refresh(self, event: MenuRefreshEvent) -> None:
        deps = self._dependencies
        deps.logger.debug("Status: %s", status_title(event.stats))
        deps.ui.publish_menu_refresh(event.stats)
