"""Dispatcher that executes presenter commands against the break scheduler."""

from __future__ import annotations

import logging

from breaks import BreakScheduler, SchedulerActionResult
from contracts.ui_protocol import (
    COMMAND_CONFIRM_BREAK,
    COMMAND_MANUAL_BREAK,
    COMMAND_RESET,
    COMMAND_STATS,
    COMMAND_TOGGLE_PAUSE,
)
from server import ClientCommand

from .messages import rejection_text
from .ui import RuntimeUIPublisher


class RuntimeCommandDispatcher:
    """Routes presenter commands to scheduler operations and reports outcomes."""
    def __init__(
        self,
        *,
        logger: logging.Logger,
        scheduler: BreakScheduler,
        ui: RuntimeUIPublisher,
    ):
        self._logger = logger
        self._scheduler = scheduler
        self._ui = ui

    def handle_command(self, command: ClientCommand) -> None:
        if command.type == COMMAND_STATS:
            self._ui.publish_stats(self._scheduler.stats())
            return

        if command.type == COMMAND_CONFIRM_BREAK:
            result = self._scheduler.confirm_break()
        elif command.type == COMMAND_TOGGLE_PAUSE:
            result = self._scheduler.toggle_pause()
        elif command.type == COMMAND_MANUAL_BREAK:
            result = self._scheduler.manual_break(command.kind or "")
        elif command.type == COMMAND_RESET:
            result = self._scheduler.reset_all()
        else:
            self._logger.warning("Ignoring unsupported command: %s", command.type)
            return

        self._report(command.type, result)

    def _report(self, command_type: str, result: SchedulerActionResult) -> None:
        if result.accepted:
            self._logger.info("Command %s accepted (%s)", command_type, result.reason)
            self._ui.publish_command_result(
                command=command_type,
                accepted=True,
                reason=result.reason,
            )
            return

        self._logger.info("Command %s rejected (%s)", command_type, result.reason)
        self._ui.publish_command_result(
            command=command_type,
            accepted=False,
            reason=result.reason,
            message=rejection_text(result.action, result.reason),
        )
