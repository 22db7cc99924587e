"""Parsing of presenter commands received over the websocket."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from breaks.constants import BREAK_KINDS
from contracts.ui_protocol import CLIENT_COMMANDS, COMMAND_MANUAL_BREAK


class CommandParseError(ValueError):
    """Raised when a websocket message is not a valid presenter command."""


@dataclass(frozen=True)
class ClientCommand:
    """Validated presenter command queued for the runtime loop."""
    type: str
    kind: Optional[str] = None


def parse_client_command(raw: str | bytes) -> ClientCommand:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as error:
            raise CommandParseError("Command must be UTF-8 text") from error

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as error:
        raise CommandParseError(f"Command is not valid JSON: {error.msg}") from error

    if not isinstance(payload, dict):
        raise CommandParseError("Command must be a JSON object")

    command_type = payload.get("type")
    if not isinstance(command_type, str) or command_type not in CLIENT_COMMANDS:
        allowed = ", ".join(sorted(CLIENT_COMMANDS))
        raise CommandParseError(f"Command type must be one of: {allowed}")

    if command_type != COMMAND_MANUAL_BREAK:
        return ClientCommand(type=command_type)

    kind = payload.get("kind")
    if kind not in BREAK_KINDS:
        allowed = ", ".join(BREAK_KINDS)
        raise CommandParseError(f"manual_break kind must be one of: {allowed}")
    return ClientCommand(type=command_type, kind=kind)
