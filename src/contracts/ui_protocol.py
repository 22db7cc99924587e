"""Websocket event, command, and state constants shared with presenters."""

from __future__ import annotations

# Server -> client event types
EVENT_HELLO = "hello"
EVENT_BREAK_STARTED = "break_started"
EVENT_MENU_REFRESH = "menu_refresh"
EVENT_STATS = "stats"
EVENT_COMMAND_RESULT = "command_result"
EVENT_ERROR = "error"

# Client -> server command types
COMMAND_CONFIRM_BREAK = "confirm_break"
COMMAND_TOGGLE_PAUSE = "toggle_pause"
COMMAND_MANUAL_BREAK = "manual_break"
COMMAND_RESET = "reset"
COMMAND_STATS = "stats"

CLIENT_COMMANDS: frozenset[str] = frozenset(
    {
        COMMAND_CONFIRM_BREAK,
        COMMAND_TOGGLE_PAUSE,
        COMMAND_MANUAL_BREAK,
        COMMAND_RESET,
        COMMAND_STATS,
    }
)

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_BREAK_STARTED,
        EVENT_MENU_REFRESH,
        EVENT_ERROR,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_BREAK_STARTED,
    EVENT_ERROR,
    EVENT_MENU_REFRESH,
)
