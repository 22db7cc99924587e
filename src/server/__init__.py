"""UI server module for websocket event streaming and presenter commands."""

from .commands import ClientCommand, CommandParseError, parse_client_command
from .config import ServerConfigurationError, UIServerConfig
from .service import UIServer

__all__ = [
    "ClientCommand",
    "CommandParseError",
    "ServerConfigurationError",
    "UIServerConfig",
    "UIServer",
    "parse_client_command",
]
