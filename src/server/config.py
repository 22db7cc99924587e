"""Settings for the presenter websocket server."""

from __future__ import annotations

from dataclasses import dataclass

WEBSOCKET_PATH = "/ws"
HEALTHZ_PATH = "/healthz"
STATS_PATH = "/stats"

MIN_PORT = 1
MAX_PORT = 65535


class ServerConfigurationError(Exception):
    """Raised when the `[ui_server]` settings cannot be used."""


@dataclass(frozen=True)
class UIServerConfig:
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765

    def __post_init__(self) -> None:
        if not isinstance(self.host, str) or not self.host.strip():
            raise ServerConfigurationError("ui_server.host must be a non-empty string")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ServerConfigurationError(
                f"ui_server.port must be an integer, got: {self.port!r}"
            )
        if self.port < MIN_PORT or self.port > MAX_PORT:
            raise ServerConfigurationError(
                f"ui_server.port must be between {MIN_PORT} and {MAX_PORT}, "
                f"got: {self.port}"
            )

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @property
    def websocket_url(self) -> str:
        return f"ws://{self.host}:{self.port}{WEBSOCKET_PATH}"

    @classmethod
    def from_settings(cls, settings) -> "UIServerConfig":
        return cls(
            enabled=bool(settings.enabled),
            host=settings.host.strip(),
            port=settings.port,
        )
