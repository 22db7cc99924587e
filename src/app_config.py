from __future__ import annotations

import os
import sys
from pathlib import Path

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    BreakSettings,
    IdleSettings,
    RuntimeSettings,
    UIServerSettings,
)

CONFIG_ENV_VAR = "BREAKWATCH_CONFIG_FILE"

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "BreakSettings",
    "CONFIG_ENV_VAR",
    "IdleSettings",
    "RuntimeSettings",
    "UIServerSettings",
    "load_app_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv(CONFIG_ENV_VAR)
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    if path.exists():
        return path

    # Frozen fallback: look next to the executable when no explicit path is provided.
    if config_path is None and env_path is None and getattr(sys, "frozen", False):
        executable_path = Path(sys.executable).resolve().parent / DEFAULT_CONFIG_FILE
        if executable_path.exists():
            return executable_path

    return path


def load_app_config(config_path: str | None = None) -> AppConfig:
    """Load config.toml, falling back to defaults when no file was requested."""
    explicit = config_path is not None or os.getenv(CONFIG_ENV_VAR) is not None
    path = resolve_config_path(config_path)
    if not path.exists():
        if explicit:
            raise AppConfigurationError(f"Config file not found: {path}")
        return AppConfig()
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    return parse_app_config(raw, source_file=str(path))
