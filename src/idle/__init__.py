"""System idle-time sources consumed by the break scheduler."""

from .config import IdleConfig
from .errors import (
    IdleSourceConfigurationError,
    IdleSourceDependencyError,
    IdleSourceError,
    IdleSourceReadError,
)
from .providers import build_idle_source
from .sources import (
    MacOSIdleSource,
    NullIdleSource,
    WindowsIdleSource,
    XPrintIdleSource,
)

__all__ = [
    "IdleConfig",
    "IdleSourceConfigurationError",
    "IdleSourceDependencyError",
    "IdleSourceError",
    "IdleSourceReadError",
    "MacOSIdleSource",
    "NullIdleSource",
    "WindowsIdleSource",
    "XPrintIdleSource",
    "build_idle_source",
]
