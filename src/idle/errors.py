class IdleSourceError(Exception):
    """Base exception for system idle-time sources."""


class IdleSourceConfigurationError(IdleSourceError):
    """Raised when idle source configuration is invalid."""


class IdleSourceDependencyError(IdleSourceError):
    """Raised when the platform facility backing an idle source is missing."""


class IdleSourceReadError(IdleSourceError):
    """Raised when reading the current idle duration fails."""
