"""Exception hierarchy shared by the timer, loop and config layers."""
from __future__ import annotations


class EasyTimerError(RuntimeError):
    """Generic easytimer error."""


class InvalidDurationError(EasyTimerError, ValueError):
    """Raised when a duration is negative, not finite or not a number."""


class NoCurrentLoopError(EasyTimerError):
    """Raised when no run loop was given and none is current."""


class ConfigError(EasyTimerError, ValueError):
    """Raised when a configuration file cannot be turned into a runner config."""


__all__ = ["ConfigError", "EasyTimerError", "InvalidDurationError", "NoCurrentLoopError"]
