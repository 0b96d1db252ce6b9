"""Fire recording package."""

from .recorder import FireEvent, FireRecorder, FireSnapshot, TimerStats

__all__ = [
    "FireEvent",
    "FireRecorder",
    "FireSnapshot",
    "TimerStats",
]
