"""Timer construction, lifecycle and scheduling helpers."""

from .factory import build_timer
from .policy import DELAY, DELAYED_INTERVAL, IMMEDIATE_ONCE, INTERVAL, FirePolicy
from .schedule import delay, delayed_interval, interval, schedule
from .timer import Callback, PlainCallback, Timer, TimerCallback, as_callback

__all__ = [
    "Callback",
    "DELAY",
    "DELAYED_INTERVAL",
    "FirePolicy",
    "IMMEDIATE_ONCE",
    "INTERVAL",
    "PlainCallback",
    "Timer",
    "TimerCallback",
    "as_callback",
    "build_timer",
    "delay",
    "delayed_interval",
    "interval",
    "schedule",
]
