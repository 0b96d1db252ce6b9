"""easytimer: one-shot and repeating timers on a host run loop."""

from .duration import Duration, parse_duration
from .errors import ConfigError, EasyTimerError, InvalidDurationError, NoCurrentLoopError
from .loops import (
    AsyncioRunLoop,
    DEFAULT_MODE,
    ManualRunLoop,
    RunLoop,
    get_current_loop,
    set_current_loop,
    using_loop,
)
from .timers import (
    DELAY,
    DELAYED_INTERVAL,
    IMMEDIATE_ONCE,
    INTERVAL,
    FirePolicy,
    Timer,
    build_timer,
    delay,
    delayed_interval,
    interval,
)

__all__ = [
    "AsyncioRunLoop",
    "ConfigError",
    "DEFAULT_MODE",
    "DELAY",
    "DELAYED_INTERVAL",
    "Duration",
    "EasyTimerError",
    "FirePolicy",
    "IMMEDIATE_ONCE",
    "INTERVAL",
    "InvalidDurationError",
    "ManualRunLoop",
    "NoCurrentLoopError",
    "RunLoop",
    "Timer",
    "build_timer",
    "delay",
    "delayed_interval",
    "get_current_loop",
    "interval",
    "parse_duration",
    "set_current_loop",
    "using_loop",
    "config",
    "loops",
    "metrics",
    "timers",
]
