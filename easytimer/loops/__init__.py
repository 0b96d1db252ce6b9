"""Run loops that can host timers."""

from .asyncio_loop import AsyncioRunLoop
from .base import DEFAULT_MODE, RunLoop
from .current import get_current_loop, set_current_loop, using_loop
from .manual import ManualRunLoop

__all__ = [
    "AsyncioRunLoop",
    "DEFAULT_MODE",
    "ManualRunLoop",
    "RunLoop",
    "get_current_loop",
    "set_current_loop",
    "using_loop",
]
