"""Per-thread "current loop" used by the scheduling helpers when no loop is given."""
from __future__ import annotations

import asyncio
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from easytimer.errors import NoCurrentLoopError
from easytimer.loops.asyncio_loop import AsyncioRunLoop
from easytimer.loops.base import RunLoop

_state = threading.local()


def set_current_loop(loop: Optional[RunLoop]) -> None:
    """Make ``loop`` the current loop of the calling thread; ``None`` clears it."""

    _state.loop = loop


def get_current_loop() -> RunLoop:
    """Return the loop set for this thread, or one wrapping the running asyncio loop."""

    loop = getattr(_state, "loop", None)
    if loop is not None:
        return loop
    try:
        running = asyncio.get_running_loop()
    except RuntimeError:
        raise NoCurrentLoopError(
            "no current run loop: pass loop= or call set_current_loop() first"
        ) from None
    return AsyncioRunLoop.for_loop(running)


@contextmanager
def using_loop(loop: RunLoop) -> Iterator[RunLoop]:
    """Temporarily make ``loop`` current for the calling thread."""

    previous = getattr(_state, "loop", None)
    _state.loop = loop
    try:
        yield loop
    finally:
        _state.loop = previous


__all__ = ["get_current_loop", "set_current_loop", "using_loop"]
