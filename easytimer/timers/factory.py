"""Timer construction for every ``(repeats, delays)`` combination."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from easytimer.duration import to_seconds
from easytimer.timers.timer import Timer, as_callback

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def build_timer(
    duration: Any,
    repeats: bool,
    delays: bool,
    callback: Callable[..., Any],
    *,
    clock: Clock = time.monotonic,
    with_timer: Optional[bool] = None,
    name: Optional[str] = None,
) -> Timer:
    """Create an unattached timer that fires ``duration`` seconds from now.

    A repeating timer fires every ``duration`` seconds after that.  When
    ``delays`` is false the callback also runs synchronously before this
    function returns.  For ``repeats=False, delays=False`` that means two calls
    in total: one now and one scheduled fire after ``duration``.

    Plain callbacks run before the timer exists, so the fire date is measured
    from the moment they return.  Callbacks that receive the timer get the
    constructed instance and may stop it during that first call.

    The timer does nothing until it is started on a run loop.
    """

    seconds = to_seconds(duration)
    handler = as_callback(callback, with_timer)
    interval = seconds if repeats else 0.0

    if handler.receives_timer:
        timer = Timer(clock() + seconds, interval, handler, name=name)
        if not delays:
            timer.invoke()
    else:
        if not delays:
            handler.fn()
        timer = Timer(clock() + seconds, interval, handler, name=name)

    logger.debug(
        "built %s timer %r (duration=%gs, delays=%s)",
        "repeating" if timer.repeats else "one-shot",
        timer,
        seconds,
        delays,
    )
    return timer


__all__ = ["Clock", "build_timer"]
