"""Create-and-start helpers: the public way to schedule a callback."""
from __future__ import annotations

from typing import Any, Callable, Optional

from easytimer.loops.base import RunLoop
from easytimer.loops.current import get_current_loop
from easytimer.timers.factory import build_timer
from easytimer.timers.policy import DELAY, DELAYED_INTERVAL, INTERVAL, FirePolicy
from easytimer.timers.timer import Timer


def schedule(
    duration: Any,
    policy: FirePolicy,
    callback: Callable[..., Any],
    *,
    loop: Optional[RunLoop] = None,
    with_timer: Optional[bool] = None,
    name: Optional[str] = None,
) -> Timer:
    """Build a timer for ``policy`` on ``loop``'s clock and start it there."""

    if loop is None:
        loop = get_current_loop()
    timer = build_timer(
        duration,
        policy.repeats,
        policy.delays,
        callback,
        clock=loop.time,
        with_timer=with_timer,
        name=name,
    )
    timer.start(loop)
    return timer


def delay(
    duration: Any,
    callback: Callable[..., Any],
    *,
    loop: Optional[RunLoop] = None,
    with_timer: Optional[bool] = None,
    name: Optional[str] = None,
) -> Timer:
    """Call ``callback`` once, ``duration`` seconds from now."""

    return schedule(duration, DELAY, callback, loop=loop, with_timer=with_timer, name=name)


def interval(
    duration: Any,
    callback: Callable[..., Any],
    *,
    loop: Optional[RunLoop] = None,
    with_timer: Optional[bool] = None,
    name: Optional[str] = None,
) -> Timer:
    """Call ``callback`` right away and then every ``duration`` seconds."""

    return schedule(duration, INTERVAL, callback, loop=loop, with_timer=with_timer, name=name)


def delayed_interval(
    duration: Any,
    callback: Callable[..., Any],
    *,
    loop: Optional[RunLoop] = None,
    with_timer: Optional[bool] = None,
    name: Optional[str] = None,
) -> Timer:
    """Call ``callback`` every ``duration`` seconds, starting one period from now."""

    return schedule(
        duration, DELAYED_INTERVAL, callback, loop=loop, with_timer=with_timer, name=name
    )


__all__ = ["delay", "delayed_interval", "interval", "schedule"]
