"""The timer handle and the two callback shapes it can drive."""
from __future__ import annotations

import inspect
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Optional, Union

from easytimer.loops.base import DEFAULT_MODE

if TYPE_CHECKING:
    from easytimer.loops.base import RunLoop

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


@dataclass(frozen=True, slots=True)
class PlainCallback:
    """Callback that takes no arguments."""

    fn: Callable[[], Any]

    receives_timer: ClassVar[bool] = False

    def __call__(self, timer: "Timer") -> Any:
        return self.fn()


@dataclass(frozen=True, slots=True)
class TimerCallback:
    """Callback that receives the firing :class:`Timer`."""

    fn: Callable[["Timer"], Any]

    receives_timer: ClassVar[bool] = True

    def __call__(self, timer: "Timer") -> Any:
        return self.fn(timer)


Callback = Union[PlainCallback, TimerCallback]


def as_callback(fn: Callable[..., Any], with_timer: Optional[bool] = None) -> Callback:
    """Wrap ``fn`` in the matching callback variant.

    ``with_timer`` forces a variant.  When it is ``None`` the variant is
    inferred from the signature: a callable with a required positional
    parameter receives the timer, everything else is called without
    arguments.
    """

    if isinstance(fn, (PlainCallback, TimerCallback)):
        return fn
    if not callable(fn):
        raise TypeError(f"timer callback must be callable, not {fn!r}")
    if with_timer is None:
        with_timer = _wants_timer(fn)
    return TimerCallback(fn) if with_timer else PlainCallback(fn)


def _wants_timer(fn: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return False
    return any(
        parameter.kind in _POSITIONAL and parameter.default is inspect.Parameter.empty
        for parameter in signature.parameters.values()
    )


class Timer:
    """A one-shot or repeating timer.

    ``fire_date`` is an absolute time on the clock of the loop the timer is
    meant for.  A timer holds no reference to any loop: loops register it,
    call :meth:`fire` when it is due and forget it once it is invalid.
    """

    def __init__(
        self,
        fire_date: float,
        interval: float,
        callback: Union[Callback, Callable[..., Any]],
        *,
        name: Optional[str] = None,
        tolerance: float = 0.0,
    ) -> None:
        self._fire_date = float(fire_date)
        self._interval = float(interval) if interval > 0 else 0.0
        self._callback = as_callback(callback)
        self._valid = True
        self._fire_count = 0
        self.name = name
        self.tolerance = tolerance

    # ------------------------------------------------------------------
    # State
    @property
    def fire_date(self) -> float:
        return self._fire_date

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def repeats(self) -> bool:
        return self._interval > 0

    @property
    def is_valid(self) -> bool:
        return self._valid

    @property
    def fire_count(self) -> int:
        """Number of fires delivered by a run loop."""

        return self._fire_count

    @property
    def callback(self) -> Callback:
        return self._callback

    def invalidate(self) -> None:
        """Permanently stop the timer. Calling it again has no effect."""

        if not self._valid:
            return
        self._valid = False
        logger.debug("timer %s invalidated after %d fires", self._label(), self._fire_count)

    # ------------------------------------------------------------------
    # Loop integration
    def start(self, loop: "RunLoop", mode: str = DEFAULT_MODE) -> None:
        """Attach the timer to ``loop`` so it fires on later iterations."""

        loop.add_timer(self, mode)

    def stop(self, loop: Optional["RunLoop"] = None, mode: str = DEFAULT_MODE) -> None:
        """Invalidate the timer and detach it from ``loop`` when one is given.

        Safe to call from the timer's own callback and on a timer that was
        already stopped or never started.
        """

        self.invalidate()
        if loop is not None:
            loop.remove_timer(self, mode)

    def invoke(self) -> Any:
        """Run the callback once without touching the schedule."""

        return self._callback(self)

    def fire(self, now: float) -> bool:
        """Deliver one scheduled fire and return whether another is due.

        A repeating timer moves its fire date forward by whole periods so the
        next fire lands strictly after ``now``; periods that were missed are
        skipped.  A one-shot timer is invalidated after its fire.
        """

        if not self._valid:
            return False
        self._fire_count += 1
        try:
            self._callback(self)
        finally:
            if self._valid:
                if self.repeats:
                    self._advance(now)
                else:
                    self.invalidate()
        return self._valid

    def _advance(self, now: float) -> None:
        periods = max(1, math.floor((now - self._fire_date) / self._interval) + 1)
        fire_date = self._fire_date + periods * self._interval
        if fire_date <= now:
            fire_date += self._interval
        self._fire_date = fire_date
        logger.debug("timer %s re-armed for %.6f", self._label(), fire_date)

    def _label(self) -> str:
        return self.name or hex(id(self))

    def __repr__(self) -> str:
        state = "valid" if self._valid else "invalid"
        return (
            f"<Timer {self._label()} fire_date={self._fire_date:.6f} "
            f"interval={self._interval:g} {state}>"
        )


__all__ = ["Callback", "PlainCallback", "Timer", "TimerCallback", "as_callback"]
