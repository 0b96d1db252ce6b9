"""Duration values and conversions.

Timers take their durations in seconds.  :func:`to_seconds` is the single
validation point used by the factory, so every public entry point rejects the
same inputs.  :class:`Duration` adds the ``Duration(2).delay(callback)`` style
of scheduling on top of a plain ``float``.
"""
from __future__ import annotations

import datetime as _dt
import math
from numbers import Real
from typing import TYPE_CHECKING, Any, Callable, Optional

from easytimer.errors import InvalidDurationError

if TYPE_CHECKING:
    from easytimer.loops.base import RunLoop
    from easytimer.timers.timer import Timer

_DURATION_UNITS = {
    "ms": _dt.timedelta(milliseconds=1),
    "s": _dt.timedelta(seconds=1),
    "m": _dt.timedelta(minutes=1),
    "h": _dt.timedelta(hours=1),
    "d": _dt.timedelta(days=1),
}


def to_seconds(value: Any) -> float:
    """Return ``value`` as a finite, non-negative number of seconds."""

    if isinstance(value, bool):
        raise InvalidDurationError(f"duration must be a number, not {value!r}")
    if isinstance(value, _dt.timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, Real):
        seconds = float(value)
    else:
        raise InvalidDurationError(f"unsupported duration value: {value!r}")
    if not math.isfinite(seconds):
        raise InvalidDurationError(f"duration must be finite: {value!r}")
    if seconds < 0:
        raise InvalidDurationError(f"duration must not be negative: {value!r}")
    return seconds


def parse_duration(value: Any) -> _dt.timedelta:
    """Parse human friendly durations such as ``"250ms"``, ``"30s"`` or ``"5m"``."""

    if isinstance(value, _dt.timedelta):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _seconds_to_timedelta(float(value), value)
    if not isinstance(value, str):
        raise ValueError(f"unsupported duration value: {value!r}")
    value = value.strip()
    if not value:
        raise ValueError("empty duration")
    if value.isdigit():
        return _seconds_to_timedelta(int(value), value)
    unit = "ms" if value.lower().endswith("ms") else value[-1].lower()
    if unit not in _DURATION_UNITS:
        raise ValueError(f"unknown duration unit: {value}")
    amount = float(value[: -len(unit)])
    base = _DURATION_UNITS[unit]
    return _seconds_to_timedelta(base.total_seconds() * amount, value)


def _seconds_to_timedelta(seconds: float, value: Any) -> _dt.timedelta:
    # timedelta tops out at 999999999 days and rejects inf/nan.
    try:
        return _dt.timedelta(seconds=seconds)
    except (OverflowError, ValueError) as exc:
        raise InvalidDurationError(f"duration out of range: {value!r}") from exc


class Duration(float):
    """A validated number of seconds that can schedule timers on itself.

    >>> Duration(0.5).delay(lambda: print("half a second later"), loop=loop)
    """

    __slots__ = ()

    def __new__(cls, value: Any = 0.0) -> "Duration":
        return super().__new__(cls, to_seconds(value))

    def __repr__(self) -> str:
        return f"Duration({float(self)!r})"

    @classmethod
    def parse(cls, value: Any) -> "Duration":
        return cls(parse_duration(value))

    def as_timedelta(self) -> _dt.timedelta:
        return _dt.timedelta(seconds=float(self))

    def timer(
        self,
        repeats: bool,
        delays: bool,
        callback: Callable[..., Any],
        *,
        clock: Optional[Callable[[], float]] = None,
        with_timer: Optional[bool] = None,
    ) -> "Timer":
        """Build an unattached timer; see :func:`easytimer.timers.build_timer`."""

        from easytimer.timers.factory import build_timer

        kwargs = {"with_timer": with_timer}
        if clock is not None:
            kwargs["clock"] = clock
        return build_timer(self, repeats, delays, callback, **kwargs)

    def delay(
        self,
        callback: Callable[..., Any],
        *,
        loop: Optional["RunLoop"] = None,
        with_timer: Optional[bool] = None,
    ) -> "Timer":
        from easytimer.timers.schedule import delay

        return delay(self, callback, loop=loop, with_timer=with_timer)

    def interval(
        self,
        callback: Callable[..., Any],
        *,
        loop: Optional["RunLoop"] = None,
        with_timer: Optional[bool] = None,
    ) -> "Timer":
        from easytimer.timers.schedule import interval

        return interval(self, callback, loop=loop, with_timer=with_timer)

    def delayed_interval(
        self,
        callback: Callable[..., Any],
        *,
        loop: Optional["RunLoop"] = None,
        with_timer: Optional[bool] = None,
    ) -> "Timer":
        from easytimer.timers.schedule import delayed_interval

        return delayed_interval(self, callback, loop=loop, with_timer=with_timer)


__all__ = ["Duration", "parse_duration", "to_seconds"]
