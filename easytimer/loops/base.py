"""Interface every run loop implements to host timers."""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from easytimer.timers.timer import Timer

DEFAULT_MODE = "default"


@runtime_checkable
class RunLoop(Protocol):
    """A host loop that delivers timer fires.

    The loop calls ``timer.fire(now)`` at or after ``timer.fire_date`` and
    keeps re-delivering while ``fire`` returns true.  It only registers the
    timer; ownership stays with whoever holds the handle.  Adding a timer that
    is already attached in ``mode`` or that is no longer valid does nothing,
    and so does removing one that is not attached.
    """

    def time(self) -> float:
        ...

    def add_timer(self, timer: "Timer", mode: str = DEFAULT_MODE) -> None:
        ...

    def remove_timer(self, timer: "Timer", mode: str = DEFAULT_MODE) -> None:
        ...


__all__ = ["DEFAULT_MODE", "RunLoop"]
