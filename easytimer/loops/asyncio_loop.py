"""Host timers on an :mod:`asyncio` event loop."""
from __future__ import annotations

import asyncio
import logging
import weakref
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from easytimer.loops.base import DEFAULT_MODE

if TYPE_CHECKING:
    from easytimer.timers.timer import Timer

logger = logging.getLogger(__name__)

_Key = Tuple["Timer", str]


class AsyncioRunLoop:
    """Adapter that schedules timer fires with ``loop.call_at``.

    Fire dates are on the ``loop.time()`` clock, so timers for this adapter
    must be built with ``clock=adapter.time``.  Each attached timer owns at
    most one pending :class:`asyncio.TimerHandle` per mode; a repeating timer
    is re-armed at its next fire date after every fire.  Exceptions raised by
    callbacks go to the event loop's exception handler.
    """

    _adapters: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, AsyncioRunLoop]" = (
        weakref.WeakKeyDictionary()
    )

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        # Held weakly: values of ``_adapters`` must not keep their key alive.
        self._loop_ref = weakref.ref(loop)
        self._handles: Dict[_Key, Optional[asyncio.TimerHandle]] = {}

    @classmethod
    def for_loop(cls, loop: Optional[asyncio.AbstractEventLoop] = None) -> "AsyncioRunLoop":
        """Return the adapter shared by everything scheduled on ``loop``.

        Defaults to the running loop of the calling thread.
        """

        if loop is None:
            loop = asyncio.get_running_loop()
        adapter = cls._adapters.get(loop)
        if adapter is None:
            adapter = cls(loop)
            cls._adapters[loop] = adapter
        return adapter

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        loop = self._loop_ref()
        if loop is None:
            raise RuntimeError("the event loop of this adapter no longer exists")
        return loop

    # ------------------------------------------------------------------
    # RunLoop interface
    def time(self) -> float:
        return self.loop.time()

    def add_timer(self, timer: "Timer", mode: str = DEFAULT_MODE) -> None:
        if not timer.is_valid:
            logger.debug("ignoring invalid timer %r", timer)
            return
        key = (timer, mode)
        if key in self._handles:
            return
        self._arm(key)
        logger.debug("attached %r in mode %s", timer, mode)

    def remove_timer(self, timer: "Timer", mode: str = DEFAULT_MODE) -> None:
        key = (timer, mode)
        if key in self._handles:
            handle = self._handles.pop(key)
            if handle is not None:
                handle.cancel()
            logger.debug("detached %r from mode %s", timer, mode)

    # ------------------------------------------------------------------
    def is_attached(self, timer: "Timer", mode: str = DEFAULT_MODE) -> bool:
        return timer.is_valid and (timer, mode) in self._handles

    def timers(self, mode: str = DEFAULT_MODE) -> List["Timer"]:
        live = [timer for (timer, key_mode) in self._handles if key_mode == mode and timer.is_valid]
        return sorted(live, key=lambda timer: timer.fire_date)

    def _arm(self, key: _Key) -> None:
        timer = key[0]
        when = timer.fire_date
        self._handles[key] = self.loop.call_at(when, self._deliver, key, when)

    def _deliver(self, key: _Key, when: float) -> None:
        timer = key[0]
        if not timer.is_valid:
            self._handles.pop(key, None)
            return
        if timer.fire_date != when:
            # Already fired through another mode.
            self._arm(key)
            return
        # Still attached, but nothing is pending while the callback runs.
        self._handles[key] = None
        try:
            timer.fire(self.loop.time())
        finally:
            if key in self._handles:
                if timer.is_valid:
                    self._arm(key)
                else:
                    del self._handles[key]


__all__ = ["AsyncioRunLoop"]
