"""Deterministic run loop driven by an explicit virtual clock."""
from __future__ import annotations

import heapq
import itertools
import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from easytimer.duration import to_seconds
from easytimer.loops.base import DEFAULT_MODE

if TYPE_CHECKING:
    from easytimer.timers.timer import Timer

logger = logging.getLogger(__name__)

_Entry = Tuple[float, int, "Timer"]

# Queues at least this long are rebuilt once most of their entries are stale.
_COMPACT_THRESHOLD = 64


class ManualRunLoop:
    """Run loop whose time only moves when it is told to.

    Nothing happens in the background: :meth:`run_until` and :meth:`advance`
    deliver every fire that falls due, in time order, moving the clock to each
    fire date before calling the timer.  Timers due at the same instant fire in
    the order they were attached.  Only timers attached in the mode being run
    are considered.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._queues: Dict[str, List[_Entry]] = {}
        self._attached: Dict[str, Dict["Timer", int]] = {}
        self._tokens = itertools.count()

    # ------------------------------------------------------------------
    # RunLoop interface
    def time(self) -> float:
        return self._now

    def add_timer(self, timer: "Timer", mode: str = DEFAULT_MODE) -> None:
        if not timer.is_valid:
            logger.debug("ignoring invalid timer %r", timer)
            return
        attached = self._attached.setdefault(mode, {})
        if timer in attached:
            return
        token = next(self._tokens)
        attached[timer] = token
        heapq.heappush(self._queues.setdefault(mode, []), (timer.fire_date, token, timer))
        logger.debug("attached %r in mode %s", timer, mode)

    def remove_timer(self, timer: "Timer", mode: str = DEFAULT_MODE) -> None:
        if self._attached.get(mode, {}).pop(timer, None) is not None:
            logger.debug("detached %r from mode %s", timer, mode)
            self._compact(mode)

    def _compact(self, mode: str) -> None:
        queue = self._queues.get(mode)
        attached = self._attached.get(mode, {})
        if queue is None or len(queue) < _COMPACT_THRESHOLD or len(queue) <= 2 * len(attached):
            return
        # In place: run_until may hold a reference to this list.
        queue[:] = [entry for entry in queue if attached.get(entry[2]) == entry[1]]
        heapq.heapify(queue)
        logger.debug("compacted mode %s queue to %d entries", mode, len(queue))

    # ------------------------------------------------------------------
    # Inspection
    def is_attached(self, timer: "Timer", mode: str = DEFAULT_MODE) -> bool:
        return timer.is_valid and timer in self._attached.get(mode, {})

    def timers(self, mode: str = DEFAULT_MODE) -> List["Timer"]:
        """Return the live timers of ``mode`` ordered by their next fire date."""

        attached = self._attached.get(mode, {})
        live = [timer for timer in attached if timer.is_valid]
        return sorted(live, key=lambda timer: (timer.fire_date, attached[timer]))

    def next_fire_date(self, mode: str = DEFAULT_MODE) -> Optional[float]:
        live = self.timers(mode)
        return live[0].fire_date if live else None

    # ------------------------------------------------------------------
    # Driving
    def run_until(self, deadline: float, mode: str = DEFAULT_MODE) -> int:
        """Deliver every fire due up to ``deadline`` and return how many ran."""

        fired = 0
        queue = self._queues.setdefault(mode, [])
        attached = self._attached.setdefault(mode, {})
        while queue and queue[0][0] <= deadline:
            fire_date, token, timer = heapq.heappop(queue)
            if attached.get(timer) != token:
                continue
            if not timer.is_valid:
                del attached[timer]
                continue
            if timer.fire_date > fire_date:
                # Already fired through another mode.
                heapq.heappush(queue, (timer.fire_date, token, timer))
                continue
            self._now = max(self._now, fire_date)
            try:
                timer.fire(self._now)
            finally:
                if attached.get(timer) == token:
                    if timer.is_valid:
                        heapq.heappush(queue, (timer.fire_date, token, timer))
                    else:
                        del attached[timer]
            fired += 1
        self._now = max(self._now, float(deadline))
        return fired

    def advance(self, seconds: float, mode: str = DEFAULT_MODE) -> int:
        """Move the clock forward by ``seconds``, firing what falls due."""

        return self.run_until(self._now + to_seconds(seconds), mode)

    def run_pending(self, mode: str = DEFAULT_MODE) -> int:
        """Fire the timers that are already due without moving the clock."""

        return self.run_until(self._now, mode)


__all__ = ["ManualRunLoop"]
