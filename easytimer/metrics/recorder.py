"""Record timer fires and summarise them per timer."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from easytimer.timers.timer import Timer

Clock = Callable[[], float]


@dataclass(slots=True)
class FireEvent:
    """A single recorded call of a timer callback."""

    name: str
    at: float


@dataclass(slots=True)
class TimerStats:
    """Aggregated fire statistics for one timer."""

    name: str
    count: int
    first_at: Optional[float]
    last_at: Optional[float]
    mean_period: Optional[float]

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "count": self.count,
            "first_at": self.first_at,
            "last_at": self.last_at,
            "mean_period": self.mean_period,
        }


@dataclass(slots=True)
class FireSnapshot:
    """Serializable container for the recorded statistics."""

    generated_at: datetime
    timers: Iterable[TimerStats]

    def to_dict(self) -> Dict[str, object]:
        return {
            "generated_at": self.generated_at.isoformat(),
            "timers": [stats.to_dict() for stats in self.timers],
        }


class FireRecorder:
    """Collect :class:`FireEvent` entries with times relative to creation.

    Times come from ``clock``, which should be the clock of the loop the
    recorded timers run on.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._origin = clock()
        self._events: List[FireEvent] = []
        self._names: List[str] = []
        self._lock = threading.Lock()

    @property
    def events(self) -> List[FireEvent]:
        with self._lock:
            return list(self._events)

    def register(self, name: str) -> None:
        """Make ``name`` show up in snapshots even if it never fires."""

        with self._lock:
            if name not in self._names:
                self._names.append(name)

    def record(self, name: str) -> FireEvent:
        event = FireEvent(name=name, at=self._clock() - self._origin)
        with self._lock:
            if name not in self._names:
                self._names.append(name)
            self._events.append(event)
        return event

    def count(self, name: str) -> int:
        with self._lock:
            return sum(1 for event in self._events if event.name == name)

    def wrap(
        self, name: str, fn: Optional[Callable[[Timer], Any]] = None
    ) -> Callable[[Timer], None]:
        """Return a timer-receiving callback that records, then calls ``fn``."""

        self.register(name)

        def callback(timer: Timer) -> None:
            self.record(name)
            if fn is not None:
                fn(timer)

        return callback

    def snapshot(self) -> FireSnapshot:
        with self._lock:
            names = list(self._names)
            events = list(self._events)
        stats = []
        for name in names:
            times = [event.at for event in events if event.name == name]
            mean_period = None
            if len(times) > 1:
                mean_period = (times[-1] - times[0]) / (len(times) - 1)
            stats.append(
                TimerStats(
                    name=name,
                    count=len(times),
                    first_at=times[0] if times else None,
                    last_at=times[-1] if times else None,
                    mean_period=mean_period,
                )
            )
        return FireSnapshot(generated_at=datetime.now(timezone.utc), timers=stats)


__all__ = ["FireEvent", "FireRecorder", "FireSnapshot", "TimerStats"]
