"""Fire policies: whether a timer repeats and whether its first call waits."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict


@dataclass(frozen=True, slots=True)
class FirePolicy:
    """One of the four ``(repeats, delays)`` combinations.

    ``repeats`` selects a periodic timer over a one-shot one.  ``delays``
    controls the first call: when false the callback also runs synchronously
    while the timer is being built.
    """

    repeats: bool
    delays: bool

    NAMES: ClassVar[Dict[str, "FirePolicy"]]

    @property
    def name(self) -> str:
        return _NAMES_BY_POLICY[self]

    @property
    def fires_immediately(self) -> bool:
        return not self.delays

    @classmethod
    def from_name(cls, name: str) -> "FirePolicy":
        key = name.strip().lower().replace("-", "_")
        try:
            return cls.NAMES[key]
        except KeyError:
            raise ValueError(f"unknown fire policy: {name!r}") from None


DELAY = FirePolicy(repeats=False, delays=True)
INTERVAL = FirePolicy(repeats=True, delays=False)
DELAYED_INTERVAL = FirePolicy(repeats=True, delays=True)
# Not exposed as a scheduling operation: calls now and once more after the duration.
IMMEDIATE_ONCE = FirePolicy(repeats=False, delays=False)

FirePolicy.NAMES = {
    "delay": DELAY,
    "interval": INTERVAL,
    "delayed_interval": DELAYED_INTERVAL,
    "immediate_once": IMMEDIATE_ONCE,
}
_NAMES_BY_POLICY = {policy: name for name, policy in FirePolicy.NAMES.items()}

__all__ = ["DELAY", "DELAYED_INTERVAL", "FirePolicy", "IMMEDIATE_ONCE", "INTERVAL"]
