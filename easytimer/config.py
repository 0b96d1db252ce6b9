"""Configuration schema for the ``easytimer`` command line runner.

A runner configuration lists named timers, each with a fire policy and a
period, plus how long the runner keeps its event loop alive.  The dataclasses
are filled in by :mod:`easytimer.config_loader`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional, Sequence

from easytimer.timers.policy import FirePolicy


@dataclass(slots=True)
class TimerEntry:
    """A single timer to schedule when the runner starts."""

    name: str
    policy: FirePolicy
    every: timedelta
    message: Optional[str] = None
    max_fires: Optional[int] = None


@dataclass(slots=True)
class RunnerConfig:
    """Top-level configuration bundle for a runner session."""

    timers: Sequence[TimerEntry] = field(default_factory=tuple)
    run_for: timedelta = timedelta(seconds=5)
    log_level: str = "WARNING"
