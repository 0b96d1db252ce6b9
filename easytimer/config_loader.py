"""Utilities to load :mod:`easytimer.config` structures from YAML files."""
from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping

import yaml

from easytimer.config import RunnerConfig, TimerEntry
from easytimer.duration import parse_duration, to_seconds
from easytimer.errors import ConfigError
from easytimer.timers.policy import FirePolicy

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config(path: Path) -> RunnerConfig:
    """Load a configuration file into :class:`RunnerConfig`.

    Durations accept human friendly values such as ``"250ms"``, ``"30s"`` or
    ``"5m"``.  Fields omitted in the YAML file fall back to the defaults
    declared in :mod:`easytimer.config`.
    """

    return parse_config(_load_yaml(path))


def parse_config(raw: Mapping[str, Any]) -> RunnerConfig:
    """Build a :class:`RunnerConfig` from an already decoded mapping."""

    timers_section = raw.get("timers") or []
    if not isinstance(timers_section, list):
        raise ConfigError("'timers' must be a list")

    entries = []
    seen = set()
    for index, item in enumerate(timers_section):
        entry = _parse_timer(index, item)
        if entry.name in seen:
            raise ConfigError(f"duplicate timer name: {entry.name!r}")
        seen.add(entry.name)
        entries.append(entry)

    defaults = RunnerConfig()
    run_for = _duration(raw.get("run_for", defaults.run_for), "run_for")

    log_level = str(raw.get("log_level", defaults.log_level)).upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"unknown log level: {log_level}")

    return RunnerConfig(timers=tuple(entries), run_for=run_for, log_level=log_level)


def _parse_timer(index: int, item: Any) -> TimerEntry:
    if not isinstance(item, Mapping):
        raise ConfigError(f"timer #{index} must be a mapping")
    name = str(item.get("name") or f"timer-{index}")
    try:
        policy = FirePolicy.from_name(str(item.get("policy", "delay")))
    except ValueError as exc:
        raise ConfigError(f"timer {name!r}: {exc}") from exc
    if "every" not in item:
        raise ConfigError(f"timer {name!r} is missing 'every'")
    every = _duration(item["every"], f"timer {name!r}")

    max_fires = item.get("max_fires")
    if max_fires is not None:
        try:
            max_fires = int(max_fires)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"timer {name!r}: invalid max_fires") from exc
        if max_fires <= 0:
            raise ConfigError(f"timer {name!r}: max_fires must be positive")

    message = item.get("message")
    return TimerEntry(
        name=name,
        policy=policy,
        every=every,
        message=str(message) if message is not None else None,
        max_fires=max_fires,
    )


def _duration(value: Any, where: str) -> timedelta:
    try:
        duration = parse_duration(value)
        to_seconds(duration)
    except ValueError as exc:
        raise ConfigError(f"{where}: {exc}") from exc
    return duration


def _load_yaml(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if not isinstance(data, Mapping):
        raise ConfigError("configuration root must be a mapping")
    return data
