"""Command line entry point for running timers described in a YAML file."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from .config import RunnerConfig, TimerEntry
from .config_loader import load_config
from .errors import ConfigError
from .loops import AsyncioRunLoop
from .metrics import FireRecorder, FireSnapshot
from .timers import Timer, schedule

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="easytimer helper CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    plan = sub.add_parser(
        "plan",
        help="Show when each configured timer would fire",
    )
    plan.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the YAML configuration file",
    )

    run = sub.add_parser(
        "run",
        help="Run the configured timers on an asyncio event loop",
    )
    run.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the YAML configuration file",
    )
    run.add_argument(
        "--run-for",
        type=float,
        default=None,
        help="How many seconds to keep the loop running (default: from config)",
    )
    run.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        default=None,
        help="Logging level for stderr output (default: from config)",
    )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "plan":
            return _command_plan(args)
        if args.command == "run":
            return _command_run(args)
    except ConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    except FileNotFoundError as exc:
        print(f"Configuration not found: {exc.filename}", file=sys.stderr)
        return 2

    parser.error("unknown command")
    return 1


def _command_plan(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    output = {"run_for": config.run_for.total_seconds(), "timers": []}
    for entry in config.timers:
        output["timers"].append(describe_entry(entry))
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


def _command_run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    logging.basicConfig(
        level=args.log_level or config.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_for = config.run_for.total_seconds() if args.run_for is None else max(0.0, args.run_for)

    try:
        snapshot = asyncio.run(run_timers(config, run_for))
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        print("Interrupted", file=sys.stderr)
        return 130

    print(json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False))
    return 0


def describe_entry(entry: TimerEntry) -> Dict[str, Any]:
    """Describe the fire schedule of ``entry`` relative to the moment it starts."""

    period = entry.every.total_seconds()
    repeats = entry.policy.repeats and period > 0
    return {
        "name": entry.name,
        "policy": entry.policy.name,
        "period": period,
        "repeats": repeats,
        "fires_immediately": entry.policy.fires_immediately,
        "first_scheduled_fire": period,
        "max_fires": entry.max_fires,
    }


async def run_timers(config: RunnerConfig, run_for: float) -> FireSnapshot:
    """Schedule every configured timer, wait ``run_for`` seconds, then stop them all."""

    runloop = AsyncioRunLoop.for_loop()
    recorder = FireRecorder(runloop.time)
    timers: List[Timer] = []
    for entry in config.timers:
        callback = recorder.wrap(entry.name, _make_action(entry, recorder, runloop))
        timer = schedule(
            entry.every,
            entry.policy,
            callback,
            loop=runloop,
            with_timer=True,
            name=entry.name,
        )
        logger.info(
            "scheduled %s (%s every %ss)", entry.name, entry.policy.name, entry.every.total_seconds()
        )
        timers.append(timer)

    try:
        await asyncio.sleep(run_for)
    finally:
        for timer in timers:
            timer.stop(runloop)
    return recorder.snapshot()


def _make_action(
    entry: TimerEntry, recorder: FireRecorder, runloop: AsyncioRunLoop
) -> Optional[Callable[[Timer], None]]:
    if entry.message is None and entry.max_fires is None:
        return None

    def action(timer: Timer) -> None:
        if entry.message is not None:
            print(f"[{entry.name}] {entry.message}", flush=True)
        if entry.max_fires is not None and recorder.count(entry.name) >= entry.max_fires:
            logger.info("%s reached %d fires, stopping", entry.name, entry.max_fires)
            timer.stop(runloop)

    return action


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
