"""
Command-line entry point for the checkpoint mirror.

    chptmirror [--interval 1m] [--workdir DIR] [--monitor-list FILE]
               [--accepted-file FILE] [--log-level LEVEL] [--once]

Exit codes:
    0  stopped by signal, or ``--once`` completed
    1  fatal error (logged at CRITICAL)
    2  invalid arguments or configuration
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

import chptmirror
from chptmirror.core.runner import MirrorRunner
from chptmirror.core.settings import MirrorSettings
from chptmirror.protocol.errors import MirrorError
from chptmirror.utils.duration import parse_duration

logger = logging.getLogger("chptmirror.cli")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _interval(value: str) -> float:
    try:
        seconds = parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"interval must be positive, got {value!r}")
    return seconds


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chptmirror",
        description=(
            "Accept transparency log checkpoints once a quorum of monitors "
            "agree on the tree size"
        ),
    )
    parser.add_argument(
        "--interval",
        type=_interval,
        default=None,
        metavar="DURATION",
        help="Length of interval between each periodical check (default: 1m)",
    )
    parser.add_argument(
        "--workdir",
        default=None,
        help="Directory holding the monitor logs (default: current directory)",
    )
    parser.add_argument(
        "--monitor-list",
        default=None,
        metavar="FILE",
        help="monitor_list.json to read monitor logs from instead of globbing",
    )
    parser.add_argument(
        "--accepted-file",
        default=None,
        metavar="FILE",
        help="Accepted checkpoint log (default: accepted_chpt.txt)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single cycle and exit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"chptmirror {chptmirror.__version__}",
    )
    return parser


def build_settings(args: argparse.Namespace) -> MirrorSettings:
    """Environment-backed settings with command-line overrides applied."""
    overrides: Dict[str, Any] = {}
    if args.interval is not None:
        overrides["interval_seconds"] = args.interval
    if args.workdir is not None:
        overrides["work_dir"] = args.workdir
    if args.monitor_list is not None:
        overrides["monitor_list"] = args.monitor_list
    if args.accepted_file is not None:
        overrides["accepted_file"] = args.accepted_file
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return MirrorSettings(**overrides)


def _install_signal_handlers(runner: MirrorRunner) -> None:
    def _signal_handler(signum, frame):
        logger.info("Received signal %d, stopping", signum)
        runner.request_stop()

    signal.signal(signal.SIGTERM, _signal_handler)
    signal.signal(signal.SIGINT, _signal_handler)


def run(args: argparse.Namespace) -> int:
    """Execute the mirror with parsed arguments. Returns the exit code."""
    try:
        settings = build_settings(args)
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    runner = MirrorRunner(settings)
    _install_signal_handlers(runner)

    try:
        if args.once:
            runner.run_cycle()
        else:
            runner.run_forever()
    except MirrorError as e:
        logger.critical("%s", e)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``chptmirror`` console script."""
    parser = create_parser()
    args = parser.parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
