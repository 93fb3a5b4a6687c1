"""
Mirror runner.

Runs the quorum cycle on a fixed timer:

    discover monitors -> read bounded histories -> evaluate quorum -> record

Cycles are strictly sequential; the next one starts only after the interval
has elapsed following the previous one. Nothing but the interval survives
between cycles. Any MirrorError ends the loop; there is no retry.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from chptmirror.checkpoint.models import Checkpoint
from chptmirror.checkpoint.quorum import evaluate
from chptmirror.checkpoint.reader import discover_monitors, load_monitor_list, read_histories
from chptmirror.checkpoint.writer import AcceptedLogWriter
from chptmirror.utils.clock import elapsed_ms, monotonic_ms, now_iso
from chptmirror.utils.duration import format_duration

from .settings import MirrorSettings

logger = logging.getLogger(__name__)

# Upper bound on how long a signal-requested stop goes unnoticed.
STOP_POLL_SECONDS = 0.5


@dataclass
class CycleReport:
    """Summary of a single completed cycle."""

    started_at: str
    monitors: List[str] = field(default_factory=list)
    threshold: int = 0
    tally: Dict[str, int] = field(default_factory=dict)
    selected: Optional[Checkpoint] = None
    skipped: int = 0
    accepted_entries: int = 0
    duration_ms: int = 0

    @property
    def accepted(self) -> bool:
        return self.selected is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at,
            "monitors": self.monitors,
            "threshold": self.threshold,
            "tally": self.tally,
            "selected": self.selected.raw if self.selected is not None else None,
            "skipped": self.skipped,
            "accepted_entries": self.accepted_entries,
            "duration_ms": self.duration_ms,
        }


class MirrorRunner:
    """
    Periodic quorum-acceptance loop.

    Usage:
        runner = MirrorRunner(get_settings())
        runner.run_forever()
    """

    def __init__(self, settings: MirrorSettings) -> None:
        self._settings = settings
        self._work_dir = Path(settings.work_dir)

        accepted = Path(settings.accepted_file)
        if not accepted.is_absolute():
            accepted = self._work_dir / accepted

        self._writer = AcceptedLogWriter(
            accepted,
            max_entries=settings.max_accepted,
            sync=settings.fsync,
        )
        self._shutdown = threading.Event()
        self._stop_requested = False
        self._cycles = 0

    @property
    def settings(self) -> MirrorSettings:
        return self._settings

    @property
    def writer(self) -> AcceptedLogWriter:
        return self._writer

    @property
    def cycles(self) -> int:
        return self._cycles

    def _monitor_logs(self) -> List[Path]:
        if self._settings.monitor_list:
            list_path = Path(self._settings.monitor_list)
            if not list_path.is_absolute():
                list_path = self._work_dir / list_path
            return load_monitor_list(list_path)
        return discover_monitors(self._work_dir, self._settings.monitor_glob)

    def run_cycle(self) -> CycleReport:
        """
        Run one discover/read/evaluate/record pass.

        Raises:
            MirrorError: On any fatal condition; the accepted log is not touched
                unless reading and evaluation succeeded
        """
        started = monotonic_ms()
        report = CycleReport(started_at=now_iso())

        logs = self._monitor_logs()
        report.monitors = [os.fspath(p) for p in logs]

        histories = read_histories(logs, self._settings.history_window)
        result = evaluate(histories, self._settings.quorum_ratio)

        report.threshold = result.threshold
        report.tally = result.tally.as_dict()
        report.selected = result.selected
        report.skipped = result.skipped

        if result.selected is None:
            logger.warning(
                "No tree size reached quorum (%d of %d monitors); appending empty record",
                result.threshold,
                result.monitor_count,
            )

        report.accepted_entries = self._writer.record(result.selected)
        report.duration_ms = elapsed_ms(started)
        self._cycles += 1

        logger.info(
            "Cycle %d: monitors=%d threshold=%d tree_size=%s entries=%d (%dms)",
            self._cycles,
            result.monitor_count,
            result.threshold,
            result.tree_size if result.selected is not None else "-",
            report.accepted_entries,
            report.duration_ms,
        )
        return report

    def run_forever(self, max_cycles: Optional[int] = None) -> int:
        """
        Run cycles until stopped, ``max_cycles`` is reached, or a fatal error.

        Returns the number of cycles completed.
        """
        interval = self._settings.interval_seconds
        logger.info(
            "Starting checkpoint mirror in %s (interval %s)",
            self._work_dir,
            format_duration(interval),
        )

        completed = 0
        while not self.is_stopped:
            self.run_cycle()
            completed += 1
            if max_cycles is not None and completed >= max_cycles:
                break
            if self._sleep(interval):
                break

        logger.info("Checkpoint mirror stopped after %d cycle(s)", completed)
        return completed

    def _sleep(self, interval: float) -> bool:
        """Wait out the interval in short slices. Returns True if stopped meanwhile."""
        deadline = time.monotonic() + interval
        while not self._stop_requested:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            if self._shutdown.wait(min(remaining, STOP_POLL_SECONDS)):
                return True
        return True

    def stop(self) -> None:
        """Ask the loop to exit before its next cycle. Safe from other threads."""
        self._shutdown.set()

    def request_stop(self) -> None:
        """
        Signal-handler variant of ``stop``.

        Only sets a flag: the handler runs on the main thread, which may be
        holding the event's internal lock inside ``wait``.
        """
        self._stop_requested = True

    @property
    def is_stopped(self) -> bool:
        return self._stop_requested or self._shutdown.is_set()
