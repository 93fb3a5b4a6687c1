"""
Clock helpers for cycle reports:
- ISO-8601 UTC timestamps
- Monotonic millisecond counter for cycle durations
"""

from __future__ import annotations
import datetime as _dt
import time


def now_iso() -> str:
    """Current UTC time as ISO-8601 with a Z suffix."""
    return _dt.datetime.now(tz=_dt.timezone.utc).isoformat().replace("+00:00", "Z")


def monotonic_ms() -> int:
    """Monotonic millisecond counter, unaffected by wall-clock changes."""
    return int(time.monotonic() * 1000)


def elapsed_ms(started_ms: int) -> int:
    """Milliseconds since a ``monotonic_ms()`` reading."""
    return monotonic_ms() - started_ms
