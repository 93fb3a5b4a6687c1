"""
Checkpoint Reader.

Discovers monitor logs and loads the tail of each one:
- Discovery by glob (``logInfo*.txt`` in the working directory), once per cycle
- Optional discovery from a ``monitor_list.json`` file
- Bounded history: only the last N lines of each log are kept

Reading is strictly read-only. Producers are expected to write whole lines;
files are not locked.
"""

from __future__ import annotations

import glob
import logging
import os
from collections import deque
from pathlib import Path
from typing import Iterable, List, Union

from pydantic import BaseModel, ValidationError

from chptmirror.protocol.errors import CheckpointReadError, MonitorDiscoveryError

from .models import Checkpoint, MonitorHistory

logger = logging.getLogger(__name__)

DEFAULT_MONITOR_GLOB = "logInfo*.txt"
DEFAULT_HISTORY_WINDOW = 2

# Monitor logs are read and rewritten as bytes-through-text; surrogateescape
# keeps undecodable bytes intact.
FILE_ENCODING = "utf-8"
FILE_ERRORS = "surrogateescape"

PathLike = Union[str, "os.PathLike[str]"]


class MonitorEntry(BaseModel):
    description: str
    logfile: str


class MonitorList(BaseModel):
    """Schema of ``monitor_list.json``."""

    monitors: List[MonitorEntry]


def split_lines(text: str) -> List[str]:
    """
    Split file content into lines the way a line scanner does.

    A trailing ``\\r`` is dropped from each line and a final line without a
    terminating newline still counts. No other characters act as separators.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    return line[:-1] if line.endswith("\r") else line


def discover_monitors(
    directory: PathLike = ".",
    pattern: str = DEFAULT_MONITOR_GLOB,
) -> List[Path]:
    """
    Find monitor logs in ``directory`` matching ``pattern``.

    Returns paths in lexical order. No match is not an error.

    Raises:
        MonitorDiscoveryError: If the directory cannot be scanned
    """
    base = Path(directory)
    if not base.is_dir():
        raise MonitorDiscoveryError(f"Finding monitor logs: {base} is not a directory")
    try:
        matches = glob.glob(os.path.join(glob.escape(str(base)), pattern))
    except (OSError, ValueError) as e:
        raise MonitorDiscoveryError(f"Finding monitor logs matching {pattern!r}: {e}") from e
    monitors = sorted(Path(m) for m in matches)
    logger.debug("Discovered %d monitor log(s) in %s", len(monitors), base)
    return monitors


def load_monitor_list(path: PathLike) -> List[Path]:
    """
    Read monitor log paths from a monitor list JSON file.

    Relative ``logfile`` entries are resolved against the list's directory.

    Raises:
        MonitorDiscoveryError: If the file is unreadable or does not match the schema
    """
    list_path = Path(path)
    try:
        contents = list_path.read_text(encoding=FILE_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        raise MonitorDiscoveryError(f"Reading monitor list {list_path}: {e}") from e

    try:
        parsed = MonitorList.model_validate_json(contents)
    except ValidationError as e:
        raise MonitorDiscoveryError(f"Invalid monitor list {list_path}: {e}") from e

    monitors = []
    for entry in parsed.monitors:
        logfile = Path(entry.logfile)
        if not logfile.is_absolute():
            logfile = list_path.parent / logfile
        monitors.append(logfile)
    return monitors


def read_latest_checkpoints(
    path: PathLike,
    window: int = DEFAULT_HISTORY_WINDOW,
) -> MonitorHistory:
    """
    Load the last ``window`` checkpoints from a monitor log.

    Raises:
        CheckpointReadError: If the file cannot be opened or read
    """
    if window < 1:
        raise ValueError("window must be at least 1")

    logfile = Path(path)
    try:
        with open(logfile, "r", encoding=FILE_ENCODING, errors=FILE_ERRORS, newline="\n") as f:
            tail = deque(f, maxlen=window)
    except OSError as e:
        raise CheckpointReadError(f"Reading checkpoints from {str(logfile)!r}: {e}") from e

    retained = [_strip_line_ending(line) for line in tail]
    return MonitorHistory(
        logfile=logfile,
        checkpoints=[Checkpoint(raw=line, source=str(logfile)) for line in retained],
    )


def read_histories(
    paths: Iterable[PathLike],
    window: int = DEFAULT_HISTORY_WINDOW,
) -> List[MonitorHistory]:
    """Read every monitor log in order. The first failure aborts."""
    return [read_latest_checkpoints(p, window) for p in paths]
