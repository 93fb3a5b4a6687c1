"""
Accepted-Log Writer.

The accepted log is the durable output of the mirror:
- One accepted checkpoint per line, same in-line format as monitor logs
- Appended once per cycle, flushed and fsynced before returning
- Retention: after each append only the last ``max_entries`` lines survive

Retention rewrites the file in place. It expects that no other process is
appending to the accepted log at the same time.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from chptmirror.protocol.errors import AcceptedLogError

from .models import Checkpoint
from .reader import FILE_ENCODING, FILE_ERRORS, split_lines

logger = logging.getLogger(__name__)

ACCEPTED_CHECKPOINT_FILE = "accepted_chpt.txt"
DEFAULT_MAX_ENTRIES = 20


class AcceptedLogWriter:
    """
    Append-then-truncate writer for the accepted checkpoint log.

    Usage:
        writer = AcceptedLogWriter("accepted_chpt.txt")
        writer.record(result.selected)
    """

    def __init__(
        self,
        path: Union[str, "os.PathLike[str]"] = ACCEPTED_CHECKPOINT_FILE,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        sync: bool = True,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._path = Path(path)
        self._max_entries = max_entries
        self._sync = sync

    @property
    def path(self) -> Path:
        return self._path

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def append(self, checkpoint: Optional[Checkpoint]) -> str:
        """
        Append one record. ``None`` writes an empty line.

        Returns the line written (without its newline).
        """
        line = checkpoint.raw if checkpoint is not None else ""
        try:
            with open(self._path, "a", encoding=FILE_ENCODING, errors=FILE_ERRORS, newline="") as f:
                f.write(line + "\n")
                f.flush()
                if self._sync:
                    os.fsync(f.fileno())
        except OSError as e:
            raise AcceptedLogError(f"Opening accepted checkpoint log {self._path}: {e}") from e
        return line

    def read_entries(self) -> List[str]:
        """Read all lines of the accepted log. A missing file reads as empty."""
        if not self._path.exists():
            return []
        try:
            with open(self._path, "r", encoding=FILE_ENCODING, errors=FILE_ERRORS, newline="") as f:
                return split_lines(f.read())
        except OSError as e:
            raise AcceptedLogError(f"Reading accepted checkpoint log {self._path}: {e}") from e

    def enforce_retention(self) -> int:
        """
        Keep only the newest ``max_entries`` lines.

        Returns the number of lines left in the file.
        """
        lines = self.read_entries()
        if len(lines) <= self._max_entries:
            return len(lines)

        kept = lines[-self._max_entries:]
        try:
            with open(self._path, "w", encoding=FILE_ENCODING, errors=FILE_ERRORS, newline="") as f:
                f.write("".join(line + "\n" for line in kept))
                f.flush()
                if self._sync:
                    os.fsync(f.fileno())
        except OSError as e:
            raise AcceptedLogError(f"Failed to delete old checkpoints in {self._path}: {e}") from e

        logger.debug("Truncated %s from %d to %d entries", self._path, len(lines), len(kept))
        return len(kept)

    def record(self, checkpoint: Optional[Checkpoint]) -> int:
        """Append ``checkpoint`` and enforce retention. Returns the resulting line count."""
        self.append(checkpoint)
        return self.enforce_retention()
