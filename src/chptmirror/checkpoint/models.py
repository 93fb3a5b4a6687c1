"""
Checkpoint data models.

Monitors persist one checkpoint per line. Inside a line the logical fields
are separated by the literal two-character sequence backslash + "n" (not a
real newline), in a fixed order:

    origin \\n tree_size \\n root_hash \\n metadata

The metadata field carries a ``timestamp:<int>`` pair. Lines are kept
byte-for-byte so the accepted log reproduces exactly what monitors wrote.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from chptmirror.protocol.errors import MalformedCheckpointError, TimestampParseError


# In-line field separator used by the monitors (a backslash followed by "n").
FIELD_SEPARATOR = "\\n"

TREE_SIZE_FIELD = 1
METADATA_FIELD = 3

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def _parse_decimal(text: str) -> Optional[int]:
    """Parse a signed base-10 integer with no surrounding whitespace."""
    if not _DECIMAL_RE.fullmatch(text):
        return None
    return int(text)


@dataclass(frozen=True)
class Checkpoint:
    """
    A single checkpoint line as written by a monitor.

    Attributes:
        raw: The exact line text (without its terminating newline)
        source: Monitor log the line was read from, if known
    """
    raw: str
    source: Optional[str] = None

    @property
    def fields(self) -> List[str]:
        return self.raw.split(FIELD_SEPARATOR)

    @property
    def origin(self) -> str:
        return self.fields[0]

    @property
    def root_hash(self) -> Optional[str]:
        fields = self.fields
        return fields[2] if len(fields) > 2 else None

    @property
    def tree_size(self) -> int:
        """
        Tree size claimed by the checkpoint.

        Raises:
            MalformedCheckpointError: If the field is missing or not an integer
        """
        fields = self.fields
        if len(fields) <= TREE_SIZE_FIELD:
            raise MalformedCheckpointError(
                f"Checkpoint from {self.source or '<unknown>'} has no tree size field: {self.raw!r}"
            )
        value = _parse_decimal(fields[TREE_SIZE_FIELD])
        if value is None:
            raise MalformedCheckpointError(
                f"Converting tree size to int: invalid syntax {fields[TREE_SIZE_FIELD]!r}"
            )
        if not (_INT64_MIN <= value <= _INT64_MAX):
            raise MalformedCheckpointError(
                f"Converting tree size to int: value out of range {fields[TREE_SIZE_FIELD]!r}"
            )
        return value

    @property
    def tree_size_key(self) -> str:
        """Canonical tally key for this checkpoint's tree size."""
        return str(self.tree_size)

    @property
    def timestamp(self) -> int:
        """
        Timestamp from the metadata field.

        Only the text after the first colon is used, trimmed of whitespace.

        Raises:
            TimestampParseError: If the field, the colon or the integer is missing
        """
        fields = self.fields
        if len(fields) <= METADATA_FIELD:
            raise TimestampParseError(f"Checkpoint has no metadata field: {self.raw!r}")
        parts = fields[METADATA_FIELD].split(":")
        if len(parts) < 2:
            raise TimestampParseError(
                f"Metadata field has no key/value pair: {fields[METADATA_FIELD]!r}"
            )
        text = parts[1].strip()
        value = _parse_decimal(text)
        if value is None or not (_INT64_MIN <= value <= _INT64_MAX):
            raise TimestampParseError(f"Parsing timestamp: invalid value {text!r}")
        return value


@dataclass
class MonitorHistory:
    """
    The most recent checkpoints read from one monitor's log.

    Attributes:
        logfile: Path of the monitor log
        checkpoints: Retained lines, oldest first
    """
    logfile: Path
    checkpoints: List[Checkpoint] = field(default_factory=list)

    def __iter__(self) -> Iterator[Checkpoint]:
        return iter(self.checkpoints)

    def __len__(self) -> int:
        return len(self.checkpoints)


class QuorumTally:
    """
    Observation counts per tree size for a single cycle.

    Every checkpoint line counts once, so a monitor whose retained window
    holds the same size twice votes twice for that size.
    """

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}

    def add(self, checkpoint: Checkpoint) -> None:
        key = checkpoint.tree_size_key
        self._counts[key] = self._counts.get(key, 0) + 1

    def count(self, tree_size: int) -> int:
        return self._counts.get(str(tree_size), 0)

    def meets(self, tree_size: int, threshold: int) -> bool:
        return self.count(tree_size) >= threshold

    def as_dict(self) -> Dict[str, int]:
        return dict(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"QuorumTally({self._counts!r})"
