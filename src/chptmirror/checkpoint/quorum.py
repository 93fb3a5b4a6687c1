"""
Quorum Evaluator.

Decides which checkpoint, if any, the monitors agree on this cycle:

1. threshold = round(ratio * number_of_monitors), halves rounded away from zero
2. tally every retained checkpoint line by tree size (multiplicities count)
3. scan the same lines again, in monitor order then file order, keeping a
   running max tree size and the largest timestamp seen so far

The scan is order dependent on ties and the timestamp high-water mark is
never reset when the running max grows. Both properties are part of the
observable output and are kept as is.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from chptmirror.protocol.errors import TimestampParseError

from .models import Checkpoint, MonitorHistory, QuorumTally

logger = logging.getLogger(__name__)

DEFAULT_QUORUM_RATIO = 0.75


@dataclass
class QuorumResult:
    """
    Outcome of one evaluation.

    Attributes:
        monitor_count: Number of monitor histories considered
        threshold: Observations required for a tree size to be accepted
        tally: Observation counts per tree size
        selected: Accepted checkpoint, or None when no size reached quorum
        skipped: Checkpoints excluded because their timestamp did not parse
    """
    monitor_count: int
    threshold: int
    tally: QuorumTally
    selected: Optional[Checkpoint]
    skipped: int = 0

    @property
    def tree_size(self) -> Optional[int]:
        return self.selected.tree_size if self.selected is not None else None


def quorum_threshold(monitor_count: int, ratio: float = DEFAULT_QUORUM_RATIO) -> int:
    """
    Observations needed for quorum among ``monitor_count`` monitors.

    >>> quorum_threshold(4), quorum_threshold(3), quorum_threshold(2)
    (3, 2, 2)
    """
    if monitor_count < 0:
        raise ValueError("monitor_count must be non-negative")
    return int(math.floor(ratio * monitor_count + 0.5))


def _iter_checkpoints(histories: Iterable[MonitorHistory]) -> Iterable[Checkpoint]:
    for history in histories:
        yield from history.checkpoints


def tally_tree_sizes(histories: Iterable[MonitorHistory]) -> QuorumTally:
    """
    Count checkpoint observations per tree size.

    Raises:
        MalformedCheckpointError: If any line has no parseable tree size
    """
    tally = QuorumTally()
    for checkpoint in _iter_checkpoints(histories):
        tally.add(checkpoint)
    return tally


def select_checkpoint(
    histories: Iterable[MonitorHistory],
    tally: QuorumTally,
    threshold: int,
) -> tuple[Optional[Checkpoint], int]:
    """
    Pick the checkpoint to accept.

    Returns the selected checkpoint (or None) and the number of quorum
    candidates skipped because their timestamp could not be parsed.
    """
    max_tree_size = 0
    largest_timestamp = 0
    selected: Optional[Checkpoint] = None
    skipped = 0

    for checkpoint in _iter_checkpoints(histories):
        tree_size = checkpoint.tree_size
        if not (tally.meets(tree_size, threshold) and tree_size >= max_tree_size):
            continue

        max_tree_size = tree_size

        try:
            timestamp = checkpoint.timestamp
        except TimestampParseError as e:
            logger.warning("Skipping checkpoint from %s: %s", checkpoint.source, e)
            skipped += 1
            continue

        if tree_size == max_tree_size and timestamp > largest_timestamp:
            largest_timestamp = timestamp
            selected = checkpoint

    return selected, skipped


def evaluate(
    histories: List[MonitorHistory],
    ratio: float = DEFAULT_QUORUM_RATIO,
) -> QuorumResult:
    """Run the full quorum decision over one cycle's histories."""
    threshold = quorum_threshold(len(histories), ratio)
    tally = tally_tree_sizes(histories)
    logger.debug("Quorum threshold %d over %d monitor(s), tally %s", threshold, len(histories), tally.as_dict())

    selected, skipped = select_checkpoint(histories, tally, threshold)
    return QuorumResult(
        monitor_count=len(histories),
        threshold=threshold,
        tally=tally,
        selected=selected,
        skipped=skipped,
    )
