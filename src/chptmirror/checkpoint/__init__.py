"""
Checkpoint quorum module.

Reads the checkpoints persisted by independent monitors, accepts one only
when a quorum of observations agree on the tree size, and appends it to a
bounded accepted-checkpoint log.

Components:
- Checkpoint Reader (discovery + bounded history)
- Quorum Evaluator (threshold, tally, scan-order selection)
- Accepted-Log Writer (append + retention)
"""

from chptmirror.checkpoint.models import (
    FIELD_SEPARATOR,
    Checkpoint,
    MonitorHistory,
    QuorumTally,
)
from chptmirror.checkpoint.quorum import (
    QuorumResult,
    evaluate,
    quorum_threshold,
    select_checkpoint,
    tally_tree_sizes,
)
from chptmirror.checkpoint.reader import (
    MonitorList,
    discover_monitors,
    load_monitor_list,
    read_histories,
    read_latest_checkpoints,
)
from chptmirror.checkpoint.writer import ACCEPTED_CHECKPOINT_FILE, AcceptedLogWriter

__all__ = [
    "FIELD_SEPARATOR",
    "Checkpoint",
    "MonitorHistory",
    "QuorumTally",
    "QuorumResult",
    "evaluate",
    "quorum_threshold",
    "select_checkpoint",
    "tally_tree_sizes",
    "MonitorList",
    "discover_monitors",
    "load_monitor_list",
    "read_histories",
    "read_latest_checkpoints",
    "ACCEPTED_CHECKPOINT_FILE",
    "AcceptedLogWriter",
]
