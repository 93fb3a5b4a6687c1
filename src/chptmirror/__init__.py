"""
chptmirror: quorum mirroring of transparency log checkpoints.

Polls the checkpoint logs written by independent monitors and appends a
checkpoint to the accepted log only when a quorum agrees on the tree size.
"""

from .checkpoint import (
    Checkpoint,
    MonitorHistory,
    QuorumTally,
    QuorumResult,
    AcceptedLogWriter,
    evaluate,
    quorum_threshold,
)
from .core import MirrorRunner, MirrorSettings, CycleReport
from .protocol import MirrorError

__version__ = "0.1.0"

__all__ = [
    "Checkpoint",
    "MonitorHistory",
    "QuorumTally",
    "QuorumResult",
    "AcceptedLogWriter",
    "evaluate",
    "quorum_threshold",
    "MirrorRunner",
    "MirrorSettings",
    "CycleReport",
    "MirrorError",
]
