from .enums import ErrorCode
from .errors import (
    MirrorError,
    MonitorDiscoveryError,
    CheckpointReadError,
    MalformedCheckpointError,
    TimestampParseError,
    AcceptedLogError,
)

__all__ = [
    "ErrorCode",
    "MirrorError",
    "MonitorDiscoveryError",
    "CheckpointReadError",
    "MalformedCheckpointError",
    "TimestampParseError",
    "AcceptedLogError",
]
