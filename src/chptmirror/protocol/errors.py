from typing import Optional
from .enums import ErrorCode


class MirrorError(Exception):
    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.code = code or ErrorCode.INTERNAL_ERROR


class MonitorDiscoveryError(MirrorError):
    """Raised when monitor log files cannot be enumerated."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DISCOVERY_ERROR)


class CheckpointReadError(MirrorError):
    """Raised when a monitor log cannot be opened or scanned."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.READ_ERROR)


class MalformedCheckpointError(MirrorError):
    """Raised when a checkpoint line has no parseable tree size."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.MALFORMED_CHECKPOINT)


class TimestampParseError(MirrorError):
    """Raised when the timestamp field of a checkpoint cannot be parsed.

    Recoverable: the evaluator skips the checkpoint and keeps going.
    """

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.TIMESTAMP_ERROR)


class AcceptedLogError(MirrorError):
    """Raised when the accepted checkpoint log cannot be written or rewritten."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.ACCEPTED_LOG_ERROR)
