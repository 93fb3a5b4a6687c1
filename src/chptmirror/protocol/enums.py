from enum import Enum


class ErrorCode(str, Enum):
    DISCOVERY_ERROR = "discovery_error"
    READ_ERROR = "read_error"
    MALFORMED_CHECKPOINT = "malformed_checkpoint"
    TIMESTAMP_ERROR = "timestamp_error"
    ACCEPTED_LOG_ERROR = "accepted_log_error"
    INTERNAL_ERROR = "internal_error"
