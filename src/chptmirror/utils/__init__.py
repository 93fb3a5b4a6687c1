from .clock import now_iso, monotonic_ms, elapsed_ms
from .duration import parse_duration, format_duration

__all__ = [
    "now_iso",
    "monotonic_ms",
    "elapsed_ms",
    "parse_duration",
    "format_duration",
]
