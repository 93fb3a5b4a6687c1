from .settings import MirrorSettings, get_settings
from .runner import CycleReport, MirrorRunner

__all__ = ["MirrorSettings", "get_settings", "CycleReport", "MirrorRunner"]
