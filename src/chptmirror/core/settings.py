"""
Central configuration for chptmirror.

A single typed configuration object read from environment variables
(12-factor style) with pydantic-settings. Command-line flags override it.

Usage:

    from chptmirror.core.settings import get_settings

    settings = get_settings()
    runner = MirrorRunner(settings)

Every field maps to ``CHPTMIRROR_<FIELD>``, e.g. ``CHPTMIRROR_INTERVAL_SECONDS=30``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chptmirror.checkpoint.quorum import DEFAULT_QUORUM_RATIO
from chptmirror.checkpoint.reader import DEFAULT_HISTORY_WINDOW, DEFAULT_MONITOR_GLOB
from chptmirror.checkpoint.writer import ACCEPTED_CHECKPOINT_FILE, DEFAULT_MAX_ENTRIES

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class MirrorSettings(BaseSettings):
    """
    Runtime settings for the checkpoint mirror.
    """

    model_config = SettingsConfigDict(env_prefix="CHPTMIRROR_")

    interval_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Sleep between cycles, in seconds.",
    )
    work_dir: str = Field(
        default=".",
        description="Directory scanned for monitor logs.",
    )
    monitor_glob: str = Field(
        default=DEFAULT_MONITOR_GLOB,
        description="Filename pattern identifying monitor logs.",
    )
    monitor_list: Optional[str] = Field(
        default=None,
        description="monitor_list.json to use instead of glob discovery.",
    )
    accepted_file: str = Field(
        default=ACCEPTED_CHECKPOINT_FILE,
        description="Accepted checkpoint log. Relative paths are under work_dir.",
    )
    max_accepted: int = Field(
        default=DEFAULT_MAX_ENTRIES,
        ge=1,
        description="Entries retained in the accepted log.",
    )
    history_window: int = Field(
        default=DEFAULT_HISTORY_WINDOW,
        ge=1,
        description="Most recent checkpoints read from each monitor log.",
    )
    quorum_ratio: float = Field(
        default=DEFAULT_QUORUM_RATIO,
        gt=0,
        le=1,
        description="Fraction of monitors (rounded half away from zero) required for quorum.",
    )
    fsync: bool = Field(
        default=True,
        description="fsync accepted log writes (disable only for testing).",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG/INFO/WARNING/ERROR/CRITICAL).",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        v = (v or "INFO").upper()
        if v == "WARN":
            v = "WARNING"
        if v not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> MirrorSettings:
    """
    Cached accessor for MirrorSettings.
    """
    return MirrorSettings()
