"""Tracker runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def env_str(name: str, default: str) -> str:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip() or default


def env_optional_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip() or default


def env_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    raw = os.environ.get(name)
    if raw is None:
        value = int(default)
    else:
        try:
            value = int(raw.strip())
        except ValueError:
            value = int(default)
    if minimum is not None:
        value = max(minimum, value)
    return value


def _default_sqlite_url() -> str:
    # data/ sits next to app.py
    app_root = Path(__file__).resolve().parents[1]
    data_dir = app_root / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{(data_dir / 'tracker.db').as_posix()}"


@dataclass(frozen=True)
class TrackerConfig:
    """Runtime configuration for the tracker pages and store.

    DB selection:
    - TRACKER_DATABASE_URL: tracker-specific DB URL (preferred)
    - DATABASE_URL: shared DB URL
    - If neither is set, defaults to local SQLite at data/tracker.db

    Dates:
    - TRACKER_TIMEZONE: zone every "today"/"this month" is computed in (default: Asia/Tokyo)

    Dashboard:
    - TRACKER_DEFAULT_TARGET_AMOUNT: monthly amount target when no goal is stored (default: 10000000)
    - TRACKER_DEFAULT_TARGET_POINTS: monthly points target when no goal is stored (default: 1000)
    - TRACKER_RECENT_ACTIVITY_LIMIT: completions listed under recent activity (default: 3)

    Calendar:
    - TRACKER_ROW_HEIGHT: pixel height of one day row (default: 44)
    - TRACKER_LANE_WIDTH: pixel width of one lane inside a member column (default: 120)

    Logging:
    - TRACKER_LOG_LEVEL (default: INFO)
    """

    database_url: str
    timezone: str

    default_target_amount: int
    default_target_points: int
    recent_activity_limit: int

    row_height: int
    lane_width: int

    log_level: str

    @classmethod
    def from_env(cls) -> "TrackerConfig":
        database_url = env_optional_str("TRACKER_DATABASE_URL") or env_optional_str("DATABASE_URL")
        if not database_url:
            database_url = _default_sqlite_url()

        return cls(
            database_url=database_url,
            timezone=env_str("TRACKER_TIMEZONE", "Asia/Tokyo"),
            default_target_amount=env_int("TRACKER_DEFAULT_TARGET_AMOUNT", 10_000_000, minimum=0),
            default_target_points=env_int("TRACKER_DEFAULT_TARGET_POINTS", 1_000, minimum=0),
            recent_activity_limit=env_int("TRACKER_RECENT_ACTIVITY_LIMIT", 3, minimum=1),
            row_height=env_int("TRACKER_ROW_HEIGHT", 44, minimum=8),
            lane_width=env_int("TRACKER_LANE_WIDTH", 120, minimum=16),
            log_level=env_str("TRACKER_LOG_LEVEL", "INFO").upper(),
        )


# Global config instance
_config: Optional[TrackerConfig] = None


def get_config() -> TrackerConfig:
    """Get the tracker configuration (cached)."""
    global _config
    if _config is None:
        _config = TrackerConfig.from_env()
    return _config


def reset_config() -> None:
    global _config
    _config = None
