"""Workspace root, timezone and path helpers for Roseboard."""

from __future__ import annotations

import os
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from roseboard.affirmation import format_date_key
from roseboard.config import AppConfig, load_config


def workspace_root() -> Path:
    """Get the workspace root directory (holds roseboard.yaml, store/ and client/)."""
    return Path(
        os.environ.get("ROSEBOARD_ROOT", str(Path.home() / "roseboard"))
    ).expanduser().resolve()


def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "roseboard.yaml"


def store_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "store"


def prefs_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "client" / "local_storage.json"


def get_config(root: Path | None = None) -> AppConfig:
    return load_config(config_path(root))


def get_timezone(config: AppConfig) -> ZoneInfo:
    """Timezone from config, defaulting to UTC when the name is unknown."""
    try:
        return ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def now_local(config: AppConfig) -> datetime:
    return datetime.now(get_timezone(config))


def today_key(now: datetime) -> str:
    """Long-form date key for *now*, e.g. ``Mon Jan 02 2025``."""
    return format_date_key(now.date())


def yesterday_key(now: datetime) -> str:
    return format_date_key((now - timedelta(days=1)).date())
