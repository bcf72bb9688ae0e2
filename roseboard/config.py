"""Application configuration loaded from ``roseboard.yaml``.

The file lives in the workspace root (see :mod:`roseboard.workspace`).
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from roseboard.fileio import read_yaml

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class AppConfig:
    timezone: str = "UTC"
    focus_minutes: int = 25
    break_minutes: int = 5
    countdown_minutes: int = 25
    adjust_step_seconds: int = 60
    tick_interval: float = 0.1
    eod_hour: int = 21
    server_url: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AppConfig:
        if not d or not isinstance(d, dict):
            return cls()
        eod_hour = int(d.get("eod_hour", 21))
        if not 0 <= eod_hour <= 23:
            raise ValueError(f"eod_hour must be 0-23, got {eod_hour}")
        tick = float(d.get("tick_interval", 0.1))
        if tick <= 0:
            raise ValueError(f"tick_interval must be positive, got {tick}")
        return cls(
            timezone=str(d.get("timezone", "UTC")),
            focus_minutes=max(1, int(d.get("focus_minutes", 25))),
            break_minutes=max(1, int(d.get("break_minutes", 5))),
            countdown_minutes=max(0, int(d.get("countdown_minutes", 25))),
            adjust_step_seconds=int(d.get("adjust_step_seconds", 60)),
            tick_interval=tick,
            eod_hour=eod_hour,
            server_url=d.get("server_url") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "timezone": self.timezone,
            "focus_minutes": self.focus_minutes,
            "break_minutes": self.break_minutes,
            "countdown_minutes": self.countdown_minutes,
            "adjust_step_seconds": self.adjust_step_seconds,
            "tick_interval": self.tick_interval,
            "eod_hour": self.eod_hour,
        }
        if self.server_url:
            d["server_url"] = self.server_url
        return d


def load_config(path: Path) -> AppConfig:
    """Load config from *path*, falling back to defaults on a missing or broken file."""
    try:
        return AppConfig.from_dict(read_yaml(path) or {})
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        logger.error("Invalid config %s, using defaults: %s", path, e)
        return AppConfig()


def log_level() -> int:
    name = os.environ.get("ROSEBOARD_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Configure root logging once at process entry."""
    logging.basicConfig(level=log_level(), format=LOG_FORMAT, force=True)
