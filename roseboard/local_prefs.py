"""Client-local key-value storage used in guest mode and for per-day caches."""

from __future__ import annotations

import threading
from pathlib import Path

from roseboard.fileio import read_json, write_json_atomic

KEY_HEADER_TITLE = "rose_header_title"
KEY_HEADER_INITIAL = "rose_header_initial"
KEY_FOCUS_TIME = "rose_focus_time"
KEY_EOD_LAST_DATE = "rose_eod_last_date"
KEY_EOD_MESSAGE = "rose_eod_message"


class LocalPrefs:
    """String values keyed by fixed names, kept in one JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = threading.Lock()

    def get(self, key: str, default: str | None = None) -> str | None:
        value = read_json(self.path).get(key)
        return default if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = read_json(self.path)
            data[key] = str(value)
            write_json_atomic(self.path, data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = read_json(self.path)
            if data.pop(key, None) is not None:
                write_json_atomic(self.path, data)
