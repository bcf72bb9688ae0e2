"""Shared test fixtures for Roseboard tests."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import yaml

from roseboard.auth import CredentialAuth
from roseboard.dashboard import Dashboard
from roseboard.local_prefs import LocalPrefs
from roseboard.store import FileDocumentStore


class FakeClock:
    """Monotonic clock driven by the test."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeNow:
    """Settable wall clock for date-dependent behavior."""

    def __init__(self, value: datetime) -> None:
        self.value = value

    def __call__(self) -> datetime:
        return self.value


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a config file."""
    root = tmp_path / "workspace"
    (root / "store").mkdir(parents=True)
    (root / "client").mkdir(parents=True)

    config = {
        "timezone": "UTC",
        "focus_minutes": 25,
        "break_minutes": 5,
        "countdown_minutes": 10,
        "adjust_step_seconds": 60,
        "eod_hour": 21,
    }
    (root / "roseboard.yaml").write_text(
        yaml.dump(config, default_flow_style=False), encoding="utf-8"
    )

    os.environ["ROSEBOARD_ROOT"] = str(root)
    yield root
    if "ROSEBOARD_ROOT" in os.environ:
        del os.environ["ROSEBOARD_ROOT"]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def now() -> FakeNow:
    return FakeNow(datetime(2025, 1, 2, 10, 0, tzinfo=ZoneInfo("UTC")))


@pytest.fixture
def store(tmp_path: Path) -> FileDocumentStore:
    ticks = iter(range(1, 10_000))
    return FileDocumentStore(tmp_path / "store", now_ms=lambda: next(ticks))


@pytest.fixture
def prefs(tmp_path: Path) -> LocalPrefs:
    return LocalPrefs(tmp_path / "client" / "local_storage.json")


@pytest.fixture
def auth() -> CredentialAuth:
    return CredentialAuth(username="rose", password="s3cret", email="rose@example.com")


@pytest.fixture
def dashboard(auth, store, prefs, clock, now) -> Dashboard:
    fetch_calls = []

    def fetch():
        fetch_calls.append(now())
        return {"message": "Fetched message", "date": "x"}

    d = Dashboard(auth, store, prefs, clock=clock, now=now, fetch=fetch)
    d.fetch_calls = fetch_calls
    yield d
    d.close()
