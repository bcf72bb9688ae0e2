"""Document store port and a file-backed implementation.

Each user has one record plus a task collection. Writes are merge-upserts,
and subscribers receive the full task list (newest first) right away and
after every mutation.

File layout under the store directory::

    users/<uid>/user.json    user record (settings, streak, focusTime, ...)
    users/<uid>/tasks.yaml   task collection
"""

from __future__ import annotations

import logging
import re
import secrets
import threading
import time
from pathlib import Path
from typing import Any, Callable

import yaml

from roseboard.fileio import read_json, read_yaml, write_json_atomic, write_yaml_atomic
from roseboard.models import Task, UserRecord

logger = logging.getLogger(__name__)

TaskListener = Callable[[list[Task]], Any]

_UID_RE = re.compile(r"^[A-Za-z0-9_.@-]+$")


class StoreError(Exception):
    """A store read or write failed."""


class DocumentStore:
    """Interface for the per-user document store."""

    def get_user(self, uid: str) -> UserRecord:
        raise NotImplementedError

    def merge_user(self, uid: str, fields: dict[str, Any]) -> UserRecord:
        raise NotImplementedError

    def list_tasks(self, uid: str) -> list[Task]:
        raise NotImplementedError

    def add_task(self, uid: str, data: dict[str, Any]) -> Task:
        raise NotImplementedError

    def update_task(self, uid: str, task_id: str, updates: dict[str, Any]) -> Task | None:
        raise NotImplementedError

    def delete_task(self, uid: str, task_id: str) -> bool:
        raise NotImplementedError

    def subscribe(self, uid: str, listener: TaskListener) -> Callable[[], None]:
        raise NotImplementedError


def deep_merge(base: dict[str, Any], fields: dict[str, Any]) -> dict[str, Any]:
    """Merge *fields* into a copy of *base*; nested dicts merge key by key."""
    out = dict(base)
    for k, v in fields.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _now_ms() -> int:
    return int(time.time() * 1000)


def _to_record(uid: str, raw: dict[str, Any]) -> UserRecord:
    try:
        return UserRecord.from_dict(raw)
    except (ValueError, TypeError) as e:
        raise StoreError(f"Malformed user record {uid}: {e}") from e


class FileDocumentStore(DocumentStore):
    def __init__(self, root: Path, now_ms: Callable[[], int] = _now_ms) -> None:
        self.root = root
        self.now_ms = now_ms
        self._listeners: dict[str, list[TaskListener]] = {}
        # Serializes read-modify-write cycles; reentrant for listeners that read back.
        self._lock = threading.RLock()

    # ── Paths ──────────────────────────────────────────────────

    def _user_dir(self, uid: str) -> Path:
        if not uid or uid in {".", ".."} or not _UID_RE.match(uid):
            raise ValueError(f"Invalid user id: {uid!r}")
        return self.root / "users" / uid

    def _user_path(self, uid: str) -> Path:
        return self._user_dir(uid) / "user.json"

    def _tasks_path(self, uid: str) -> Path:
        return self._user_dir(uid) / "tasks.yaml"

    # ── User record ────────────────────────────────────────────

    def _read_user_raw(self, uid: str) -> dict[str, Any]:
        path = self._user_path(uid)
        try:
            return read_json(path)
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read user {uid}: {e}") from e

    def get_user(self, uid: str) -> UserRecord:
        return _to_record(uid, self._read_user_raw(uid))

    def merge_user(self, uid: str, fields: dict[str, Any]) -> UserRecord:
        path = self._user_path(uid)
        with self._lock:
            merged = deep_merge(self._read_user_raw(uid), fields)
            record = _to_record(uid, merged)
            try:
                write_json_atomic(path, merged)
            except OSError as e:
                raise StoreError(f"Cannot write user {uid}: {e}") from e
        return record

    # ── Tasks ──────────────────────────────────────────────────

    def _read_tasks(self, uid: str) -> list[Task]:
        path = self._tasks_path(uid)
        try:
            data = read_yaml(path)
            items = data.get("tasks") if isinstance(data, dict) else None
            return [Task.from_dict(t) for t in (items or []) if isinstance(t, dict)]
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            raise StoreError(f"Cannot read tasks for {uid}: {e}") from e

    def _write_tasks(self, uid: str, tasks: list[Task]) -> None:
        path = self._tasks_path(uid)
        rows = [{"id": t.id, **t.to_dict()} for t in tasks]
        try:
            write_yaml_atomic(path, {"tasks": rows})
        except OSError as e:
            raise StoreError(f"Cannot write tasks for {uid}: {e}") from e
        self._notify(uid)

    def list_tasks(self, uid: str) -> list[Task]:
        return sorted(self._read_tasks(uid), key=lambda t: t.created_at, reverse=True)

    def add_task(self, uid: str, data: dict[str, Any]) -> Task:
        with self._lock:
            tasks = self._read_tasks(uid)
            task = Task.from_dict({**data, "done": False, "createdAt": self.now_ms()},
                                  task_id=secrets.token_hex(10))
            tasks.append(task)
            self._write_tasks(uid, tasks)
        return task

    def update_task(self, uid: str, task_id: str, updates: dict[str, Any]) -> Task | None:
        with self._lock:
            tasks = self._read_tasks(uid)
            for i, t in enumerate(tasks):
                if t.id == task_id:
                    tasks[i] = Task.from_dict({**t.to_dict(), **updates}, task_id=task_id)
                    self._write_tasks(uid, tasks)
                    return tasks[i]
        return None

    def delete_task(self, uid: str, task_id: str) -> bool:
        with self._lock:
            tasks = self._read_tasks(uid)
            remaining = [t for t in tasks if t.id != task_id]
            if len(remaining) == len(tasks):
                return False
            self._write_tasks(uid, remaining)
        return True

    # ── Subscriptions ──────────────────────────────────────────

    def subscribe(self, uid: str, listener: TaskListener) -> Callable[[], None]:
        self._listeners.setdefault(uid, []).append(listener)
        listener(self.list_tasks(uid))

        def unsubscribe() -> None:
            listeners = self._listeners.get(uid, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def _notify(self, uid: str) -> None:
        listeners = list(self._listeners.get(uid, []))
        if not listeners:
            return
        snapshot = self.list_tasks(uid)
        for listener in listeners:
            try:
                listener(list(snapshot))
            except Exception:
                logger.exception("Task listener failed for %s", uid)
