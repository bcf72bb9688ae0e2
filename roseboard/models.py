"""Typed dataclasses for the Roseboard data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in stored documents is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

THEME_MODES = ("auto", "light", "dark")

DEFAULT_HEADER_TITLE = "Your Space"
DEFAULT_HEADER_INITIAL = "T"


# ── Tasks ─────────────────────────────────────────────────────


@dataclass
class Task:
    id: str = ""
    title: str = ""
    done: bool = False
    created_at: int = 0  # epoch milliseconds
    due_date: str | None = None  # YYYY-MM-DD
    is_recurring: bool = False
    notes: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any], task_id: str | None = None) -> Task:
        return cls(
            id=str(task_id if task_id is not None else d.get("id", "")),
            title=str(d.get("title", "")),
            done=bool(d.get("done", False)),
            created_at=int(d.get("createdAt", 0) or 0),
            due_date=d.get("dueDate") or None,
            is_recurring=bool(d.get("isRecurring", False)),
            notes=str(d.get("notes", "") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "title": self.title,
            "done": self.done,
            "createdAt": self.created_at,
        }
        if self.due_date:
            d["dueDate"] = self.due_date
        if self.is_recurring:
            d["isRecurring"] = True
        if self.notes:
            d["notes"] = self.notes
        return d


# ── User record ───────────────────────────────────────────────


@dataclass
class Settings:
    theme_mode: str = "dark"
    header_title: str | None = None
    header_initial: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        mode = str(d.get("themeMode", "dark"))
        return cls(
            theme_mode=mode if mode in THEME_MODES else "dark",
            header_title=d.get("headerTitle"),
            header_initial=d.get("headerInitial"),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"themeMode": self.theme_mode}
        if self.header_title is not None:
            d["headerTitle"] = self.header_title
        if self.header_initial is not None:
            d["headerInitial"] = self.header_initial
        return d


@dataclass
class UserRecord:
    settings: Settings = field(default_factory=Settings)
    streak: int = 0
    focus_time: int = 0  # minutes
    last_login_date: str | None = None
    global_notes: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> UserRecord:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            settings=Settings.from_dict(d.get("settings") or {}),
            streak=int(d.get("streak", 0) or 0),
            focus_time=int(d.get("focusTime", 0) or 0),
            last_login_date=d.get("lastLoginDate"),
            global_notes=str(d.get("globalNotes", "") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "settings": self.settings.to_dict(),
            "streak": self.streak,
            "focusTime": self.focus_time,
            "lastLoginDate": self.last_login_date,
            "globalNotes": self.global_notes,
        }


# ── Identity ──────────────────────────────────────────────────


@dataclass
class Identity:
    uid: str = ""
    name: str = ""
    email: str = ""
    picture: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"uid": self.uid, "name": self.name, "email": self.email}
        if self.picture:
            d["picture"] = self.picture
        return d
