"""Top-level dashboard state composed from per-concern state objects.

The dashboard owns its timers and its task subscription. Auth, store,
local prefs and the full-screen display are passed in, so nothing here
depends on a specific provider.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable

from roseboard.auth import AuthProvider
from roseboard.config import AppConfig
from roseboard.eod import EveningMessage, Fetcher, http_fetcher, local_fetcher
from roseboard.local_prefs import LocalPrefs
from roseboard.models import Identity, Task
from roseboard.settings import HeaderSettings, Theme
from roseboard.stats import Statistics
from roseboard.store import DocumentStore, StoreError
from roseboard.tasks import TaskList, is_non_essential
from roseboard.timer import Clock, Presentation, Timer, countdown_config, pomodoro_config
from roseboard.workspace import now_local, today_key, yesterday_key

logger = logging.getLogger(__name__)


class Dashboard:
    def __init__(
        self,
        auth: AuthProvider,
        store: DocumentStore,
        prefs: LocalPrefs,
        config: AppConfig | None = None,
        clock: Clock = time.monotonic,
        now: Callable[[], datetime] | None = None,
        fetch: Fetcher | None = None,
        display: Any = None,
    ) -> None:
        self.auth = auth
        self.store = store
        self.prefs = prefs
        self.config = config or AppConfig()
        self.now = now or (lambda: now_local(self.config))

        self.identity: Identity | None = None
        self.tasks = TaskList()
        self.stats = Statistics()
        self.header = HeaderSettings()
        self.theme = Theme()
        self.notes = ""
        self.low_energy = False

        self.pomodoro = Timer(
            pomodoro_config(self.config.focus_minutes, self.config.break_minutes),
            clock=clock,
            on_focus_time=self.add_focus_time,
        )
        self.countdown = Timer(
            countdown_config(self.config.countdown_minutes * 60),
            clock=clock,
            on_focus_time=self.add_focus_time,
        )
        self.presentation = Presentation(display)

        if fetch is None:
            if self.config.server_url:
                fetch = http_fetcher(self.config.server_url)
            else:
                fetch = local_fetcher(self.now)
        self.eod = EveningMessage(prefs, fetch, self.config.eod_hour)

        self._unsubscribe: Callable[[], None] | None = None
        self.header.load_local(prefs)
        self.stats.load_guest(prefs)

    def __enter__(self) -> Dashboard:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ── Session ────────────────────────────────────────────────

    @property
    def uid(self) -> str | None:
        return self.identity.uid if self.identity else None

    @property
    def signed_in(self) -> bool:
        return self.identity is not None

    def restore_session(self) -> bool:
        identity = self.auth.current()
        if identity is None:
            return False
        self._attach(identity)
        return True

    def sign_in(self, username: str, password: str) -> bool:
        identity = self.auth.sign_in(username, password)
        if identity is None:
            return False
        self._attach(identity)
        return True

    def sign_out(self) -> None:
        self.auth.sign_out()
        self._detach()
        self.identity = None
        self.notes = ""
        self.stats = Statistics()
        self.stats.load_guest(self.prefs)
        self.header.load_local(self.prefs)

    def _attach(self, identity: Identity) -> None:
        self._detach()
        self.identity = identity
        uid = identity.uid
        now = self.now()
        self.stats.load(self.store, uid)
        self.stats.update_login_streak(self.store, uid, today_key(now), yesterday_key(now))
        self.header.load(self.prefs, self.store, uid, identity.name)
        self.theme.load(self.store, uid)
        try:
            self.notes = self.store.get_user(uid).global_notes
        except StoreError:
            logger.exception("Error loading global notes")
        try:
            self._unsubscribe = self.store.subscribe(uid, self.tasks.replace)
        except StoreError:
            logger.exception("Error subscribing to tasks")

    def _detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.tasks.clear()

    def close(self) -> None:
        """Release the task subscription. Safe to call more than once."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # ── Tasks ──────────────────────────────────────────────────

    def today_iso(self) -> str:
        return self.now().date().isoformat()

    def is_locked(self, task: Task) -> bool:
        """On a low-energy day, non-essential tasks are read-only."""
        return self.low_energy and is_non_essential(task, self.today_iso())

    def _unlocked(self, task_id: str) -> bool:
        task = self.tasks.find(task_id)
        return task is not None and not self.is_locked(task)

    def add_task(
        self, title: str, due_date: str | None = None, is_recurring: bool = False, notes: str = ""
    ) -> tuple[Task | None, list[str]]:
        return self.tasks.add(self.store, self.uid, title, due_date, is_recurring, notes)

    def toggle_task(self, task_id: str) -> Task | None:
        if not self._unlocked(task_id):
            return None
        return self.tasks.toggle(self.store, self.uid, task_id)

    def update_task(self, task_id: str, updates: dict[str, Any]) -> tuple[Task | None, list[str]]:
        if not self._unlocked(task_id):
            return None, []
        return self.tasks.update(self.store, self.uid, task_id, updates)

    def remove_task(self, task_id: str) -> bool:
        if not self._unlocked(task_id):
            return False
        return self.tasks.remove(self.store, self.uid, task_id)

    def repeat_task(self, task_id: str) -> Task | None:
        if not self._unlocked(task_id):
            return None
        return self.tasks.repeat(self.store, self.uid, task_id)

    # ── Statistics, notes, settings ────────────────────────────

    def add_focus_time(self, minutes: int) -> int:
        return self.stats.add_focus_time(minutes, self.store, self.uid, self.prefs)

    def save_notes(self, text: str) -> None:
        self.notes = text
        if self.uid is None:
            return
        try:
            self.store.merge_user(self.uid, {"globalNotes": text})
        except StoreError:
            logger.exception("Error saving global notes")

    def set_header(self, title: str | None = None, initial: str | None = None) -> None:
        self.header.save(self.prefs, self.store, self.uid, title, initial)

    def toggle_theme(self) -> str:
        mode = self.theme.toggle()
        self.theme.save(self.store, self.uid)
        return mode

    def set_auto_theme(self, enabled: bool) -> str:
        mode = self.theme.set_auto(enabled, self.now().hour)
        self.theme.save(self.store, self.uid)
        return mode

    def is_dark(self) -> bool:
        return self.theme.is_dark(self.now().hour)

    # ── Timers and evening message ─────────────────────────────

    def tick(self) -> None:
        self.pomodoro.tick()
        self.countdown.tick()

    def enter_fullscreen(self) -> None:
        self.presentation.enter()

    def exit_fullscreen(self) -> None:
        self.presentation.exit()

    def evening_message(self) -> str | None:
        return self.eod.current(self.now())
