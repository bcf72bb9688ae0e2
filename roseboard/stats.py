"""Login streak and cumulative focus minutes."""

from __future__ import annotations

import logging

from roseboard.local_prefs import KEY_FOCUS_TIME, LocalPrefs
from roseboard.store import DocumentStore, StoreError

logger = logging.getLogger(__name__)


def next_streak(current: int, last_login_date: str | None, today: str, yesterday: str) -> int | None:
    """Streak after a login today, or None if today's login was already counted.

    Consecutive days extend the streak; any gap (or a first login) restarts at 1.
    """
    if last_login_date == today:
        return None
    if last_login_date == yesterday:
        return current + 1
    return 1


class Statistics:
    def __init__(self) -> None:
        self.streak = 0
        self.focus_time = 0

    def load(self, store: DocumentStore, uid: str) -> None:
        try:
            record = store.get_user(uid)
        except StoreError:
            logger.exception("Error loading statistics")
            return
        self.streak = record.streak
        self.focus_time = record.focus_time

    def load_guest(self, prefs: LocalPrefs) -> None:
        try:
            raw = prefs.get(KEY_FOCUS_TIME)
            if raw is not None:
                self.focus_time = max(0, int(raw))
        except (OSError, ValueError):
            logger.exception("Error loading guest focus time")

    def update_login_streak(self, store: DocumentStore, uid: str, today: str, yesterday: str) -> int:
        try:
            record = store.get_user(uid)
            streak = next_streak(record.streak, record.last_login_date, today, yesterday)
            if streak is None:
                self.streak = record.streak
                return self.streak
            self.streak = streak
            store.merge_user(uid, {"streak": streak, "lastLoginDate": today})
        except StoreError:
            logger.exception("Error updating login streak")
        return self.streak

    def add_focus_time(
        self,
        minutes: int,
        store: DocumentStore,
        uid: str | None,
        prefs: LocalPrefs,
    ) -> int:
        """Add focus minutes; signed-in users persist to the store, guests locally."""
        if minutes <= 0:
            return self.focus_time
        self.focus_time += minutes
        try:
            if uid is not None:
                store.merge_user(uid, {"focusTime": self.focus_time})
            else:
                prefs.set(KEY_FOCUS_TIME, str(self.focus_time))
        except (StoreError, OSError):
            logger.exception("Error saving focus time")
        return self.focus_time
