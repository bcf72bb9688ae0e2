"""Header (title + initial) and theme preferences."""

from __future__ import annotations

import logging

from roseboard.local_prefs import KEY_HEADER_INITIAL, KEY_HEADER_TITLE, LocalPrefs
from roseboard.models import DEFAULT_HEADER_INITIAL, DEFAULT_HEADER_TITLE, THEME_MODES
from roseboard.store import DocumentStore, StoreError

logger = logging.getLogger(__name__)

MAX_INITIAL_LENGTH = 2


def normalize_initial(value: str) -> str:
    return value.strip().upper()[:MAX_INITIAL_LENGTH]


def default_initial(name: str) -> str:
    name = name.strip()
    return name[0].upper() if name else DEFAULT_HEADER_INITIAL


class HeaderSettings:
    """Editable dashboard title and one- or two-letter initial.

    Always saved locally; also synced to the store when signed in.
    """

    def __init__(self) -> None:
        self.title = DEFAULT_HEADER_TITLE
        self.initial = DEFAULT_HEADER_INITIAL

    def load_local(self, prefs: LocalPrefs) -> None:
        try:
            self.title = prefs.get(KEY_HEADER_TITLE) or DEFAULT_HEADER_TITLE
            self.initial = prefs.get(KEY_HEADER_INITIAL) or DEFAULT_HEADER_INITIAL
        except (OSError, ValueError):
            logger.exception("Error loading local header settings")

    def load(self, prefs: LocalPrefs, store: DocumentStore, uid: str, name: str = "") -> None:
        """Load the user's saved header.

        A user with no saved title starts from the defaults, with the
        initial taken from their display name, and the defaults are saved.
        """
        try:
            settings = store.get_user(uid).settings
        except StoreError:
            logger.exception("Error loading header settings")
            return
        if settings.header_title:
            self.title = settings.header_title
            if settings.header_initial:
                self.initial = settings.header_initial
            return
        initial = settings.header_initial or default_initial(name)
        self.save(prefs, store, uid, title=DEFAULT_HEADER_TITLE, initial=initial)

    def save(
        self,
        prefs: LocalPrefs,
        store: DocumentStore,
        uid: str | None,
        title: str | None = None,
        initial: str | None = None,
    ) -> None:
        if title is not None:
            self.title = title.strip()
        if initial is not None:
            self.initial = normalize_initial(initial)
        try:
            prefs.set(KEY_HEADER_TITLE, self.title)
            prefs.set(KEY_HEADER_INITIAL, self.initial)
            if uid is not None:
                store.merge_user(uid, {"settings": {"headerTitle": self.title, "headerInitial": self.initial}})
        except (StoreError, OSError):
            logger.exception("Error saving header settings")


def auto_is_dark(hour: int) -> bool:
    """Automatic theme: dark from 19:00 until 07:00."""
    return hour >= 19 or hour < 7


class Theme:
    def __init__(self, mode: str = "dark") -> None:
        if mode not in THEME_MODES:
            raise ValueError(f"Invalid theme mode: {mode}")
        self.mode = mode

    def is_dark(self, hour: int) -> bool:
        if self.mode == "auto":
            return auto_is_dark(hour)
        return self.mode == "dark"

    def toggle(self) -> str:
        """Flip light/dark. Has no effect while in auto mode."""
        if self.mode != "auto":
            self.mode = "light" if self.mode == "dark" else "dark"
        return self.mode

    def set_auto(self, enabled: bool, hour: int) -> str:
        """Turn auto on, or off keeping whatever auto currently shows."""
        if enabled:
            self.mode = "auto"
        elif self.mode == "auto":
            self.mode = "dark" if auto_is_dark(hour) else "light"
        return self.mode

    def load(self, store: DocumentStore, uid: str) -> None:
        try:
            self.mode = store.get_user(uid).settings.theme_mode
        except StoreError:
            logger.exception("Error loading theme preference")

    def save(self, store: DocumentStore, uid: str | None) -> None:
        if uid is None:
            return
        try:
            store.merge_user(uid, {"settings": {"themeMode": self.mode}})
        except StoreError:
            logger.exception("Error saving theme preference")
