"""Evening message shown on the dashboard after a configured hour.

The message is fetched at most once per day and cached in local prefs
together with the date it was fetched for.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

import httpx

from roseboard.affirmation import generate
from roseboard.local_prefs import KEY_EOD_LAST_DATE, KEY_EOD_MESSAGE, LocalPrefs
from roseboard.workspace import today_key

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Rest well. You've earned it."
EOD_PATH = "/api/eod-message"

Fetcher = Callable[[], dict[str, Any]]


def local_fetcher(now: Callable[[], datetime]) -> Fetcher:
    """Generate the message in-process instead of asking the backend."""

    def fetch() -> dict[str, Any]:
        key = today_key(now())
        return {"message": generate(key), "date": key}

    return fetch


def http_fetcher(base_url: str, timeout: float = 10.0) -> Fetcher:
    url = base_url.rstrip("/") + EOD_PATH

    def fetch() -> dict[str, Any]:
        response = httpx.get(url, timeout=timeout)
        response.raise_for_status()
        return response.json()

    return fetch


class EveningMessage:
    def __init__(self, prefs: LocalPrefs, fetch: Fetcher, eod_hour: int = 21) -> None:
        self.prefs = prefs
        self.fetch = fetch
        self.eod_hour = eod_hour

    def current(self, now: datetime) -> str | None:
        """Message to show at *now*, or None before the evening hour."""
        if now.hour < self.eod_hour:
            return None

        key = today_key(now)
        try:
            last_date = self.prefs.get(KEY_EOD_LAST_DATE)
            cached = self.prefs.get(KEY_EOD_MESSAGE)
        except (OSError, ValueError):
            logger.exception("Error reading cached evening message")
            last_date, cached = None, None
        if last_date == key and cached:
            return cached

        try:
            message = str(self.fetch()["message"])
        except (httpx.HTTPError, OSError, ValueError, KeyError, TypeError) as e:
            logger.error("Failed to fetch evening message: %s", e)
            return FALLBACK_MESSAGE

        try:
            self.prefs.set(KEY_EOD_LAST_DATE, key)
            self.prefs.set(KEY_EOD_MESSAGE, message)
        except OSError:
            logger.exception("Error caching evening message")
        return message
