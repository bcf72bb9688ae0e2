"""Authentication port and a credential-based implementation.

The dashboard only sees :class:`AuthProvider`; a failed sign-in is logged
and leaves the session in guest mode.
"""

from __future__ import annotations

import logging
import os
import secrets

from roseboard.models import Identity

logger = logging.getLogger(__name__)


class AuthProvider:
    """Interface for identity providers."""

    def current(self) -> Identity | None:
        raise NotImplementedError

    def sign_in(self, username: str, password: str) -> Identity | None:
        raise NotImplementedError

    def sign_out(self) -> None:
        raise NotImplementedError


class CredentialAuth(AuthProvider):
    """Single-user auth against a configured username/password pair.

    With no credentials configured every sign-in fails and the app runs
    in guest mode.
    """

    def __init__(self, username: str = "", password: str = "", email: str = "") -> None:
        self.username = username
        self.password = password
        self.email = email
        self._identity: Identity | None = None

    @classmethod
    def from_env(cls) -> CredentialAuth:
        return cls(
            username=os.environ.get("ROSEBOARD_USERNAME", ""),
            password=os.environ.get("ROSEBOARD_PASSWORD", ""),
            email=os.environ.get("ROSEBOARD_EMAIL", ""),
        )

    def current(self) -> Identity | None:
        return self._identity

    def sign_in(self, username: str, password: str) -> Identity | None:
        if not self.username or not self.password:
            logger.warning("Sign-in attempted but no credentials are configured")
            return None
        correct_username = secrets.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        correct_password = secrets.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        if not (correct_username and correct_password):
            logger.warning("Sign-in failed for %r", username)
            return None
        self._identity = Identity(uid=self.username, name=self.username, email=self.email)
        logger.info("Signed in as %s", self.username)
        return self._identity

    def sign_out(self) -> None:
        self._identity = None
