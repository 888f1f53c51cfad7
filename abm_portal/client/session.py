"""Session gate: validate a reviewer username once and remember it."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from abm_portal.client.errors import (
    InputValidationError,
    SessionRejectedError,
    SessionRequiredError,
)
from abm_portal.core.logging import get_logger
from abm_portal.core.time import localnow

if TYPE_CHECKING:
    from abm_portal.client.portal import PortalClient

logger = get_logger(__name__)

USERNAME_STORAGE_KEY = "asgard_username"


@dataclass(frozen=True)
class ReviewerSession:
    """Signed-in reviewer; read-only for everything except the gate."""

    username: str
    signed_in_at: datetime = field(default_factory=localnow)


class SessionGate:
    """Owns the single persisted key holding the validated username.

    There is no password, token, or expiry: a username that passed the
    existence check once stays signed in until `logout`.
    """

    def __init__(
        self,
        client: PortalClient,
        storage: MutableMapping[str, str] | None = None,
    ) -> None:
        self.client = client
        self.storage: MutableMapping[str, str] = storage if storage is not None else {}
        self._current: ReviewerSession | None = None

    async def login(self, username: str) -> ReviewerSession:
        cleaned = username.strip()
        if not cleaned:
            raise InputValidationError("Please enter your username")
        result = await self.client.check_user(cleaned)
        if result.status != "success":
            logger.info("session.login.rejected", extra={"username": cleaned})
            raise SessionRejectedError(result.message or "User not found")
        self.storage[USERNAME_STORAGE_KEY] = cleaned
        self._current = ReviewerSession(username=cleaned)
        logger.info("session.login.accepted", extra={"username": cleaned})
        return self._current

    def logout(self) -> None:
        self.storage.pop(USERNAME_STORAGE_KEY, None)
        self._current = None

    def resume(self) -> ReviewerSession | None:
        """Rebuild the session from storage, e.g. on dashboard entry."""
        stored = (self.storage.get(USERNAME_STORAGE_KEY) or "").strip()
        if not stored:
            self._current = None
            return None
        if self._current is None or self._current.username != stored:
            self._current = ReviewerSession(username=stored)
        return self._current

    def require(self) -> ReviewerSession:
        """Return the signed-in reviewer or raise `SessionRequiredError`."""
        session = self.resume()
        if session is None:
            raise SessionRequiredError("Sign in to open the dashboard")
        return session
