"""Shared-PIN session handling for the admin dashboard."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from jose import JWTError

from lodging_admin.core.config import Settings, get_settings
from lodging_admin.core.errors import AuthError
from lodging_admin.core.security import (
    create_access_token,
    decode_access_token,
    pins_match,
    verify_pin,
)

logger = logging.getLogger(__name__)

SESSION_SUBJECT = "lodging-admin"
SESSION_SCOPE = "lodging"


@dataclass(frozen=True, slots=True)
class Session:
    """An authenticated dashboard session."""

    subject: str
    token: str
    expires_at: datetime


class PinAuthenticator:
    """Issue and validate sessions against a single shared PIN."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def _pin_ok(self, credential: str) -> bool:
        if self._settings.lodging_admin_pin_hash:
            return verify_pin(credential, self._settings.lodging_admin_pin_hash)
        return pins_match(credential, self._settings.lodging_admin_pin)

    def authenticate(self, credential: str) -> Session:
        """Return a new session, raising :class:`AuthError` on a wrong PIN."""
        if not credential or not self._pin_ok(credential.strip()):
            logger.warning("Rejected dashboard PIN attempt")
            raise AuthError("Incorrect PIN")
        token = create_access_token(SESSION_SUBJECT, scope=SESSION_SCOPE)
        session = self.current_session(token)
        if session is None:
            raise AuthError("Failed to issue a session token")
        return session

    def current_session(self, token: str | None) -> Session | None:
        """Resolve a bearer token into a session, or ``None`` when invalid."""
        if not token:
            return None
        try:
            payload = decode_access_token(token)
        except JWTError:
            return None
        if payload.get("sub") != SESSION_SUBJECT or payload.get("scope") != SESSION_SCOPE:
            return None
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
        return Session(subject=SESSION_SUBJECT, token=token, expires_at=expires_at)
