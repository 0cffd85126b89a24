"""Signed session tokens issued at login and read back from the cookie.

Tokens are Flask-JWT-Extended access tokens carrying the user id (``sub``)
and a ``role`` claim. The key and algorithm come from the app's ``JWT_*``
settings, so issuing and verifying need an application context.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import PyJWTError

from models.user import ROLES

DEFAULT_TTL = timedelta(days=7)
TOKEN_TYPE = "access"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionClaims:
    subject_id: int
    role: str
    issued_at: datetime
    expires_at: datetime


class SessionTokenSigner:
    """Issue and verify session tokens carrying a user id and role."""

    def __init__(self, ttl: timedelta = DEFAULT_TTL):
        self.ttl = ttl

    @property
    def max_age(self) -> int:
        return int(self.ttl.total_seconds())

    def issue(self, subject_id: int, role: str, ttl: timedelta | None = None) -> str:
        return create_access_token(
            identity=str(subject_id),
            additional_claims={"role": role},
            expires_delta=ttl if ttl is not None else self.ttl,
        )

    def verify(self, token: str | None) -> SessionClaims | None:
        """Return the claims of a valid token, or ``None``."""

        if not token or not isinstance(token, str):
            return None
        try:
            payload = decode_token(token)
        except (PyJWTError, JWTExtendedException) as exc:
            logger.debug("Rejected session token: %s", exc.__class__.__name__)
            return None
        return self.claims_from_payload(payload)

    @staticmethod
    def claims_from_payload(payload: dict) -> SessionClaims | None:
        """Check a decoded payload's session claims; ``None`` if any is off."""

        if payload.get("type") != TOKEN_TYPE or payload.get("role") not in ROLES:
            return None
        try:
            subject_id = int(payload["sub"])
            issued_at = int(payload["iat"])
            expires_at = int(payload["exp"])
        except (KeyError, TypeError, ValueError):
            return None

        return SessionClaims(
            subject_id=subject_id,
            role=payload["role"],
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )
