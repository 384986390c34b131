"""
Session credentials.

A session token is a signed JWT carrying the user's id, email
and role, valid for a fixed window (24 hours by default).
Verifying a token is a pure computation: signature and expiry
only, no database access.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from savings_ledger.errors import ConfigurationError, Unauthenticated
from savings_ledger.models.enums import UserRole

REQUIRED_CLAIMS = ["sub", "email", "role", "iat", "exp"]


@dataclass(frozen=True)
class SessionClaims:
    user_id: int
    email: str
    role: UserRole
    issued_at: datetime
    expires_at: datetime


class TokenService:

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_hours: int = 24):
        if not secret:
            raise ConfigurationError("JWT_SECRET is not set")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(hours=ttl_hours)

    def issue(self, user_id: int, email: str, role: UserRole,
              now: datetime | None = None) -> str:
        """Sign a token for a user, valid from ``now`` for the TTL."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            # JWT requires "sub" to be a string
            "sub": str(user_id),
            "email": email,
            "role": role.value,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> SessionClaims:
        """
        Decode and validate a token.

        Raises Unauthenticated if the signature does not match,
        the token has expired, or a required claim is missing.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
            return SessionClaims(
                user_id=int(payload["sub"]),
                email=payload["email"],
                role=UserRole(payload["role"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (jwt.PyJWTError, KeyError, ValueError) as exc:
            raise Unauthenticated() from exc
