"""
Keyed password hashing.

Passwords are hashed with HMAC-SHA512 under one process-wide
secret. The digest is deterministic, so verification simply
recomputes it and compares in constant time.
"""

import hashlib
import hmac

from savings_ledger.errors import ConfigurationError


class PasswordHasher:

    def __init__(self, secret: str):
        if not secret:
            raise ConfigurationError(
                "PASSWORD_SECRET is not set; refusing to hash passwords "
                "with an empty key"
            )
        self._key = secret.encode("utf-8")

    def hash(self, password: str) -> str:
        """Return the hex HMAC-SHA512 digest of a password."""
        return hmac.new(
            self._key, password.encode("utf-8"), hashlib.sha512
        ).hexdigest()

    def verify(self, password: str, digest: str) -> bool:
        return hmac.compare_digest(self.hash(password), digest)
