"""
Error taxonomy for the savings ledger.

Every failure a caller can observe is a LedgerError with a stable
``kind`` and a human-readable message. Messages are safe to show to
clients: they never include internal details and never say which
half of a credential pair was wrong.

Mapping kinds to transport status codes is the API layer's job
(see savings_ledger.api.errors).
"""

import enum


class ErrorKind(str, enum.Enum):
    CONFLICT = "CONFLICT"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    DEVICE_NOT_VERIFIED = "DEVICE_NOT_VERIFIED"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    NOT_FOUND = "NOT_FOUND"
    UNAVAILABLE = "UNAVAILABLE"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    INVALID_TRANSITION = "INVALID_TRANSITION"


class LedgerError(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind
    default_message: str = "Request failed"
    retryable: bool = False

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.kind.value}: {self.message}>"


class Conflict(LedgerError):
    kind = ErrorKind.CONFLICT
    default_message = "User already exists"


class InvalidCredentials(LedgerError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid credentials"


class DeviceNotVerified(LedgerError):
    kind = ErrorKind.DEVICE_NOT_VERIFIED
    default_message = "Device not verified"


class InvalidAmount(LedgerError):
    kind = ErrorKind.INVALID_AMOUNT
    default_message = "Amount must be positive"


class InsufficientFunds(LedgerError):
    kind = ErrorKind.INSUFFICIENT_FUNDS
    default_message = "Insufficient balance"


class NotFound(LedgerError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class Unavailable(LedgerError):
    """Transient storage failure. The only kind a caller may retry."""

    kind = ErrorKind.UNAVAILABLE
    default_message = "Service temporarily unavailable, please retry"
    retryable = True


class Unauthenticated(LedgerError):
    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Invalid or expired token"


class InvalidTransition(LedgerError):
    kind = ErrorKind.INVALID_TRANSITION
    default_message = "Invalid status transition"


class ConfigurationError(RuntimeError):
    """Fatal configuration problem detected at startup."""
