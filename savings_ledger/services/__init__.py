"""Business logic services."""

from savings_ledger.services.password_hasher import PasswordHasher
from savings_ledger.services.token_service import TokenService
from savings_ledger.services.device_gate import DeviceGate
from savings_ledger.services.device_service import DeviceService
from savings_ledger.services.auth_service import AuthService
from savings_ledger.services.ledger_service import LedgerService

__all__ = [
    "PasswordHasher",
    "TokenService",
    "DeviceGate",
    "DeviceService",
    "AuthService",
    "LedgerService",
]
