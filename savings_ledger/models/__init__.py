"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from savings_ledger.models.base import Base
from savings_ledger.models.enums import (
    UserRole,
    DeviceStatus,
    TransactionType,
)
from savings_ledger.models.user import User
from savings_ledger.models.device import Device
from savings_ledger.models.account import Account
from savings_ledger.models.transaction import Transaction

__all__ = [
    "Base",
    "UserRole",
    "DeviceStatus",
    "TransactionType",
    "User",
    "Device",
    "Account",
    "Transaction",
]
