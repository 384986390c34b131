"""
Pydantic schemas for balance queries, deposits and withdrawals.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from savings_ledger.models.enums import TransactionType


class AmountRequest(BaseModel):
    """Body of a deposit or withdrawal request."""
    amount: Decimal = Field(gt=0, max_digits=19, decimal_places=4)


class TransactionResponse(BaseModel):
    id: int
    external_id: uuid.UUID
    amount: Decimal
    transaction_type: TransactionType
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountDetailsResponse(BaseModel):
    balance: Decimal
    last_updated: datetime
    transactions: list[TransactionResponse]


class LedgerOperationResponse(BaseModel):
    message: str
    balance: Decimal
    transaction: TransactionResponse
