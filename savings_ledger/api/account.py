"""
Account endpoints: balance, deposit and withdrawal.

Every route requires a valid session token and a verified
device, checked by the require_verified_device dependency.
"""

from fastapi import APIRouter, Depends

from savings_ledger.api.deps import get_ledger_service, require_verified_device
from savings_ledger.api.errors import to_http
from savings_ledger.errors import LedgerError
from savings_ledger.schemas.account import (
    AmountRequest,
    AccountDetailsResponse,
    LedgerOperationResponse,
    TransactionResponse,
)
from savings_ledger.services.ledger_service import LedgerService
from savings_ledger.services.token_service import SessionClaims

router = APIRouter(prefix="/account", tags=["Account"])


@router.get("/me", response_model=AccountDetailsResponse)
def get_account(
    claims: SessionClaims = Depends(require_verified_device),
    service: LedgerService = Depends(get_ledger_service),
):
    """Get the balance and transaction history, newest first."""
    try:
        snapshot = service.get_balance(claims.user_id)
    except LedgerError as e:
        raise to_http(e)
    return AccountDetailsResponse(
        balance=snapshot.balance,
        last_updated=snapshot.updated_at,
        transactions=[
            TransactionResponse.model_validate(t) for t in snapshot.transactions
        ],
    )


@router.post("/deposit", response_model=LedgerOperationResponse)
def deposit(
    request: AmountRequest,
    claims: SessionClaims = Depends(require_verified_device),
    service: LedgerService = Depends(get_ledger_service),
):
    """Deposit money into the account."""
    try:
        result = service.deposit(claims.user_id, request.amount)
    except LedgerError as e:
        raise to_http(e)
    return LedgerOperationResponse(
        message="Deposit successful",
        balance=result.balance,
        transaction=TransactionResponse.model_validate(result.transaction),
    )


@router.post("/withdraw", response_model=LedgerOperationResponse)
def withdraw(
    request: AmountRequest,
    claims: SessionClaims = Depends(require_verified_device),
    service: LedgerService = Depends(get_ledger_service),
):
    """Withdraw money from the account."""
    try:
        result = service.withdraw(claims.user_id, request.amount)
    except LedgerError as e:
        raise to_http(e)
    return LedgerOperationResponse(
        message="Withdrawal successful",
        balance=result.balance,
        transaction=TransactionResponse.model_validate(result.transaction),
    )
