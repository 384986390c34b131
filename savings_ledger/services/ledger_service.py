"""
Ledger service — the core of the savings system.

This service enforces the fundamental rules:
1. Amounts are positive decimals (never binary floats)
2. The balance never goes negative
3. A balance change and its transaction record are committed
   together or not at all
4. Transactions are immutable (append-only)

No other service writes balances or transactions.

Concurrency is handled optimistically. The account row carries
a version counter; the balance UPDATE only matches if nobody
changed the row since we read it. On a conflict the whole
read-check-write unit is retried against fresh data, so two
withdrawals racing for the same money can never both pass the
balance check.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from savings_ledger.errors import (
    InsufficientFunds,
    InvalidAmount,
    NotFound,
    Unavailable,
)
from savings_ledger.models.account import Account
from savings_ledger.models.enums import TransactionType
from savings_ledger.models.transaction import Transaction
from savings_ledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

# Scale and range of the Numeric(19, 4) money columns
MAX_DECIMAL_PLACES = 4
MAX_AMOUNT = Decimal("999999999999999.9999")


@dataclass(frozen=True)
class TransactionView:
    id: int
    external_id: uuid.UUID
    amount: Decimal
    transaction_type: TransactionType
    created_at: datetime

    @classmethod
    def from_model(cls, txn: Transaction) -> "TransactionView":
        return cls(
            id=txn.id,
            external_id=txn.external_id,
            amount=txn.amount,
            transaction_type=txn.transaction_type,
            created_at=txn.created_at,
        )


@dataclass(frozen=True)
class LedgerResult:
    """Outcome of a successful deposit or withdrawal."""
    balance: Decimal
    transaction: TransactionView


@dataclass(frozen=True)
class AccountSnapshot:
    balance: Decimal
    updated_at: datetime
    transactions: list[TransactionView]


def validate_amount(amount) -> Decimal:
    """
    Return ``amount`` as a Decimal or raise InvalidAmount.

    Only Decimal and int are accepted; floats are refused.
    """
    if isinstance(amount, bool) or not isinstance(amount, (Decimal, int)):
        raise InvalidAmount("Amount must be a decimal number")
    amount = Decimal(amount)
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount()
    if amount.as_tuple().exponent < -MAX_DECIMAL_PLACES:
        raise InvalidAmount(
            f"Amount must have at most {MAX_DECIMAL_PLACES} decimal places"
        )
    if amount > MAX_AMOUNT:
        raise InvalidAmount(f"Amount must not exceed {MAX_AMOUNT}")
    return amount


class LedgerService:
    """
    All balance operations pass through this service.

    The service takes a session factory rather than a session:
    each operation is its own unit of work and is retried as a
    whole on a version conflict.
    """

    def __init__(self, session_factory: sessionmaker, max_retries: int = 5):
        self.session_factory = session_factory
        self.max_retries = max_retries

    def _get_account(self, db: Session, user_id: int) -> Account:
        account = db.execute(
            select(Account).where(Account.user_id == user_id)
        ).scalar_one_or_none()
        if account is None:
            raise NotFound("Account not found")
        return account

    def get_balance(self, user_id: int) -> AccountSnapshot:
        """Return the balance and all transactions, newest first."""
        with unit_of_work(self.session_factory) as db:
            account = self._get_account(db, user_id)
            transactions = db.execute(
                select(Transaction)
                .where(Transaction.account_id == account.id)
                .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            ).scalars().all()
            return AccountSnapshot(
                balance=account.balance,
                updated_at=account.updated_at,
                transactions=[TransactionView.from_model(t) for t in transactions],
            )

    def deposit(self, user_id: int, amount) -> LedgerResult:
        """
        Add money to a user's account.

        Raises InvalidAmount before touching storage if the amount
        is not positive, and NotFound if the user has no account.
        A deposit that would push the balance past MAX_AMOUNT also
        raises InvalidAmount and leaves the balance unchanged.
        """
        amount = validate_amount(amount)
        result = self._apply(user_id, amount, TransactionType.DEPOSIT)
        logger.info("Deposit: %s for user %s", amount, user_id)
        return result

    def withdraw(self, user_id: int, amount) -> LedgerResult:
        """
        Take money out of a user's account.

        Raises InsufficientFunds if the balance is below the
        amount; the balance is left unchanged in that case.
        """
        amount = validate_amount(amount)
        result = self._apply(user_id, amount, TransactionType.WITHDRAWAL)
        logger.info("Withdrawal: %s for user %s", amount, user_id)
        return result

    def _apply(
        self, user_id: int, amount: Decimal, transaction_type: TransactionType
    ) -> LedgerResult:
        """
        Run one balance change with retry on version conflicts.

        Raises Unavailable once the retries are used up.
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                with unit_of_work(self.session_factory) as db:
                    return self._post(db, user_id, amount, transaction_type)
            except StaleDataError:
                logger.warning(
                    "Concurrent update on account of user %s "
                    "(attempt %d/%d), retrying",
                    user_id, attempt, self.max_retries,
                )

        logger.error(
            "Giving up %s for user %s after %d conflicts",
            transaction_type.value, user_id, self.max_retries,
        )
        raise Unavailable()

    def _post(
        self,
        db: Session,
        user_id: int,
        amount: Decimal,
        transaction_type: TransactionType,
    ) -> LedgerResult:
        account = self._get_account(db, user_id)

        if transaction_type == TransactionType.DEPOSIT:
            if account.balance + amount > MAX_AMOUNT:
                raise InvalidAmount("Deposit would exceed the maximum balance")
            account.balance = account.balance + amount
        else:
            if account.balance < amount:
                raise InsufficientFunds()
            account.balance = account.balance - amount

        txn = Transaction(
            account_id=account.id,
            amount=amount,
            transaction_type=transaction_type,
        )
        db.add(txn)
        # The versioned UPDATE and the INSERT go out together here;
        # a stale version raises StaleDataError and nothing is kept.
        db.flush()

        return LedgerResult(
            balance=account.balance,
            transaction=TransactionView.from_model(txn),
        )
