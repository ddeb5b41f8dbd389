"""Domain model entities for virman.

These are pure data classes representing ledger concepts, independent of the
storage backend. Both the SQLAlchemy and the in-memory backends hand these
out, so callers never see ORM rows or internal records.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Ownership class of an account."""

    PERSONAL = "personal"
    COMPANY = "company"


class TransactionKind(str, Enum):
    """Kind of monetary event; the kind implies the sign of the amount."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER_OUT = "transfer_out"
    TRANSFER_IN = "transfer_in"

    @property
    def sign(self) -> int:
        if self in (TransactionKind.INCOME, TransactionKind.TRANSFER_IN):
            return 1
        return -1

    @property
    def is_transfer(self) -> bool:
        return self in (TransactionKind.TRANSFER_OUT, TransactionKind.TRANSFER_IN)


SINGLE_ENTRY_KINDS = (TransactionKind.INCOME, TransactionKind.EXPENSE)


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: str
    account_type: AccountType
    name: str
    bank_name: str
    balance: Decimal
    currency: str
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always stored unsigned; use ``signed_amount`` for the
    effect the transaction had on its account's balance.
    """

    id: str
    account_id: str
    kind: TransactionKind
    amount: Decimal
    description: str
    created_at: datetime
    category: Optional[str] = None
    pair_id: Optional[str] = None
    idempotency_key: Optional[str] = None
    reversal_of: Optional[str] = None

    @property
    def signed_amount(self) -> Decimal:
        return self.amount * self.kind.sign


@dataclass(frozen=True)
class TransferResult:
    """Outcome of a committed (or replayed) transfer."""

    pair_id: str
    outgoing: Transaction
    incoming: Transaction
    from_balance: Decimal
    to_balance: Decimal
    replayed: bool = False

    @property
    def amount(self) -> Decimal:
        return self.outgoing.amount


@dataclass(frozen=True)
class DashboardTotals:
    """Rollup of account balances for the dashboard."""

    total_balance: Decimal
    subtotals: dict[AccountType, Decimal]
    total_cash: Decimal
    total_debt: Decimal
    cash_account_count: int
    debt_account_count: int
    account_count: int
    currency: Optional[str] = None


@dataclass(frozen=True)
class BalanceDiscrepancy:
    """An account whose stored balance disagrees with its transaction log."""

    account_id: str
    stored_balance: Decimal
    ledger_balance: Decimal

    @property
    def difference(self) -> Decimal:
        return self.stored_balance - self.ledger_balance


@dataclass(frozen=True)
class NewTransaction:
    """Values for a transaction row that a backend is asked to write.

    The backend assigns ``id`` and ``created_at``.
    """

    account_id: str
    kind: TransactionKind
    amount: Decimal
    description: str
    category: Optional[str] = None
    pair_id: Optional[str] = None
    idempotency_key: Optional[str] = None
    reversal_of: Optional[str] = None
