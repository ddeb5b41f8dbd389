"""Abstract database interface.

Every method that moves money is a single atomic unit: either all of its
effects are committed or none are. Backends never expose a way to set a
balance directly; balances change only through ``adjust_balance`` and the
entry-writing operations, which pair each delta with its transaction row.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from virman.domain.entities import (
    Account,
    AccountType,
    NewTransaction,
    Transaction,
    TransactionKind,
    TransferResult,
)

OPENING_BALANCE_DESCRIPTION = "Opening balance"


def new_id() -> str:
    """Return a fresh opaque identifier for an account, transaction or transfer."""
    return str(uuid.uuid4())


class Database(ABC):
    """Abstract ledger storage for virman."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        account_type: AccountType,
        name: str,
        bank_name: str,
        currency: str,
        opening_balance: Decimal = Decimal("0"),
        opening_description: str = OPENING_BALANCE_DESCRIPTION,
    ) -> Account:
        """Create an account.

        A non-zero opening balance is written as an income (or expense, when
        negative) transaction in the same atomic unit as the account itself.

        Raises:
            ConflictError: If an account with the same name exists
        """
        pass

    @abstractmethod
    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, include_inactive: bool = False) -> list[Account]:
        """List accounts ordered by name."""
        pass

    @abstractmethod
    def update_account_name(self, account_id: str, name: str, bank_name: Optional[str] = None) -> None:
        """Update account name and optionally bank name."""
        pass

    @abstractmethod
    def set_account_active(self, account_id: str, is_active: bool) -> None:
        """Mark an account active or inactive (soft delete)."""
        pass

    @abstractmethod
    def delete_account(self, account_id: str) -> None:
        """Physically delete an account that has no transactions.

        Raises:
            NotFoundError: If the account does not exist
            ConflictError: If transactions exist against the account
        """
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: str) -> int:
        """Get count of transactions recorded against an account."""
        pass

    # Balance mutation
    @abstractmethod
    def adjust_balance(self, account_id: str, delta: Decimal) -> Decimal:
        """Apply a signed delta to one balance atomically. Returns the new balance.

        No sufficiency check is made. Concurrent adjustments of the same
        account never lose an update.

        Raises:
            NotFoundError: If the account does not exist
        """
        pass

    # Ledger writes
    @abstractmethod
    def record_entry(self, entry: NewTransaction) -> Transaction:
        """Write one single-entry transaction and apply its signed delta.

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If the account is inactive
            ConflictError: If ``entry.reversal_of`` was already reversed
        """
        pass

    @abstractmethod
    def perform_transfer(self, outgoing: NewTransaction, incoming: NewTransaction) -> TransferResult:
        """Debit, credit and write both legs of a transfer as one unit.

        The debit is conditional on the live source balance covering the
        amount, checked and applied in a single atomic step. When
        ``outgoing.idempotency_key`` matches a committed transfer, nothing is
        written and that transfer is returned with ``replayed=True``.

        Raises:
            NotFoundError: If either account does not exist
            ValidationError: If either account is inactive or currencies differ
            InsufficientFundsError: If the source balance is below the amount
            IdempotencyConflictError: If the key belongs to a different transfer
            ConflictError: If a leg's ``reversal_of`` was already reversed
        """
        pass

    # Transaction log reads
    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_id: Optional[str] = None,
        kind: Optional[TransactionKind] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        pair_id: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions newest first with optional filters.

        Date filters are inclusive and compare against the UTC day the
        transaction was recorded.
        """
        pass

    @abstractmethod
    def get_transfer_legs(self, pair_id: str) -> list[Transaction]:
        """Get the legs sharing a pairing id, transfer_out first."""
        pass

    @abstractmethod
    def find_reversal(self, transaction_id: str) -> Optional[Transaction]:
        """Get the transaction that offsets the given one, if any."""
        pass

    @abstractmethod
    def ledger_snapshot(self) -> tuple[list[Account], list[Transaction]]:
        """Get all accounts (including inactive) and all transactions consistently."""
        pass
