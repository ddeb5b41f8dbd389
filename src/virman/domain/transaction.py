"""Transaction domain service."""

from datetime import date
from typing import Optional

from virman.database.base import Database
from virman.domain.entities import (
    NewTransaction,
    SINGLE_ENTRY_KINDS,
    Transaction as TransactionEntity,
    TransactionKind,
)
from virman.domain.errors import (
    NotFoundError,
    ValidationError,
    transaction_not_found,
)
from virman.utils.amount_parser import normalize_amount

CATEGORY_MAX_LENGTH = 50
REVERSAL_PREFIX = "Reversal: "


def parse_kind(value) -> TransactionKind:
    """Return the TransactionKind for an enum member or its string value.

    Raises:
        ValidationError: If the kind is missing or unknown
    """
    if isinstance(value, TransactionKind):
        return value
    if not value:
        raise ValidationError("Transaction kind is required")
    try:
        return TransactionKind(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unsupported transaction kind '{value}'")


class TransactionService:
    """Service for single-entry transactions and the transaction log."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def record_transaction(
        self,
        account_id: str,
        kind,
        amount,
        description: str,
        category: Optional[str] = None,
    ) -> TransactionEntity:
        """Record an income or expense and apply it to the account balance.

        The transaction row and the balance change commit together. Expenses
        may take the balance below zero.

        Args:
            account_id: Account ID
            kind: "income" or "expense"
            amount: Strictly positive amount, at most four decimal places
            description: Free-text description
            category: Optional category label

        Returns:
            The recorded transaction

        Raises:
            ValidationError: If the amount, kind, description or category is invalid
            NotFoundError: If the account does not exist
        """
        kind = parse_kind(kind)
        if kind not in SINGLE_ENTRY_KINDS:
            raise ValidationError(
                f"Unsupported transaction kind '{kind.value}'; use a transfer for moving funds"
            )
        amount = normalize_amount(amount)
        if description is None or not description.strip():
            raise ValidationError("Description is required")
        if category is not None:
            category = category.strip() or None
        if category is not None and len(category) > CATEGORY_MAX_LENGTH:
            raise ValidationError(f"Category must be at most {CATEGORY_MAX_LENGTH} characters")

        return self.db.record_entry(
            NewTransaction(
                account_id=account_id,
                kind=kind,
                amount=amount,
                description=description.strip(),
                category=category,
            )
        )

    def record_income(self, account_id: str, amount, description: str, category: Optional[str] = None) -> TransactionEntity:
        """Record an income. See record_transaction."""
        return self.record_transaction(account_id, TransactionKind.INCOME, amount, description, category)

    def record_expense(self, account_id: str, amount, description: str, category: Optional[str] = None) -> TransactionEntity:
        """Record an expense. See record_transaction."""
        return self.record_transaction(account_id, TransactionKind.EXPENSE, amount, description, category)

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: str) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        account_id: Optional[str] = None,
        kind=None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[TransactionEntity]:
        """List transactions newest first.

        Raises:
            ValidationError: If the date range is inverted or the kind unknown
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError(f"Start date {start_date} is after end date {end_date}")
        return self.db.list_transactions(
            account_id=account_id,
            kind=parse_kind(kind) if kind is not None else None,
            start_date=start_date,
            end_date=end_date,
        )

    def reverse_transaction(self, transaction_id: str) -> TransactionEntity:
        """Offset an income or expense with a new transaction of the opposite kind.

        The original row is left untouched. Transfer legs are reversed as a
        whole through TransferService.reverse_transfer.

        Raises:
            NotFoundError: If the transaction does not exist
            ValidationError: If the transaction is a transfer leg
            ConflictError: If the transaction was already reversed
        """
        original = self.require_transaction(transaction_id)
        if original.kind.is_transfer:
            raise ValidationError(
                f"Transaction {transaction_id} is part of transfer {original.pair_id}; "
                "reverse the transfer instead"
            )

        opposite = (
            TransactionKind.EXPENSE if original.kind == TransactionKind.INCOME else TransactionKind.INCOME
        )
        return self.db.record_entry(
            NewTransaction(
                account_id=original.account_id,
                kind=opposite,
                amount=original.amount,
                description=f"{REVERSAL_PREFIX}{original.description}",
                category=original.category,
                reversal_of=original.id,
            )
        )
