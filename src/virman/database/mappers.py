"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: enum values are stored as plain
strings and timestamps come back from SQLite without a timezone.
"""

from datetime import datetime, UTC

from virman.domain import entities as domain
from virman.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        account_type=domain.AccountType(orm_account.account_type),
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        balance=orm_account.balance,
        currency=orm_account.currency,
        is_active=orm_account.is_active,
        created_at=_as_utc(orm_account.created_at),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        kind=domain.TransactionKind(orm_transaction.kind),
        amount=orm_transaction.amount,
        description=orm_transaction.description,
        created_at=_as_utc(orm_transaction.created_at),
        category=orm_transaction.category,
        pair_id=orm_transaction.pair_id,
        idempotency_key=orm_transaction.idempotency_key,
        reversal_of=orm_transaction.reversal_of,
    )


def new_transaction_to_orm(entry: domain.NewTransaction, transaction_id: str) -> ORMTransaction:
    """Build the SQLAlchemy row for a transaction a backend is about to write."""
    return ORMTransaction(
        id=transaction_id,
        account_id=entry.account_id,
        kind=entry.kind.value,
        amount=entry.amount,
        description=entry.description,
        category=entry.category,
        pair_id=entry.pair_id,
        idempotency_key=entry.idempotency_key,
        reversal_of=entry.reversal_of,
        created_at=datetime.now(UTC),
    )
