"""Ledger rules shared by every storage backend.

Backends call these inside their atomic unit, against the state they just
loaded, so the checks and the writes see the same data.
"""

from decimal import Decimal

from virman.domain.entities import Account, NewTransaction, Transaction
from virman.domain.errors import (
    ValidationError,
    IdempotencyConflictError,
    account_inactive,
    balance_out_of_range,
    currency_mismatch,
    idempotency_key_reused,
)
from virman.utils.amount_parser import MAX_AMOUNT


def ensure_active(account: Account) -> None:
    """Reject ledger writes against a soft-deleted account."""
    if not account.is_active:
        raise ValidationError(account_inactive(account.id))


def ensure_transferable(source: Account, destination: Account) -> None:
    """Check that two loaded accounts may take part in one transfer."""
    ensure_active(source)
    ensure_active(destination)
    if source.currency != destination.currency:
        raise ValidationError(currency_mismatch(source.currency, destination.currency))


def ensure_replay_matches(
    existing_out: Transaction,
    existing_in: Transaction,
    outgoing: NewTransaction,
    incoming: NewTransaction,
) -> None:
    """A replayed idempotency key must describe the same movement of money."""
    if (
        existing_out.account_id != outgoing.account_id
        or existing_in.account_id != incoming.account_id
        or existing_out.amount != outgoing.amount
    ):
        raise IdempotencyConflictError(idempotency_key_reused(outgoing.idempotency_key))


def ensure_balance_in_range(account_id: str, balance: Decimal) -> None:
    """Reject a resulting balance the storage column cannot hold."""
    if abs(balance) > MAX_AMOUNT:
        raise ValidationError(balance_out_of_range(account_id))
