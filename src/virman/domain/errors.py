"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``code`` and ``http_status``
    are the contract an API layer maps onto its responses.
    """

    code = "DOMAIN_ERROR"
    http_status = 400


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    code = "VALIDATION_ERROR"
    http_status = 400


class IdempotencyConflictError(ValidationError):
    """Idempotency key reused for a different transfer."""

    code = "IDEMPOTENCY_CONFLICT"


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class InsufficientFundsError(DomainError):
    """Transfer source lacks the balance at the moment of the atomic debit."""

    code = "INSUFFICIENT_FUNDS"
    http_status = 400


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    code = "CONFLICT"
    http_status = 409


class StorageError(DomainError):
    """The storage layer failed to commit an atomic unit.

    No partial effect survives, so this is the one error a caller may
    retry the whole operation on.
    """

    code = "STORAGE_ERROR"
    http_status = 500


def http_status_for(error: BaseException) -> int:
    """Return the HTTP status an API layer should answer with."""
    if isinstance(error, DomainError):
        return error.http_status
    return 500


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_name_not_found(name: str) -> str:
    """Return message for missing account looked up by name."""
    return f"Account '{name}' not found"


def account_inactive(account_id: str) -> str:
    """Return message for an operation on a soft-deleted account."""
    return f"Account {account_id} is inactive"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def transfer_not_found(pair_id: str) -> str:
    """Return message for missing transfer pair."""
    return f"Transfer {pair_id} not found"


def already_reversed(transaction_id: str) -> str:
    """Return message when a transaction already has an offsetting entry."""
    return f"Transaction {transaction_id} has already been reversed"


def insufficient_funds(account_id: str, amount: Decimal) -> str:
    """Return message when the transfer source cannot cover the amount."""
    return f"Insufficient funds: account {account_id} cannot cover a transfer of {amount}"


def same_account_transfer(account_id: str) -> str:
    """Return message for a transfer whose both sides are one account."""
    return f"Cannot transfer from account {account_id} to itself"


def currency_mismatch(from_currency: str, to_currency: str) -> str:
    """Return message for a transfer between accounts of different currencies."""
    return (
        f"Cannot transfer between accounts in different currencies "
        f"({from_currency} -> {to_currency})"
    )


def idempotency_key_reused(key: str) -> str:
    """Return message for an idempotency key bound to another transfer."""
    return f"Idempotency key '{key}' was already used for a different transfer"


def balance_out_of_range(account_id: str) -> str:
    """Return message when a change would push a balance past the storable range."""
    return f"Balance of account {account_id} would exceed the maximum storable amount"
