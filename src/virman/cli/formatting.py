"""Plain-text rendering of ledger entities for the CLI."""

from decimal import Decimal

from virman.domain.entities import Account, Transaction


def format_amount(amount: Decimal, currency: str = "") -> str:
    """Render an amount with thousands separators and two decimals."""
    text = f"{amount:,.2f}"
    return f"{text} {currency}" if currency else text


def format_account(account: Account) -> str:
    status = "" if account.is_active else " (inactive)"
    return (
        f"{account.id} | {account.name:20s} | {account.account_type.value:8s} | "
        f"{account.bank_name:15s} | {format_amount(account.balance, account.currency):>18s}{status}"
    )


def format_transaction(txn: Transaction) -> str:
    signed = format_amount(txn.signed_amount)
    line = (
        f"{txn.created_at:%Y-%m-%d %H:%M} | {txn.id} | {txn.kind.value:12s} | "
        f"{signed:>14s} | {txn.description}"
    )
    if txn.category:
        line += f" [{txn.category}]"
    return line
