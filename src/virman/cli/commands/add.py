"""Income and expense commands."""

import click
from virman.audit import audited
from virman.cli.account_resolution import resolve_account_or_exit
from virman.cli.error_handling import handle_domain_error
from virman.cli.formatting import format_amount
from virman.domain.account import AccountService
from virman.domain.entities import TransactionKind
from virman.domain.errors import DomainError
from virman.domain.transaction import TransactionService
from virman.utils.amount_parser import parse_amount


def _record(ctx, kind: TransactionKind, account: str, amount: str, description: str, category: str | None):
    db = ctx.obj["db"]
    account_service = AccountService(db)
    transaction_service = TransactionService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)

    try:
        txn = audited(
            f"transaction.{kind.value}",
            transaction_service.record_transaction,
            account_id=account_id,
            kind=kind,
            amount=parse_amount(amount),
            description=description,
            category=category,
            actor=ctx.obj["actor"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    account_obj = account_service.get_account(account_id)
    click.echo(f"Recorded {kind.value} {txn.id}")
    click.echo(f"  Account: {account_obj.name}")
    click.echo(f"  Amount: {format_amount(txn.amount, account_obj.currency)}")
    click.echo(f"  Balance: {format_amount(account_obj.balance, account_obj.currency)}")


@click.command("income")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--amount", required=True, help="Positive amount (e.g., 1500 or 1,500.00)")
@click.option("--description", required=True, help="Transaction description")
@click.option("--category", help="Category label")
@click.pass_context
def add_income(ctx, account: str, amount: str, description: str, category: str | None):
    """Record money coming into an account.

    Examples:
        virman income --account "Cash" --amount 1500 --description "Salary"
    """
    _record(ctx, TransactionKind.INCOME, account, amount, description, category)


@click.command("expense")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--amount", required=True, help="Positive amount (e.g., 250 or 1,250.50)")
@click.option("--description", required=True, help="Transaction description")
@click.option("--category", help="Category label")
@click.pass_context
def add_expense(ctx, account: str, amount: str, description: str, category: str | None):
    """Record money leaving an account.

    Expenses may take the balance below zero.

    Examples:
        virman expense --account "Cash" --amount 250 --description "Groceries" --category Food
    """
    _record(ctx, TransactionKind.EXPENSE, account, amount, description, category)


def register_commands(cli):
    """Register income and expense commands with main CLI."""
    cli.add_command(add_income)
    cli.add_command(add_expense)
