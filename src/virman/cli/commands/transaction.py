"""Transaction management commands."""

import click
from virman.audit import audited
from virman.cli.account_resolution import resolve_account_or_exit
from virman.cli.date_filters import resolve_cli_date_range
from virman.cli.error_handling import handle_domain_error
from virman.cli.formatting import format_amount, format_transaction
from virman.domain.account import AccountService
from virman.domain.entities import TransactionKind
from virman.domain.errors import DomainError
from virman.domain.transaction import TransactionService
from virman.utils.date_parser import PERIODS


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--kind", type=click.Choice([k.value for k in TransactionKind]), help="Transaction kind")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--period", type=click.Choice(PERIODS), help="Named period instead of explicit dates")
@click.option("--verbose", "-v", is_flag=True, help="Show category, pairing id and reversal links")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    kind: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    verbose: bool,
):
    """View transactions, newest first.

    Dates are UTC calendar days and both ends are inclusive.
    Account can be specified by name or ID.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    try:
        transactions = service.list_transactions(
            account_id=account_id, kind=kind, start_date=start, end_date=end
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts(include_inactive=True)}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 120)
    for txn in transactions:
        click.echo(f"{accounts.get(txn.account_id, 'Unknown'):20s} | {format_transaction(txn)}")
        if verbose:
            if txn.pair_id:
                click.echo(f"    Transfer: {txn.pair_id}")
            if txn.reversal_of:
                click.echo(f"    Reverses: {txn.reversal_of}")


@transaction_group.command("show")
@click.argument("transaction_id", metavar="TRANSACTION_ID")
@click.pass_context
def show_transaction(ctx, transaction_id: str):
    """Show a single transaction."""
    db = ctx.obj["db"]

    try:
        txn = TransactionService(db).require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    account = AccountService(db).get_account(txn.account_id)

    click.echo(f"Transaction ID: {txn.id}")
    click.echo(f"  Created: {txn.created_at.isoformat()}")
    click.echo(f"  Account: {account.name} (ID: {txn.account_id})")
    click.echo(f"  Kind: {txn.kind.value}")
    click.echo(f"  Amount: {format_amount(txn.amount, account.currency)}")
    click.echo(f"  Description: {txn.description}")
    if txn.category:
        click.echo(f"  Category: {txn.category}")
    if txn.pair_id:
        click.echo(f"  Transfer: {txn.pair_id}")
    if txn.reversal_of:
        click.echo(f"  Reverses: {txn.reversal_of}")


@transaction_group.command("reverse")
@click.argument("transaction_id", metavar="TRANSACTION_ID")
@click.pass_context
def reverse_transaction(ctx, transaction_id: str):
    """Offset an income or expense with an opposite transaction.

    The original transaction is kept. Transfers are reversed with
    'virman transfer reverse'.
    """
    service = TransactionService(ctx.obj["db"])

    try:
        reversal = audited(
            "transaction.reverse",
            service.reverse_transaction,
            transaction_id,
            actor=ctx.obj["actor"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Reversed transaction {transaction_id} with {reversal.kind.value} {reversal.id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
