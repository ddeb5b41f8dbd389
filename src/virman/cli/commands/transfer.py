"""Transfer (virman) commands."""

import click
from virman.audit import audited
from virman.cli.account_resolution import resolve_account_or_exit
from virman.cli.error_handling import handle_domain_error
from virman.cli.formatting import format_amount
from virman.domain.account import AccountService
from virman.domain.entities import TransferResult
from virman.domain.errors import DomainError
from virman.domain.transfer import TransferService
from virman.utils.amount_parser import parse_amount


def _echo_transfer(account_service: AccountService, result: TransferResult) -> None:
    source = account_service.get_account(result.outgoing.account_id)
    destination = account_service.get_account(result.incoming.account_id)
    currency = source.currency

    click.echo(f"Transfer {result.pair_id}")
    click.echo(f"  {source.name} -> {destination.name}: {format_amount(result.amount, currency)}")
    click.echo(f"  Description: {result.outgoing.description}")
    click.echo(f"  {source.name} balance: {format_amount(result.from_balance, currency)}")
    click.echo(f"  {destination.name} balance: {format_amount(result.to_balance, currency)}")


@click.group()
def transfer_group():
    """Move funds between accounts."""
    pass


@transfer_group.command("create")
@click.argument("from_account", metavar="FROM_ACCOUNT")
@click.argument("to_account", metavar="TO_ACCOUNT")
@click.argument("amount", metavar="AMOUNT")
@click.option("--description", help="Transfer description")
@click.option(
    "--idempotency-key",
    help="Client key; repeating a committed transfer with the same key does not move money again",
)
@click.pass_context
def create_transfer(
    ctx,
    from_account: str,
    to_account: str,
    amount: str,
    description: str | None,
    idempotency_key: str | None,
):
    """Transfer AMOUNT from FROM_ACCOUNT to TO_ACCOUNT.

    Accounts can be given by name or ID. The source must hold the full
    amount; transfers never overdraw.

    Examples:
        virman transfer create "Company Main" "Cash" 2500 --description "Owner draw"
        virman transfer create acc-1 acc-2 100 --idempotency-key req-42
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    transfer_service = TransferService(db)

    from_id = resolve_account_or_exit(ctx, account_service, from_account)
    to_id = resolve_account_or_exit(ctx, account_service, to_account)

    try:
        result = audited(
            "transfer.create",
            transfer_service.transfer,
            from_account_id=from_id,
            to_account_id=to_id,
            amount=parse_amount(amount),
            description=description,
            idempotency_key=idempotency_key,
            actor=ctx.obj["actor"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if result.replayed:
        click.echo("Idempotency key already used; showing the original transfer, nothing moved.")
    _echo_transfer(account_service, result)


@transfer_group.command("show")
@click.argument("pair_id", metavar="TRANSFER_ID")
@click.pass_context
def show_transfer(ctx, pair_id: str):
    """Show a transfer and its two legs."""
    db = ctx.obj["db"]
    account_service = AccountService(db)

    try:
        result = TransferService(db).get_transfer(pair_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_transfer(account_service, result)
    click.echo(f"  Outgoing leg: {result.outgoing.id}")
    click.echo(f"  Incoming leg: {result.incoming.id}")


@transfer_group.command("reverse")
@click.argument("pair_id", metavar="TRANSFER_ID")
@click.option("--description", help="Description for the reversing transfer")
@click.pass_context
def reverse_transfer(ctx, pair_id: str, description: str | None):
    """Send a transfer's amount back to its source account."""
    db = ctx.obj["db"]
    account_service = AccountService(db)
    transfer_service = TransferService(db)

    try:
        result = audited(
            "transfer.reverse",
            transfer_service.reverse_transfer,
            pair_id,
            description=description,
            actor=ctx.obj["actor"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Reversed transfer {pair_id}")
    _echo_transfer(account_service, result)


def register_commands(cli):
    """Register transfer commands with main CLI."""
    cli.add_command(transfer_group, name="transfer")
