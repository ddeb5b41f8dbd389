"""Account management commands."""

import click
from virman.audit import audited
from virman.cli.account_resolution import resolve_account_or_exit
from virman.cli.error_handling import handle_domain_error
from virman.cli.formatting import format_account, format_amount
from virman.domain.account import AccountService
from virman.domain.entities import AccountType
from virman.domain.errors import DomainError


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("open")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType]),
    default=AccountType.PERSONAL.value,
    show_default=True,
    help="Account type",
)
@click.option("--bank", help="Bank name (defaults to account name if not provided)")
@click.option("--currency", default="TRY", show_default=True, help="Three-letter currency code")
@click.option("--balance", default="0", help="Opening balance (may be negative)")
@click.pass_context
def open_account(ctx, name: str, account_type: str, bank: str | None, currency: str, balance: str):
    """Open a new account.

    A non-zero opening balance is recorded as an "Opening balance"
    transaction so the balance always matches the account's history.

    Examples:
        virman account open "Cash"
        virman account open "Company Main" --type company --bank "Yapı Kredi" --balance 50000
        virman account open "Credit Line" --balance -1200 --currency USD
    """
    service = AccountService(ctx.obj["db"])
    bank_name = bank if bank is not None else name

    try:
        account = audited(
            "account.open",
            service.create_account,
            account_type=account_type,
            name=name,
            bank_name=bank_name,
            currency=currency,
            balance=balance,
            actor=ctx.obj["actor"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Opened account '{account.name}' (ID: {account.id})")
    if bank is None:
        click.echo(f"Bank name set to '{bank_name}'")
    click.echo(f"Balance: {format_amount(account.balance, account.currency)}")


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts(include_inactive=include_inactive)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 100)
    for acc in accounts:
        click.echo(format_account(acc))


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--bank", help="New bank name (optional)")
@click.pass_context
def rename_account(ctx, account: str, new_name: str, bank: str | None) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID.

    Examples:
        virman account rename "Cash" "Wallet"
        virman account rename "Company Main" "Company TRY" --bank "Garanti"
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        audited(
            "account.rename",
            service.rename_account,
            account_id=account_id,
            name=new_name,
            bank_name=bank,
            actor=ctx.obj["actor"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Renamed account to '{new_name}'")
    if bank is not None:
        click.echo(f"Bank name updated to '{bank}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    An account without transactions is removed. Once transactions exist it
    is marked inactive instead, keeping its history and balance.
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        soft_deleted = audited(
            "account.delete", service.delete_account, account_id, actor=ctx.obj["actor"]
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if soft_deleted:
        click.echo(f"Account '{account_obj.name}' has transactions; marked inactive")
    else:
        click.echo(f"Deleted account '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
