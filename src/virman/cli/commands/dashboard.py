"""Dashboard and ledger verification commands."""

import click
from virman.cli.error_handling import handle_domain_error
from virman.cli.formatting import format_amount
from virman.domain.dashboard import DashboardService
from virman.domain.errors import DomainError
from virman.domain.integrity import IntegrityService


@click.command("dashboard")
@click.option("--currency", help="Only include accounts in this currency")
@click.pass_context
def dashboard(ctx, currency: str | None):
    """Show balance totals across active accounts.

    Amounts in different currencies are summed as-is; use --currency to
    restrict the rollup to one currency.
    """
    service = DashboardService(ctx.obj["db"])

    try:
        totals = service.get_totals(currency=currency)
    except DomainError as e:
        handle_domain_error(ctx, e)

    label = totals.currency or ""
    click.echo("\nDashboard" + (f" ({totals.currency})" if totals.currency else ""))
    click.echo("=" * 50)
    click.echo(f"Accounts:        {totals.account_count}")
    click.echo(f"Total balance:   {format_amount(totals.total_balance, label):>24s}")
    for account_type, subtotal in totals.subtotals.items():
        click.echo(f"  {account_type.value + ':':14s} {format_amount(subtotal, label):>24s}")
    click.echo(
        f"Cash:            {format_amount(totals.total_cash, label):>24s} "
        f"({totals.cash_account_count} account(s))"
    )
    click.echo(
        f"Debt:            {format_amount(totals.total_debt, label):>24s} "
        f"({totals.debt_account_count} account(s))"
    )


@click.command("verify")
@click.pass_context
def verify(ctx):
    """Check that balances match the transaction log and transfers are paired."""
    service = IntegrityService(ctx.obj["db"])

    try:
        discrepancies = service.verify_balances()
        broken_pairs = service.verify_transfer_pairs()
    except DomainError as e:
        handle_domain_error(ctx, e)

    for item in discrepancies:
        click.echo(
            f"Balance mismatch on {item.account_id}: stored {item.stored_balance}, "
            f"ledger {item.ledger_balance} (difference {item.difference})",
            err=True,
        )
    for pair_id in broken_pairs:
        click.echo(f"Broken transfer pair: {pair_id}", err=True)

    if discrepancies or broken_pairs:
        ctx.exit(2)
    click.echo("Ledger is consistent.")


def register_commands(cli):
    """Register dashboard commands with main CLI."""
    cli.add_command(dashboard)
    cli.add_command(verify)
