"""Main CLI entry point."""

import click
from virman.audit import configure_logging
from virman.database.factories import create_database

# Import and register all commands at module level
from virman.cli.commands import (
    account,
    add,
    transfer,
    transaction,
    dashboard,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides VIRMAN_DB_PATH environment variable)",
    envvar="VIRMAN_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL, or memory:// for a throwaway in-process ledger",
    envvar="VIRMAN_DATABASE_URL",
)
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    help="Audit log level (e.g. INFO to log every ledger change)",
    envvar="VIRMAN_LOG_LEVEL",
)
@click.option("--actor", help="Name recorded in audit log entries", envvar="VIRMAN_ACTOR")
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, log_level: str, actor: str | None):
    """Virman - account ledger and transfer engine.

    Keep balances for personal and company accounts, record income and
    expenses, and move funds between accounts atomically.
    """
    ctx.ensure_object(dict)

    try:
        configure_logging(log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level")

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "db" not in ctx.obj:
        db = create_database(database_url=database_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)
    ctx.obj.setdefault("actor", actor)


# Register all commands
account.register_commands(cli)
add.register_commands(cli)
transfer.register_commands(cli)
transaction.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
