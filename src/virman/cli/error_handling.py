"""CLI error handling helpers."""

import click

from virman.domain.errors import (
    ConflictError,
    DomainError,
    InsufficientFundsError,
    NotFoundError,
    StorageError,
)

# Exit statuses per error kind; validation and anything else exit with 1.
EXIT_CODES = (
    (NotFoundError, 3),
    (InsufficientFundsError, 4),
    (ConflictError, 5),
    (StorageError, 6),
)


def exit_code_for(error: BaseException) -> int:
    """Return the process exit status for a domain error."""
    for error_type, code in EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return 1


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(exit_code_for(error))
