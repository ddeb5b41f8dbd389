"""CLI helpers for date range resolution."""

from datetime import date

import click

from virman.cli.error_handling import handle_domain_error
from virman.domain.errors import ValidationError
from virman.utils.date_parser import get_date_range, parse_date


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
) -> tuple[date | None, date | None]:
    """Resolve a CLI date range from a named period or explicit dates."""
    if period and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    try:
        if period:
            return get_date_range(period)
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except ValidationError as e:
        handle_domain_error(ctx, e)

    return start, end
