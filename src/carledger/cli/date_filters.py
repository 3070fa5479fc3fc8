"""CLI helpers for date range resolution."""

from datetime import date

import click

from carledger.domain.errors import ValidationError
from carledger.utils.date_parser import get_date_range, parse_date


def period_options(command):
    """Add the --this-month/--this-year/--last-month/--last-year flags."""
    for flag in ("--last-year", "--last-month", "--this-year", "--this-month"):
        command = click.option(flag, is_flag=True, help=f"Limit to {flag[2:].replace('-', ' ')}")(
            command
        )
    return command


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo(
            "Error: Only one period option (--this-month, --this-year, --last-month, --last-year) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0].replace("_", "-"))

    start = None
    end = None
    try:
        if start_date:
            start = parse_date(start_date)
        if end_date:
            end = parse_date(end_date)
    except ValidationError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)
    return start, end
