"""Export commands."""

import click
from carledger.cli.context import get_audit, get_db
from carledger.cli.date_filters import period_options, resolve_cli_date_range
from carledger.cli.error_handling import handle_domain_error
from carledger.domain.errors import DomainError
from carledger.domain.reports import default_export_filename, write_transactions_csv
from carledger.domain.transaction import TransactionService


@click.group()
def export_group():
    """Export data to files."""
    pass


@export_group.command("csv")
@click.option("--output", "-o", type=click.Path(dir_okay=False, allow_dash=True), help="CSV file, or '-' for stdout (default: transactions_YYYY-MM-DD.csv)")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@period_options
@click.option("--category", help="Exact category name")
@click.pass_context
def export_csv(
    ctx,
    output: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    category: str | None,
):
    """Export transactions as CSV."""
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this_month": this_month,
            "this_year": this_year,
            "last_month": last_month,
            "last_year": last_year,
        },
    )
    try:
        transactions = TransactionService(get_db(ctx), get_audit(ctx)).list_transactions(
            start_date=start, end_date=end, category=category
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    path = output or default_export_filename()
    if path == "-":
        write_transactions_csv(transactions, click.get_text_stream("stdout"))
        return
    with open(path, "w", newline="", encoding="utf-8") as f:
        count = write_transactions_csv(transactions, f)
    click.echo(f"Exported {count} transaction(s) to {path}")


def register_commands(cli):
    """Register export commands with main CLI."""
    cli.add_command(export_group, name="export")
