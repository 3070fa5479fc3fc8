"""Business performance statistics commands."""

import click
from carledger.cli.context import get_db
from carledger.domain.period_stats import BusinessService
from carledger.domain.settings import SettingsService
from carledger.utils.amount_parser import format_money, to_usd


@click.group()
def stats_group():
    """Monthly and yearly business performance."""
    pass


@stats_group.command("monthly")
@click.option("--year", type=int, help="Only months of this year")
@click.pass_context
def monthly_stats(ctx, year: int | None):
    """Show income, expenses and profit per month."""
    months = BusinessService(get_db(ctx)).get_monthly_stats()
    if year is not None:
        months = [m for m in months if m.month.startswith(f"{year:04d}-")]

    if not months:
        click.echo("No business activity recorded.")
        return

    click.echo(f"\n{'Month':<9} {'Income':>18} {'Expenses':>18} {'Profit':>18} {'Profit %':>9}")
    click.echo("-" * 76)
    for m in months:
        click.echo(
            f"{m.month:<9} {format_money(m.income):>18} {format_money(m.expenses):>18} "
            f"{format_money(m.profit):>18} {m.profit_percentage:>8.2f}%"
        )


@stats_group.command("yearly")
@click.pass_context
def yearly_stats(ctx):
    """Show yearly totals, most recent year first, with profit in USD."""
    db = get_db(ctx)
    years = BusinessService(db).get_yearly_stats()
    if not years:
        click.echo("No business activity recorded.")
        return
    rate = SettingsService(db).get_global_settings().exchange_rate

    click.echo(
        f"\n{'Year':<6} {'Income':>18} {'Expenses':>18} {'Profit':>18} "
        f"{'Profit (USD)':>18} {'Avg %':>9} {'Months':>7}"
    )
    click.echo("-" * 100)
    for y in years:
        click.echo(
            f"{y.year:<6} {format_money(y.total_income):>18} {format_money(y.total_expenses):>18} "
            f"{format_money(y.total_profit):>18} "
            f"{format_money(to_usd(y.total_profit, rate), 'USD'):>18} "
            f"{y.average_profit_percentage:>8.2f}% {len(y.months):>7}"
        )


def register_commands(cli):
    """Register stats commands with main CLI."""
    cli.add_command(stats_group, name="stats")
