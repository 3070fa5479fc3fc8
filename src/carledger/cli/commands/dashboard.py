"""Dashboard command."""

import click
from carledger.cli.context import get_db
from carledger.domain.aggregation import DashboardService
from carledger.domain.settings import SettingsService
from carledger.utils.amount_parser import format_money, to_usd

DASHBOARD_ROWS = (
    ("Total Capital", "total_capital"),
    ("Bank Balance", "bank_balance"),
    ("Asset Value", "asset_value"),
    ("Total Loans", "total_loans"),
    ("Overall Money Flow", "overall_money_flow"),
    ("Total Contribution", "total_contribution"),
    ("Profit (Ahmed)", "profit_ahmed"),
    ("Profit (Nada)", "profit_nada"),
    ("Expenses", "expenses"),
    ("Total Income", "total_income"),
    ("Total Expenses", "total_expenses"),
)


@click.command("dashboard")
@click.pass_context
def dashboard(ctx):
    """Show capital, bank balance, loans, contributions and profit totals."""
    db = get_db(ctx)
    stats = DashboardService(db).get_dashboard_stats()
    rate = SettingsService(db).get_global_settings().exchange_rate

    click.echo("\nDashboard")
    click.echo("=" * 62)
    for label, attr in DASHBOARD_ROWS:
        amount = getattr(stats, attr)
        click.echo(
            f"{label + ':':<22}{format_money(amount):>20}"
            f"{format_money(to_usd(amount, rate), 'USD'):>20}"
        )
    click.echo(f"(USD at {rate} AED per dollar)")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
