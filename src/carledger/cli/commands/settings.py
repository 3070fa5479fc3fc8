"""Settings commands."""

import click
from carledger.cli.context import get_audit, get_db, parse_amount_or_exit
from carledger.cli.error_handling import handle_domain_error
from carledger.domain.errors import DomainError
from carledger.domain.settings import FINANCIAL_FIELDS, SettingsService
from carledger.utils.amount_parser import format_money


def _service(ctx) -> SettingsService:
    return SettingsService(get_db(ctx), get_audit(ctx))


def _echo_financial(settings) -> None:
    click.echo("Financial settings:")
    for name in FINANCIAL_FIELDS:
        label = name.replace("_", " ").title()
        click.echo(f"  {label + ':':<20}{format_money(getattr(settings, name)):>18}")


def _echo_global(settings) -> None:
    click.echo("Global settings:")
    click.echo(f"  Company:       {settings.company_name}")
    click.echo(f"  Address:       {settings.company_address}")
    click.echo(f"  Phone:         {settings.company_phone}")
    click.echo(f"  Email:         {settings.company_email}")
    click.echo(f"  Currency:      {settings.currency}")
    click.echo(f"  Exchange rate: {settings.exchange_rate}")
    click.echo(f"  Date format:   {settings.date_format}")
    click.echo(f"  Auto logout:   {settings.auto_logout_minutes} minutes")


@click.group()
def settings_group():
    """View and change settings."""
    pass


@settings_group.command("show")
@click.pass_context
def show_settings(ctx):
    """Show financial and global settings."""
    service = _service(ctx)
    try:
        financial = service.get_financial_settings()
        global_settings = service.get_global_settings()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    _echo_financial(financial)
    click.echo("")
    _echo_global(global_settings)


@settings_group.command("financial")
@click.option("--cash-on-hand", help="Cash on hand")
@click.option("--showroom-balance", help="Showroom balance owed")
@click.option("--personal-loan", help="Personal loan balance")
@click.option("--additional", help="Additional adjustment (may be negative)")
@click.option("--expenses", help="Manually tracked expenses")
@click.pass_context
def update_financial(ctx, **values):
    """Update the dashboard's baseline figures.

    Examples:
        carledger settings financial --cash-on-hand 20000 --additional=-4100
    """
    changes = {
        name: parse_amount_or_exit(ctx, value, name.replace("_", " "))
        for name, value in values.items()
        if value is not None
    }
    if not changes:
        click.echo("Error: Provide at least one value to update", err=True)
        ctx.exit(1)
    try:
        updated = _service(ctx).update_financial_settings(**changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    _echo_financial(updated)


@settings_group.command("global")
@click.option("--company-name", help="Company name")
@click.option("--company-address", help="Company address")
@click.option("--company-phone", help="Company phone")
@click.option("--company-email", help="Company email")
@click.option("--exchange-rate", help="AED per USD")
@click.option("--date-format", help="Display date format")
@click.option("--auto-logout-minutes", type=int, help="Idle minutes before logout")
@click.pass_context
def update_global(ctx, **values):
    """Update company-wide settings. Currency is always AED."""
    changes = {name: value for name, value in values.items() if value is not None}
    if not changes:
        click.echo("Error: Provide at least one value to update", err=True)
        ctx.exit(1)
    try:
        updated = _service(ctx).update_global_settings(**changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    _echo_global(updated)


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
