"""Helpers for pulling shared objects out of the click context."""

from decimal import Decimal
from datetime import date

import click

from carledger.database.base import Database
from carledger.domain.audit import AuditService
from carledger.domain.errors import ValidationError
from carledger.utils.amount_parser import parse_amount
from carledger.utils.date_parser import parse_date


def get_db(ctx: click.Context) -> Database:
    return ctx.obj["db"]


def get_audit(ctx: click.Context) -> AuditService:
    """Audit sink stamped with the acting user from --user / CARLEDGER_USER."""
    return AuditService(ctx.obj["db"], user_id=ctx.obj.get("user"))


def parse_amount_or_exit(ctx: click.Context, value: str | None, label: str = "amount") -> Decimal | None:
    """Parse an amount option, or exit with a CLI error."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, value: str | None, label: str = "date") -> date | None:
    """Parse a date option, or exit with a CLI error."""
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValidationError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
