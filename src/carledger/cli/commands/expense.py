"""Vehicle expense commands."""

import click
from carledger.cli.context import get_audit, get_db, parse_amount_or_exit, parse_date_or_exit
from carledger.cli.error_handling import handle_domain_error
from carledger.domain.errors import DomainError
from carledger.domain.vehicle import MIRRORED_RECIPIENT, VehicleService
from carledger.utils.amount_parser import format_money


def _service(ctx) -> VehicleService:
    return VehicleService(get_db(ctx), get_audit(ctx))


@click.group()
def expense_group():
    """Manage expenses recorded against vehicles."""
    pass


@expense_group.command("add")
@click.argument("vehicle_id", type=int)
@click.option("--type", "expense_type", required=True, help="Expense type (e.g., Repair, Transport)")
@click.option("--amount", required=True, help="Expense amount")
@click.option("--date", "expense_date", default="today", show_default=True, help="Expense date")
@click.option("--recipient", help=f"Who paid (expenses paid by {MIRRORED_RECIPIENT} are also posted to the ledger)")
@click.option("--notes", help="Notes")
@click.pass_context
def add_expense(
    ctx,
    vehicle_id: int,
    expense_type: str,
    amount: str,
    expense_date: str,
    recipient: str | None,
    notes: str | None,
):
    """Record an expense for a vehicle.

    Examples:
        carledger expense add 1 --type Repair --amount 2000 --recipient Ahmed
    """
    try:
        expense_id = _service(ctx).add_expense(
            vehicle_id=vehicle_id,
            type=expense_type,
            amount=parse_amount_or_exit(ctx, amount),
            expense_date=parse_date_or_exit(ctx, expense_date),
            recipient=recipient,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created expense {expense_id} for vehicle {vehicle_id}")


@expense_group.command("list")
@click.argument("vehicle_id", type=int)
@click.pass_context
def list_expenses(ctx, vehicle_id: int):
    """List a vehicle's expenses, newest first."""
    try:
        expenses = _service(ctx).list_expenses(vehicle_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not expenses:
        click.echo("No expenses recorded.")
        return

    click.echo(f"\n{'ID':<6} {'Date':<12} {'Type':<20} {'Amount':>16}  {'Recipient':<10} Notes")
    click.echo("-" * 90)
    for expense in expenses:
        click.echo(
            f"{expense.id:<6} {expense.date.isoformat():<12} {expense.type[:20]:<20} "
            f"{format_money(expense.amount):>16}  {(expense.recipient or '-'):<10} {expense.notes or ''}"
        )


@expense_group.command("update")
@click.argument("expense_id", type=int)
@click.option("--type", "expense_type", help="Expense type")
@click.option("--amount", help="Expense amount")
@click.option("--date", "expense_date", help="Expense date")
@click.option("--recipient", help="Who paid, or empty string to clear")
@click.option("--notes", help="Notes, or empty string to clear")
@click.pass_context
def update_expense(
    ctx,
    expense_id: int,
    expense_type: str | None,
    amount: str | None,
    expense_date: str | None,
    recipient: str | None,
    notes: str | None,
):
    """Update an expense. Only the provided fields change."""
    try:
        _service(ctx).update_expense(
            expense_id,
            type=expense_type,
            amount=parse_amount_or_exit(ctx, amount),
            expense_date=parse_date_or_exit(ctx, expense_date),
            recipient=recipient,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated expense {expense_id}")


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_expense(ctx, expense_id: int, yes: bool):
    """Delete an expense."""
    if not yes:
        click.confirm(f"Delete expense {expense_id}?", abort=True)
    try:
        _service(ctx).delete_expense(expense_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted expense {expense_id}")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
