"""Vehicle inventory and profit distribution commands."""

import click
from carledger.cli.context import get_audit, get_db, parse_amount_or_exit, parse_date_or_exit
from carledger.cli.error_handling import handle_domain_error
from carledger.domain.entities import VehicleStatus
from carledger.domain.errors import DomainError
from carledger.domain.reports import build_vehicle_report
from carledger.domain.settings import SettingsService
from carledger.domain.vehicle import VehicleService
from carledger.utils.amount_parser import format_money

STATUS_CHOICE = click.Choice([s.value for s in VehicleStatus], case_sensitive=False)


def _service(ctx) -> VehicleService:
    return VehicleService(get_db(ctx), get_audit(ctx))


def _detail_options(command):
    for name, help_text in reversed(
        [
            ("--color", "Exterior color"),
            ("--notes", "Free-form notes"),
            ("--owner-name", "Registered owner"),
            ("--tc-number", "Traffic code number"),
            ("--certificate-number", "Registration certificate number"),
            ("--registration-location", "Registration emirate or location"),
        ]
    ):
        command = click.option(name, help=help_text)(command)
    return command


@click.group()
def vehicle_group():
    """Manage vehicle inventory."""
    pass


@vehicle_group.command("add")
@click.option("--vin", required=True, help="Vehicle identification number")
@click.option("--make", required=True, help="Manufacturer (e.g., Toyota)")
@click.option("--model", required=True, help="Model (e.g., Camry)")
@click.option("--year", required=True, type=int, help="Model year")
@click.option("--purchase-price", required=True, help="Purchase price")
@click.option("--purchase-date", default="today", show_default=True, help="Purchase date")
@click.option("--status", type=STATUS_CHOICE, default=VehicleStatus.AVAILABLE.value, show_default=True)
@click.option("--sale-price", help="Sale price (required when status is SOLD)")
@click.option("--sale-date", help="Sale date (defaults to today when status is SOLD)")
@_detail_options
@click.pass_context
def add_vehicle(
    ctx,
    vin: str,
    make: str,
    model: str,
    year: int,
    purchase_price: str,
    purchase_date: str,
    status: str,
    sale_price: str | None,
    sale_date: str | None,
    **details,
):
    """Add a vehicle to inventory.

    Examples:
        carledger vehicle add --vin 1HGCM82633A004352 --make Toyota --model Camry --year 2019 --purchase-price 50000
    """
    service = _service(ctx)
    try:
        vehicle_id = service.create_vehicle(
            vin=vin,
            make=make,
            model=model,
            year=year,
            purchase_price=parse_amount_or_exit(ctx, purchase_price, "purchase price"),
            purchase_date=parse_date_or_exit(ctx, purchase_date, "purchase date"),
            status=status,
            sale_price=parse_amount_or_exit(ctx, sale_price, "sale price"),
            sale_date=parse_date_or_exit(ctx, sale_date, "sale date"),
            **details,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    vehicle = service.get_vehicle(vehicle_id)
    click.echo(f"Created vehicle '{vehicle.title}' (ID: {vehicle_id})")


@vehicle_group.command("list")
@click.option("--status", type=STATUS_CHOICE, help="Only AVAILABLE or only SOLD vehicles")
@click.pass_context
def list_vehicles(ctx, status: str | None):
    """List vehicles with expense, profit and distribution totals."""
    financials = _service(ctx).list_financials()
    if status is not None:
        financials = [f for f in financials if f.vehicle.status.value == status.upper()]

    if not financials:
        click.echo("No vehicles found.")
        return

    click.echo(
        f"\n{'ID':<5} {'Vehicle':<28} {'VIN':<19} {'Status':<10} "
        f"{'Purchase':>16} {'Expenses':>16} {'Net Profit':>16}"
    )
    click.echo("-" * 116)
    for row in financials:
        vehicle = row.vehicle
        click.echo(
            f"{vehicle.id:<5} {vehicle.title[:28]:<28} {vehicle.vin[:19]:<19} {vehicle.status.value:<10} "
            f"{format_money(vehicle.purchase_price):>16} {format_money(row.total_expenses):>16} "
            f"{format_money(row.net_profit):>16}"
        )


@vehicle_group.command("show")
@click.argument("vehicle_id", type=int)
@click.pass_context
def show_vehicle(ctx, vehicle_id: int):
    """Show a vehicle with its expenses, profit and distributions."""
    service = _service(ctx)
    try:
        vehicle = service.require_vehicle(vehicle_id)
        lines = build_vehicle_report(
            vehicle,
            service.list_expenses(vehicle_id),
            service.list_distributions(vehicle_id),
            service.get_profit(vehicle_id),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Vehicle ID: {vehicle.id}")
    for line in lines:
        click.echo(line)


@vehicle_group.command("report")
@click.argument("vehicle_id", type=int)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the report to a file")
@click.pass_context
def vehicle_report(ctx, vehicle_id: int, output: str | None):
    """Print a sales report for a vehicle, with the company header."""
    service = _service(ctx)
    try:
        vehicle = service.require_vehicle(vehicle_id)
        lines = build_vehicle_report(
            vehicle,
            service.list_expenses(vehicle_id),
            service.list_distributions(vehicle_id),
            service.get_profit(vehicle_id),
            settings=SettingsService(get_db(ctx)).get_global_settings(),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    text = "\n".join(lines) + "\n"
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)
        click.echo(f"Wrote report for vehicle {vehicle_id} to {output}")
    else:
        click.echo(text, nl=False)


@vehicle_group.command("update")
@click.argument("vehicle_id", type=int)
@click.option("--vin", help="Vehicle identification number")
@click.option("--make", help="Manufacturer")
@click.option("--model", help="Model")
@click.option("--year", type=int, help="Model year")
@click.option("--purchase-price", help="Purchase price")
@click.option("--purchase-date", help="Purchase date")
@click.option("--status", type=STATUS_CHOICE, help="AVAILABLE or SOLD")
@click.option("--sale-price", help="Sale price")
@click.option("--sale-date", help="Sale date")
@_detail_options
@click.pass_context
def update_vehicle(
    ctx,
    vehicle_id: int,
    purchase_price: str | None,
    purchase_date: str | None,
    sale_price: str | None,
    sale_date: str | None,
    **changes,
):
    """Update a vehicle.

    Setting --status AVAILABLE on a sold vehicle clears its sale price, sale
    date and all profit distributions.

    Examples:
        carledger vehicle update 1 --status SOLD --sale-price 70000 --sale-date 2024-03-15
        carledger vehicle update 1 --status AVAILABLE
    """
    fields = {name: value for name, value in changes.items() if value is not None}
    for name, value, label in (
        ("purchase_price", purchase_price, "purchase price"),
        ("sale_price", sale_price, "sale price"),
    ):
        if value is not None:
            fields[name] = parse_amount_or_exit(ctx, value, label)
    for name, value, label in (
        ("purchase_date", purchase_date, "purchase date"),
        ("sale_date", sale_date, "sale date"),
    ):
        if value is not None:
            fields[name] = parse_date_or_exit(ctx, value, label)

    try:
        vehicle = _service(ctx).update_vehicle(vehicle_id, **fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated vehicle {vehicle_id} ({vehicle.status.value})")


@vehicle_group.command("delete")
@click.argument("vehicle_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_vehicle(ctx, vehicle_id: int, yes: bool):
    """Delete a vehicle with its expenses and distributions."""
    if not yes:
        click.confirm(
            f"Delete vehicle {vehicle_id} with all its expenses and distributions?", abort=True
        )
    try:
        _service(ctx).delete_vehicle(vehicle_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted vehicle {vehicle_id}")


@vehicle_group.command("profit")
@click.argument("vehicle_id", type=int)
@click.pass_context
def vehicle_profit(ctx, vehicle_id: int):
    """Preview a vehicle's net profit and split without saving anything."""
    try:
        profit = _service(ctx).get_profit(vehicle_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Total Expenses: {format_money(profit.total_expenses)}")
    click.echo(f"Net Profit:     {format_money(profit.net_profit)}")
    click.echo("")
    for share in profit.shares:
        click.echo(f"{share.recipient:<8} {format_money(share.amount):>18}  {share.notes}")
    click.echo(f"{'Total':<8} {format_money(profit.total_payable):>18}")


@vehicle_group.command("distribute")
@click.argument("vehicle_id", type=int)
@click.option("--date", "distribution_date", help="Distribution date (defaults to today)")
@click.pass_context
def distribute_profit(ctx, vehicle_id: int, distribution_date: str | None):
    """Auto-distribute a sold vehicle's profit.

    Replaces the vehicle's distribution rows and posts the Vehicle Sale,
    Profit-AHMED and Profit-NADA income transactions.
    """
    try:
        distributions = _service(ctx).auto_distribute(
            vehicle_id, parse_date_or_exit(ctx, distribution_date, "distribution date")
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Distributed profit for vehicle {vehicle_id}:")
    for dist in distributions:
        click.echo(f"  {dist.recipient:<8} {format_money(dist.amount):>18}  {dist.notes or ''}")


@vehicle_group.command("distributions")
@click.argument("vehicle_id", type=int)
@click.pass_context
def list_distributions(ctx, vehicle_id: int):
    """List stored profit distributions for a vehicle."""
    try:
        distributions = _service(ctx).list_distributions(vehicle_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not distributions:
        click.echo("No profit distributions recorded.")
        return
    for dist in distributions:
        click.echo(
            f"{dist.date.isoformat()}  {dist.recipient:<8} {format_money(dist.amount):>18} "
            f"{dist.percentage.normalize():>4f}%  {dist.notes or ''}"
        )


def register_commands(cli):
    """Register vehicle commands with main CLI."""
    cli.add_command(vehicle_group, name="vehicle")
