"""Transaction management commands."""

import click
from carledger.cli.context import get_audit, get_db, parse_amount_or_exit, parse_date_or_exit
from carledger.cli.date_filters import period_options, resolve_cli_date_range
from carledger.cli.error_handling import handle_domain_error
from carledger.domain.entities import TransactionType
from carledger.domain.errors import DomainError
from carledger.domain.reports import summarize_transactions
from carledger.domain.transaction import TransactionService
from carledger.utils.amount_parser import format_money

TYPE_CHOICE = click.Choice([t.value for t in TransactionType], case_sensitive=False)


def _service(ctx) -> TransactionService:
    return TransactionService(get_db(ctx), get_audit(ctx))


@click.group()
def transaction_group():
    """Manage ledger transactions."""
    pass


@transaction_group.command("add")
@click.option("--type", "txn_type", type=TYPE_CHOICE, required=True, help="income or expense")
@click.option("--amount", required=True, help="Transaction amount (e.g., 1500 or 'AED 1,500.00')")
@click.option("--category", required=True, help="Category name (e.g., 'Contribution')")
@click.option("--date", "txn_date", default="today", show_default=True, help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", default="", help="Transaction description")
@click.pass_context
def add_transaction(ctx, txn_type: str, amount: str, category: str, txn_date: str, description: str):
    """Add a transaction.

    Examples:
        carledger transaction add --type income --amount 5000 --category Contribution
        carledger transaction add --type expense --amount 1200 --category "Personal Expenses" --date 2024-03-10
    """
    service = _service(ctx)
    parsed_amount = parse_amount_or_exit(ctx, amount)
    parsed_date = parse_date_or_exit(ctx, txn_date)

    try:
        transaction_id = service.create_transaction(
            amount=parsed_amount,
            type=txn_type,
            category=category,
            date=parsed_date,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Created transaction {transaction_id}: {txn_type.lower()} {format_money(parsed_amount)} "
        f"({category}) on {parsed_date}"
    )


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@period_options
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="Only income or only expense")
@click.option("--category", help="Exact category name")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    txn_type: str | None,
    category: str | None,
):
    """View transactions with optional filters, newest first."""
    service = _service(ctx)
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
        transactions = service.list_transactions(
            start_date=start, end_date=end, type=txn_type, category=category
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':<6} {'Date':<12} {'Type':<8} {'Category':<20} {'Amount':>16}  Description")
    click.echo("-" * 100)
    for txn in transactions:
        description = txn.description.splitlines()[0] if txn.description else ""
        if len(description) > 40:
            description = description[:37] + "..."
        click.echo(
            f"{txn.id:<6} {txn.date.isoformat():<12} {txn.type.value:<8} "
            f"{txn.category[:20]:<20} {format_money(txn.amount):>16}  {description}"
        )

    summary = summarize_transactions(transactions)
    click.echo("-" * 100)
    click.echo(f"Total Income:   {format_money(summary.total_income):>18}")
    click.echo(f"Total Expenses: {format_money(summary.total_expenses):>18}")
    click.echo(f"Net Total:      {format_money(summary.net_total):>18}")
    click.echo(f"\n{summary.count} transaction(s)")


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show a single transaction."""
    txn = _service(ctx).get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"Transaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Category: {txn.category}")
    click.echo(f"  Amount: {format_money(txn.amount)}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    if txn.reference_id is not None:
        click.echo(f"  Linked expense: {txn.reference_id}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="income or expense")
@click.option("--amount", help="Transaction amount")
@click.option("--category", help="Category name")
@click.option("--date", "txn_date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", help="Transaction description")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    txn_type: str | None,
    amount: str | None,
    category: str | None,
    txn_date: str | None,
    description: str | None,
):
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        carledger transaction update 1 --amount 750
        carledger transaction update 1 --category "Personal Expenses" --type expense
    """
    service = _service(ctx)
    try:
        service.update_transaction(
            transaction_id=transaction_id,
            amount=parse_amount_or_exit(ctx, amount),
            type=txn_type,
            category=category,
            description=description,
            date=parse_date_or_exit(ctx, txn_date),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction."""
    if not yes:
        click.confirm(f"Delete transaction {transaction_id}?", abort=True)
    try:
        _service(ctx).delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
