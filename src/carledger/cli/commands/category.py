"""Category management commands."""

import click
from carledger.cli.context import get_audit, get_db
from carledger.cli.error_handling import handle_domain_error
from carledger.domain.category import CategoryService
from carledger.domain.errors import DomainError
from carledger.utils.amount_parser import format_money


def _service(ctx) -> CategoryService:
    return CategoryService(get_db(ctx), get_audit(ctx))


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--stats", is_flag=True, help="Show transaction count and totals per category")
@click.pass_context
def list_categories(ctx, stats: bool):
    """List all categories."""
    service = _service(ctx)

    if not stats:
        categories = service.list_categories()
        if not categories:
            click.echo("No categories found. Run 'init-categories' to create default categories.")
            return
        click.echo("\nCategories:")
        for cat in categories:
            click.echo(f"  {cat.name} (ID: {cat.id})")
        return

    rows = service.list_category_stats()
    if not rows:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return
    click.echo(f"\n{'ID':<5} {'Name':<22} {'Count':>6} {'Income':>18} {'Expenses':>18}")
    click.echo("-" * 73)
    for row in rows:
        click.echo(
            f"{row.category.id:<5} {row.category.name[:22]:<22} {row.transaction_count:>6} "
            f"{format_money(row.total_income):>18} {format_money(row.total_expenses):>18}"
        )


@category_group.command("create")
@click.argument("name")
@click.pass_context
def create_category(ctx, name: str):
    """Create a new category."""
    try:
        category_id = _service(ctx).create_category(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created category '{name}' (ID: {category_id})")


@category_group.command("rename")
@click.argument("category_id", type=int)
@click.argument("name")
@click.pass_context
def rename_category(ctx, category_id: int, name: str):
    """Rename a category. Existing transactions keep their old category text."""
    try:
        category = _service(ctx).rename_category(category_id, name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Renamed category {category_id} to '{category.name}'")


@category_group.command("delete")
@click.argument("category_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_category(ctx, category_id: int, yes: bool):
    """Delete a category."""
    if not yes:
        click.confirm(f"Delete category {category_id}?", abort=True)
    try:
        _service(ctx).delete_category(category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted category {category_id}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
