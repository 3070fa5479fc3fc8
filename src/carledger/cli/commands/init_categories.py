"""Initialize default categories."""

import click
from carledger.cli.context import get_audit, get_db
from carledger.cli.error_handling import handle_domain_error
from carledger.domain.category import CategoryService
from carledger.domain.errors import DomainError


@click.command("init-categories")
@click.pass_context
def init_categories(ctx):
    """Create the categories the dashboard and statistics rely on.

    Existing categories are left untouched, so this is safe to run again.
    """
    service = CategoryService(get_db(ctx), get_audit(ctx))

    try:
        created = service.init_default_categories()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not created:
        click.echo("All default categories already exist.")
        return
    for name in created:
        click.echo(f"  + {name}")
    click.echo(f"Successfully created {len(created)} categories.")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
