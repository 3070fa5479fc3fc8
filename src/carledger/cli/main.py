"""Main CLI entry point."""

import logging

import click
from carledger.database.factories import DB_PATH_ENV, create_sqlite_database

# Import and register all commands at module level
from carledger.cli.commands import (
    audit,
    backup,
    category,
    dashboard,
    expense,
    export,
    init_categories,
    settings,
    stats,
    transaction,
    vehicle,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--user",
    help="User recorded in the audit log",
    envvar="CARLEDGER_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="CARLEDGER_LOG_LEVEL",
    help="Logging verbosity (logs go to stderr)",
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str | None, log_level: str):
    """Carledger - back office for a used-car dealership.

    Record transactions, track vehicle inventory, expenses and profit
    distribution, and view dashboard and business performance figures.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user"] = user
        ctx.call_on_close(db.disconnect)


# Register all commands
transaction.register_commands(cli)
category.register_commands(cli)
init_categories.register_commands(cli)
vehicle.register_commands(cli)
expense.register_commands(cli)
dashboard.register_commands(cli)
stats.register_commands(cli)
settings.register_commands(cli)
backup.register_commands(cli)
audit.register_commands(cli)
export.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
