"""CLI error handling helpers."""

import logging

import click

from carledger.domain.errors import DomainError, TransientStoreError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print ``Error: <message>`` on stderr and exit with status 1.

    Store outages are also logged as warnings, since they are the only
    failures where re-running the same command can succeed.
    """
    if isinstance(error, TransientStoreError):
        logger.warning("Store unavailable while running %s", ctx.command_path)
    else:
        logger.debug("Command %s failed: %s", ctx.command_path, error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
