"""Backup and restore commands."""

from pathlib import Path

import click
from carledger.cli.context import get_audit, get_db
from carledger.cli.error_handling import handle_domain_error
from carledger.domain.backup import BackupService, default_backup_filename
from carledger.domain.errors import DomainError


def _service(ctx) -> BackupService:
    return BackupService(get_db(ctx), get_audit(ctx))


@click.group()
def backup_group():
    """Back up and restore business data."""
    pass


@backup_group.command("create")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Backup file (default: backup_YYYY-MM-DD.json)")
@click.pass_context
def create_backup(ctx, output: str | None):
    """Write all business tables to a JSON backup file."""
    service = _service(ctx)
    try:
        backup = service.create_backup()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    path = service.save_backup(backup, Path(output or default_backup_filename()))
    rows = sum(len(table) for table in backup["tables"].values())
    click.echo(f"Created backup {backup['backup_id']} ({rows} rows) at {path}")


@backup_group.command("restore")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def restore_backup(ctx, backup_file: str, yes: bool):
    """Replace all business data with the contents of a backup file."""
    service = _service(ctx)
    try:
        backup = service.load_backup(Path(backup_file))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not yes:
        click.confirm(
            f"Replace ALL data with backup {backup['backup_id']} from {backup['created_at']}?",
            abort=True,
        )
    try:
        service.restore_backup(backup)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Restored backup {backup['backup_id']}")


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")
