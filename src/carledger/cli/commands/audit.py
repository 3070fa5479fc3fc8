"""Audit log commands."""

import json

import click
from carledger.cli.context import get_audit


@click.group()
def audit_group():
    """Inspect the audit log."""
    pass


@audit_group.command("list")
@click.option("--entity-type", help="Only entries for this entity type (e.g., VEHICLE)")
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum entries to show")
@click.option("--verbose", "-v", is_flag=True, help="Show old and new data")
@click.pass_context
def list_audit(ctx, entity_type: str | None, limit: int, verbose: bool):
    """List audit entries, newest first."""
    entries = get_audit(ctx).list_entries(
        entity_type=entity_type.upper() if entity_type else None, limit=limit
    )
    if not entries:
        click.echo("No audit entries found.")
        return

    for entry in entries:
        user = entry.user_id or "-"
        click.echo(
            f"{entry.created_at:%Y-%m-%d %H:%M:%S}  {user:<10} {entry.action_type:<16} "
            f"{entry.entity_type:<20} {entry.entity_id or '-':<8} {entry.description}"
        )
        if verbose:
            if entry.old_data is not None:
                click.echo(f"    old: {json.dumps(entry.old_data, sort_keys=True)}")
            if entry.new_data is not None:
                click.echo(f"    new: {json.dumps(entry.new_data, sort_keys=True)}")


def register_commands(cli):
    """Register audit commands with main CLI."""
    cli.add_command(audit_group, name="audit")
