"""List command - show instances and their status."""

import json

import typer
from rich.table import Table

from ..console import format_status
from ..errors import FleetError
from .common import console, error, get_manager, hint


def list_cmd(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List all instances.

    Examples:
        gatefleet list
        gatefleet list --json
    """
    manager = get_manager()
    try:
        instances = manager.list_instances()
    except FleetError as e:
        error(str(e))
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps([inst.to_dict() for inst in instances], indent=2))
        return

    if not instances:
        hint("No instances found.")
        hint("Create one with: gatefleet create <name>")
        return

    table = Table(title="Gateway Instances")
    table.add_column("Name", style="cyan")
    table.add_column("Gateway", style="yellow")
    table.add_column("Bridge", style="yellow")
    table.add_column("Status")
    table.add_column("Created", style="dim")

    for item in instances:
        inst = item.instance
        table.add_row(
            inst.name,
            str(inst.gateway_port),
            str(inst.bridge_port),
            format_status(item.status),
            inst.created_at.split("T")[0],
        )

    console.print(table)
