"""Destroy command - tear down an instance and free its ports."""

import typer

from ..errors import FleetError
from .common import console, error, get_manager, hint, success, warning


def destroy(
    name: str = typer.Argument(..., help="Instance name"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
    keep_data: bool = typer.Option(False, "--keep-data", help="Preserve config and data files"),
) -> None:
    """Destroy an instance.

    Examples:
        gatefleet destroy work
        gatefleet destroy work --force --keep-data
    """
    manager = get_manager()

    try:
        if not manager.exists(name):
            error(f"Instance '{name}' not found")
            raise typer.Exit(1)

        if not force:
            if keep_data:
                warning(f"This will destroy instance '{name}' but keep its files.")
            else:
                warning(f"This will destroy instance '{name}' and all its data.")
            if not typer.confirm("Proceed?"):
                console.print("[yellow]Cancelled[/yellow]")
                return

        warning(f"Destroying instance: {name}")
        manager.destroy(name, keep_data=keep_data)
    except FleetError as e:
        error(str(e))
        raise typer.Exit(1)

    success(f"Instance '{name}' destroyed.")
    if keep_data:
        hint(f"Data preserved at: {manager.instance_dir(name)}")
