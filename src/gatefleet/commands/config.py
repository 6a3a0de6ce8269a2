"""Config command - edit an instance's .env file."""

import typer

from ..errors import FleetError
from .common import console, error, get_manager, hint, info, warning


def config(
    name: str = typer.Argument(..., help="Instance name"),
    path_only: bool = typer.Option(False, "--path", help="Print the config path and exit"),
) -> None:
    """Edit instance configuration.

    Opens the instance's .env file in $EDITOR.

    Examples:
        gatefleet config work
        gatefleet config work --path
    """
    manager = get_manager()
    try:
        config_path = manager.config_path(name)
    except FleetError as e:
        error(str(e))
        raise typer.Exit(1)

    if path_only:
        print(config_path)
        return

    info(f"Opening config: {config_path}")
    typer.edit(filename=str(config_path))

    console.print()
    warning("Config updated. Restart to apply changes:")
    hint(f"  gatefleet stop {name} && gatefleet start {name}")
