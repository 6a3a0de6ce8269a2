"""Start and stop commands."""

import typer

from ..errors import FleetError
from .common import error, escape, get_manager, info, success, warning


def start(name: str = typer.Argument(..., help="Instance name")) -> None:
    """Start an instance.

    Examples:
        gatefleet start work
    """
    manager = get_manager()
    info(f"Starting instance: {escape(name)}")
    try:
        manager.start(name)
        url = manager.dashboard_url(name)
    except FleetError as e:
        error(str(e))
        raise typer.Exit(1)

    success(f"Instance '{name}' started.")
    info(f"Dashboard: {url}")


def stop(name: str = typer.Argument(..., help="Instance name")) -> None:
    """Stop an instance.

    Examples:
        gatefleet stop work
    """
    manager = get_manager()
    warning(f"Stopping instance: {escape(name)}")
    try:
        manager.stop(name)
    except FleetError as e:
        error(str(e))
        raise typer.Exit(1)

    success(f"Instance '{name}' stopped.")
