"""Logs command - show gateway container logs."""

import typer

from ..errors import FleetError
from .common import error, get_manager


def logs(
    name: str = typer.Argument(..., help="Instance name"),
    follow: bool = typer.Option(True, "--follow/--no-follow", help="Follow log output"),
) -> None:
    """View instance logs.

    Examples:
        gatefleet logs work
        gatefleet logs work --no-follow
    """
    manager = get_manager()
    try:
        code = manager.logs(name, follow=follow)
    except FleetError as e:
        error(str(e))
        raise typer.Exit(1)
    raise typer.Exit(code)
