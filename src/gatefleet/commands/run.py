"""Run command - execute the gateway CLI inside an instance."""

import typer

from ..errors import FleetError
from .common import error, get_manager


def run(
    name: str = typer.Argument(..., help="Instance name"),
    args: list[str] | None = typer.Argument(None, help="Arguments passed to the CLI"),
) -> None:
    """Run a CLI command in an instance.

    Examples:
        gatefleet run work status
        gatefleet run work -- config set model claude
    """
    manager = get_manager()
    try:
        code = manager.run_cli(name, args or [])
    except FleetError as e:
        error(str(e))
        raise typer.Exit(1)
    raise typer.Exit(code)
