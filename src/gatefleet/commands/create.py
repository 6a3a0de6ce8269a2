"""Create command - register a new instance and start it."""

import typer

from ..errors import FleetError
from .common import console, error, escape, get_manager, hint, info, success, warning


def create(
    name: str = typer.Argument(..., help="Instance name"),
    port: int | None = typer.Option(
        None, "-p", "--port", help="Gateway port (default: auto-allocate)"
    ),
    start: bool = typer.Option(True, "--start/--no-start", help="Start the gateway after creating"),
) -> None:
    """Create a new gateway instance.

    Examples:
        gatefleet create work
        gatefleet create work --port 19000
        gatefleet create scratch --no-start
    """
    manager = get_manager()

    try:
        if start:
            manager.check_runtime()

        info(f"Creating instance: {escape(name)}")
        instance = manager.create(name, port=port)
        success(f"  Gateway port: {instance.gateway_port}")
        success(f"  Bridge port:  {instance.bridge_port}")
        success(f"  Config dir:   {instance.config_dir}")

        if not start:
            hint(f"Start it with: gatefleet start {name}")
            return

        if not manager.image_available():
            console.print()
            warning("Docker image not found. Building...")
            manager.build_image()

        console.print()
        info("Starting gateway...")
        manager.start(name)
    except FleetError as e:
        error(str(e))
        raise typer.Exit(1)

    console.print()
    console.print(f"[bold green]Instance '{name}' created and running![/bold green]")
    info(f"  Dashboard: {instance.dashboard_url}")
    console.print()
    hint("Commands:")
    hint(f"  gatefleet logs {name}     - View logs")
    hint(f"  gatefleet config {name}   - Edit configuration")
    hint(f"  gatefleet destroy {name}  - Remove instance")
