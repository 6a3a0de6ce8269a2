"""Build command - build the gateway image."""

from pathlib import Path

import typer

from ..errors import FleetError
from .common import error, get_manager, info, success


def build(
    context_dir: Path | None = typer.Option(
        None, "--context", help="Docker build context (default: $GATEFLEET_BUILD_CONTEXT or cwd)"
    ),
) -> None:
    """Build the gateway Docker image.

    Examples:
        gatefleet build
        gatefleet build --context ~/src/gateway
    """
    manager = get_manager()
    info(f"Building gateway image {manager.image}...")
    try:
        manager.check_runtime()
        manager.build_image(context_dir)
    except FleetError as e:
        error(str(e))
        raise typer.Exit(1)
    success(f"Image built successfully: {manager.image}")
