"""Dashboard command - open the gateway dashboard in a browser."""

import typer

from ..errors import FleetError
from .common import error, get_manager, hint, info


def dashboard(
    name: str = typer.Argument(..., help="Instance name"),
    no_browser: bool = typer.Option(False, "--no-browser", help="Only print the URL"),
) -> None:
    """Open instance dashboard in browser.

    Examples:
        gatefleet dashboard work
    """
    manager = get_manager()
    try:
        url = manager.dashboard_url(name)
    except FleetError as e:
        error(str(e))
        raise typer.Exit(1)

    if no_browser:
        print(url)
        return

    info(f"Opening dashboard: {url}")
    if typer.launch(url) != 0:
        hint(f"Could not open browser. Visit: {url}")
