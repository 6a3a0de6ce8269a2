"""Typer CLI for gatefleet - Main entry point."""

import typer

from . import __version__
from .commands import (
    build,
    config,
    create,
    dashboard,
    destroy,
    list_cmd,
    logs,
    run,
    start,
    stop,
)

app = typer.Typer(
    name="gatefleet",
    help="Manage multiple containerized gateway instances",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"gatefleet version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Manage multiple containerized gateway instances."""
    pass


# Register all commands
app.command(name="list")(list_cmd)
app.command()(create)
app.command()(destroy)
app.command()(start)
app.command()(stop)
app.command()(logs)
app.command()(config)
app.command()(dashboard)
app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True}
)(run)
app.command()(build)


def main() -> None:
    """Main entry point."""
    app()
