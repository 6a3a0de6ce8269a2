"""Console output helpers shared by gatefleet commands."""

import os
from typing import Any

from rich.console import Console
from rich.markup import escape

from .models import InstanceStatus

console = Console()
error_console = Console(stderr=True)

# Verbose tracing of registry, allocator and docker calls on stderr
DEBUG = os.getenv("GATEFLEET_DEBUG", "").lower() in ("1", "true", "yes")

STATUS_MARKUP = {
    InstanceStatus.RUNNING: "[green]running[/green]",
    InstanceStatus.STOPPED: "[yellow]stopped[/yellow]",
    InstanceStatus.UNKNOWN: "[dim]unknown[/dim]",
}


def debug(message: str, **kwargs: Any) -> None:
    """Print a trace line to stderr when GATEFLEET_DEBUG is set.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    if DEBUG:
        error_console.print(f"[dim][DEBUG][/dim] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print a progress line in cyan."""
    console.print(f"[cyan]{message}[/cyan]", **kwargs)


def success(message: str, **kwargs: Any) -> None:
    console.print(f"[green]{message}[/green]", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    console.print(f"[yellow]{message}[/yellow]", **kwargs)


def hint(message: str, **kwargs: Any) -> None:
    """Print a dimmed follow-up suggestion."""
    console.print(f"[dim]{message}[/dim]", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error to stderr.

    Markup in *message* is escaped; error texts may carry paths or
    docker output.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    error_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False, **kwargs)


def format_status(status: InstanceStatus) -> str:
    """Return rich markup for an instance status."""
    return STATUS_MARKUP[status]
