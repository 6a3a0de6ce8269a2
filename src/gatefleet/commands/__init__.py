"""Command modules for gatefleet CLI."""

from .build import build
from .config import config
from .create import create
from .dashboard import dashboard
from .destroy import destroy
from .list import list_cmd
from .logs import logs
from .run import run
from .start import start, stop

__all__ = [
    "build",
    "config",
    "create",
    "dashboard",
    "destroy",
    "list_cmd",
    "logs",
    "run",
    "start",
    "stop",
]
