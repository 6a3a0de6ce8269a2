"""Common utilities for CLI commands."""

from rich.markup import escape

from ..console import console, debug, error, error_console, hint, info, success, warning
from ..manager import InstanceManager

# Re-export console utilities
__all__ = [
    "console",
    "error_console",
    "debug",
    "info",
    "hint",
    "success",
    "warning",
    "error",
    "escape",
    "get_manager",
]


def get_manager() -> InstanceManager:
    """Get an instance manager backed by the default registry."""
    return InstanceManager.from_base_dir()
