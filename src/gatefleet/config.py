"""Configuration management for gatefleet."""

import os
from pathlib import Path

import platformdirs

# Port layout. Each instance owns the window
# [gateway, gateway + PORT_FOOTPRINT): gateway, bridge (+1), noVNC
# browser view (+2), ttyd terminal (+3) and 100 CDP ports (+4 to +103).
BASE_PORT = 18800
PORT_STEP = 120
PORT_FOOTPRINT = 104
MAX_PORT = 65535
MIN_EXPLICIT_PORT = 1024
MAX_EXPLICIT_PORT = 65534
MAX_ALLOCATION_ATTEMPTS = 1000

# Ports the gateway listens on inside its container
CONTAINER_GATEWAY_PORT = 18789
CONTAINER_BRIDGE_PORT = 18790

REGISTRY_FILE_NAME = "registry.json"
LOCK_FILE_NAME = "registry.lock"
INSTANCES_DIR_NAME = "instances"
COMPOSE_FILE_NAME = "docker-compose.yml"
ENV_FILE_NAME = ".env"

CONTAINER_PREFIX = "gatefleet"
PROJECT_PREFIX = "gf"
DEFAULT_IMAGE = "gatefleet:local"

MAX_NAME_LENGTH = 32


def get_base_dir() -> Path:
    """Get the base directory holding the registry and instance data.

    ``GATEFLEET_HOME`` overrides the platform default.

    Returns:
        Path to base directory
    """
    override = os.getenv("GATEFLEET_HOME")
    if override:
        base_dir = Path(override).expanduser()
    else:
        base_dir = Path(platformdirs.user_data_dir("gatefleet", "gatefleet"))
    base_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
    return base_dir


def get_image() -> str:
    """Get the container image instances run."""
    return os.getenv("GATEFLEET_IMAGE", DEFAULT_IMAGE)


def get_build_context() -> Path:
    """Get the directory ``gatefleet build`` runs ``docker build`` in."""
    return Path(os.getenv("GATEFLEET_BUILD_CONTEXT", str(Path.cwd()))).expanduser()
