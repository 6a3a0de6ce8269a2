"""Per-instance docker-compose manifest and secrets file generation."""

import os
import secrets
from pathlib import Path
from typing import Any

import yaml

from .config import (
    COMPOSE_FILE_NAME,
    CONTAINER_BRIDGE_PORT,
    CONTAINER_GATEWAY_PORT,
    CONTAINER_PREFIX,
    ENV_FILE_NAME,
)
from .models import Instance

HOME_IN_CONTAINER = "/home/node"
STATE_IN_CONTAINER = f"{HOME_IN_CONTAINER}/.gateway"


def generate_token() -> str:
    """Return a 256-bit random token, hex encoded."""
    return secrets.token_hex(32)


def _volumes() -> list[str]:
    return [
        f"./config:{STATE_IN_CONTAINER}",
        f"./workspace:{STATE_IN_CONTAINER}/workspace",
    ]


def build_compose_config(instance: Instance, image: str) -> dict[str, Any]:
    """Build the compose document for an instance.

    The gateway service publishes the instance's two host ports; the token
    and image are interpolated from the ``.env`` file beside the manifest.
    """
    image_ref = f"${{GATEFLEET_IMAGE:-{image}}}"
    return {
        "services": {
            "gateway": {
                "image": image_ref,
                "container_name": instance.container_name,
                "environment": {
                    "HOME": HOME_IN_CONTAINER,
                    "TERM": "xterm-256color",
                    "INSTANCE_NAME": instance.name,
                    "GATEWAY_PORT": str(instance.gateway_port),
                    "GATEWAY_TOKEN": "${GATEWAY_TOKEN}",
                },
                "volumes": _volumes(),
                "ports": [
                    f"{instance.gateway_port}:{CONTAINER_GATEWAY_PORT}",
                    f"{instance.bridge_port}:{CONTAINER_BRIDGE_PORT}",
                ],
                "init": True,
                "restart": "unless-stopped",
                "command": [
                    "node",
                    "dist/index.js",
                    "gateway",
                    "--bind",
                    "${GATEWAY_BIND:-loopback}",
                    "--port",
                    str(CONTAINER_GATEWAY_PORT),
                ],
            },
            "cli": {
                "image": image_ref,
                "container_name": f"{CONTAINER_PREFIX}-{instance.name}-cli",
                "profiles": ["cli"],
                "environment": {
                    "HOME": HOME_IN_CONTAINER,
                    "TERM": "xterm-256color",
                    "GATEWAY_TOKEN": "${GATEWAY_TOKEN}",
                    "BROWSER": "echo",
                },
                "volumes": _volumes(),
                "stdin_open": True,
                "tty": True,
                "init": True,
                "entrypoint": ["node", "dist/index.js"],
            },
        }
    }


def render_compose(instance: Instance, image: str) -> str:
    """Render the compose manifest as YAML text."""
    header = (
        f"# Gateway instance: {instance.name}\n"
        "# Auto-generated by gatefleet - do not edit directly\n\n"
    )
    return header + yaml.safe_dump(
        build_compose_config(instance, image), sort_keys=False, default_flow_style=False
    )


def render_env(instance: Instance, token: str, image: str) -> str:
    """Render the secrets file consumed by docker compose."""
    return (
        f"# Gateway instance: {instance.name}\n"
        f"# Created: {instance.created_at}\n"
        "\n"
        f"INSTANCE_NAME={instance.name}\n"
        f"GATEWAY_PORT={instance.gateway_port}\n"
        f"BRIDGE_PORT={instance.bridge_port}\n"
        f"GATEFLEET_IMAGE={image}\n"
        f"GATEWAY_TOKEN={token}\n"
        "# loopback keeps the gateway on localhost; use 'lan' to expose it\n"
        "GATEWAY_BIND=loopback\n"
        "\n"
        "# Add your API keys below:\n"
        "# ANTHROPIC_API_KEY=\n"
        "# OPENAI_API_KEY=\n"
    )


def write_instance_files(instance: Instance, image: str, token: str | None = None) -> Path:
    """Write the manifest and secrets file into the instance directory.

    The ``.env`` file is created owner read/write only.

    Args:
        instance: Instance the files describe
        image: Container image reference
        token: Gateway token (generated when omitted)

    Returns:
        Path to the written ``.env`` file
    """
    instance_dir = Path(instance.config_dir)
    (instance_dir / COMPOSE_FILE_NAME).write_text(
        render_compose(instance, image), encoding="utf-8"
    )

    env_path = instance_dir / ENV_FILE_NAME
    fd = os.open(env_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(render_env(instance, token or generate_token(), image))
    os.chmod(env_path, 0o600)
    return env_path
