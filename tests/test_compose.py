"""Tests for compose artifact generation."""

import re

import yaml

from gatefleet.compose import build_compose_config, generate_token, render_compose, render_env
from gatefleet.models import Instance


def _instance():
    return Instance(
        name="alpha",
        gateway_port=18920,
        bridge_port=18921,
        config_dir="/fleet/instances/alpha",
        created_at="2026-10-18T12:00:00+00:00",
    )


def test_generate_token_is_256_bit_hex():
    token = generate_token()
    assert re.fullmatch(r"[0-9a-f]{64}", token)
    assert generate_token() != token


def test_compose_gateway_service():
    """Test that the gateway service publishes the instance's ports."""
    config = build_compose_config(_instance(), "gatefleet:local")

    gateway = config["services"]["gateway"]
    assert gateway["container_name"] == "gatefleet-alpha-gateway"
    assert gateway["ports"] == ["18920:18789", "18921:18790"]
    assert gateway["image"] == "${GATEFLEET_IMAGE:-gatefleet:local}"
    assert gateway["environment"]["GATEWAY_TOKEN"] == "${GATEWAY_TOKEN}"
    assert "./config:/home/node/.gateway" in gateway["volumes"]


def test_compose_cli_service_is_profiled():
    config = build_compose_config(_instance(), "gatefleet:local")

    cli = config["services"]["cli"]
    assert cli["profiles"] == ["cli"]
    assert cli["container_name"] == "gatefleet-alpha-cli"
    assert "ports" not in cli


def test_render_compose_is_valid_yaml():
    text = render_compose(_instance(), "gatefleet:local")

    assert text.startswith("# Gateway instance: alpha")
    assert yaml.safe_load(text) == build_compose_config(_instance(), "gatefleet:local")


def test_render_env_contents():
    text = render_env(_instance(), "ab" * 32, "gatefleet:local")

    lines = text.splitlines()
    assert "INSTANCE_NAME=alpha" in lines
    assert "GATEWAY_PORT=18920" in lines
    assert "BRIDGE_PORT=18921" in lines
    assert f"GATEWAY_TOKEN={'ab' * 32}" in lines
    assert "GATEWAY_BIND=loopback" in lines
