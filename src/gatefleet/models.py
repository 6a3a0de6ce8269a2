"""Data model for gatefleet instances and the registry."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import CONTAINER_PREFIX, PROJECT_PREFIX


class InstanceStatus(str, Enum):
    """Live status of an instance, derived from the container runtime."""

    RUNNING = "running"
    STOPPED = "stopped"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PortPair:
    """Gateway and bridge ports assigned to one instance."""

    gateway_port: int
    bridge_port: int


@dataclass(frozen=True)
class Instance:
    """A managed gateway instance as persisted in the registry."""

    name: str
    gateway_port: int
    bridge_port: int
    config_dir: str
    created_at: str  # ISO-8601, UTC

    @property
    def project_name(self) -> str:
        """Compose project name; keeps each instance in its own namespace."""
        return f"{PROJECT_PREFIX}-{self.name}"

    @property
    def container_name(self) -> str:
        return container_name_for(self.name)

    @property
    def dashboard_url(self) -> str:
        return f"http://127.0.0.1:{self.gateway_port}/"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "gatewayPort": self.gateway_port,
            "bridgePort": self.bridge_port,
            "configDir": self.config_dir,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Instance":
        """Build an instance from its registry representation.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a port is not an integer
        """
        return cls(
            name=str(data["name"]),
            gateway_port=int(data["gatewayPort"]),
            bridge_port=int(data["bridgePort"]),
            config_dir=str(data["configDir"]),
            created_at=str(data["createdAt"]),
        )


@dataclass(frozen=True)
class InstanceWithStatus:
    """An instance paired with its live status. Never persisted."""

    instance: Instance
    status: InstanceStatus

    @property
    def name(self) -> str:
        return self.instance.name

    def to_dict(self) -> dict[str, Any]:
        return {**self.instance.to_dict(), "status": self.status.value}


@dataclass
class Registry:
    """The persisted aggregate: instances plus port-offset bookkeeping."""

    instances: dict[str, Instance] = field(default_factory=dict)
    next_port_offset: int = 0
    available_offsets: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "instances": {name: inst.to_dict() for name, inst in self.instances.items()},
            "nextPortOffset": self.next_port_offset,
            "availableOffsets": list(self.available_offsets),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Registry":
        """Build a registry from the parsed JSON document.

        ``availableOffsets`` is optional; older documents omit it.

        Raises:
            KeyError, TypeError, ValueError: If the document is malformed
        """
        if not isinstance(data, dict):
            raise TypeError("registry document must be a JSON object")
        raw_instances = data.get("instances", {})
        if not isinstance(raw_instances, dict):
            raise TypeError("'instances' must be an object")
        instances = {
            name: Instance.from_dict(entry) for name, entry in raw_instances.items()
        }
        offsets = data.get("availableOffsets") or []
        if not isinstance(offsets, list):
            raise TypeError("'availableOffsets' must be a list")
        return cls(
            instances=instances,
            next_port_offset=int(data.get("nextPortOffset", 0)),
            available_offsets=sorted({int(offset) for offset in offsets}),
        )


def container_name_for(name: str) -> str:
    """Return the well-known gateway container name for an instance."""
    return f"{CONTAINER_PREFIX}-{name}-gateway"
