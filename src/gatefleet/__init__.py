"""gatefleet - Run a fleet of gateway containers without port collisions."""

__version__ = "0.1.0"

from .allocator import PortAllocator, offset_for_port, ports_for_offset
from .errors import (
    AllocationExhaustedError,
    FleetError,
    InstanceNotFoundError,
    PortAllocationError,
    PortInUseError,
    PortRangeExceededError,
    RegistryCorruptError,
    RuntimeFailureError,
    RuntimeUnavailableError,
    ValidationError,
)
from .manager import InstanceManager
from .models import Instance, InstanceStatus, InstanceWithStatus, PortPair, Registry
from .registry import MemoryRegistryStore, RegistryStore
from .runtime import ComposeRuntime
from .system import PortProbe
from .validation import ValidationResult, validate_name

__all__ = [
    "__version__",
    "AllocationExhaustedError",
    "ComposeRuntime",
    "FleetError",
    "Instance",
    "InstanceManager",
    "InstanceNotFoundError",
    "InstanceStatus",
    "InstanceWithStatus",
    "MemoryRegistryStore",
    "PortAllocationError",
    "PortAllocator",
    "PortInUseError",
    "PortPair",
    "PortProbe",
    "PortRangeExceededError",
    "Registry",
    "RegistryCorruptError",
    "RegistryStore",
    "RuntimeFailureError",
    "RuntimeUnavailableError",
    "ValidationError",
    "ValidationResult",
    "offset_for_port",
    "ports_for_offset",
    "validate_name",
]
