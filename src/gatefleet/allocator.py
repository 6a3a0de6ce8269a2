"""Port allocation logic for gatefleet.

Ports are handed out in fixed-size windows. Offset ``k`` maps to the
gateway port ``BASE_PORT + k * PORT_STEP`` and the bridge port right after
it. Offsets freed by destroyed instances are reused lowest-first before the
``next_port_offset`` watermark advances.
"""

from .config import (
    BASE_PORT,
    MAX_ALLOCATION_ATTEMPTS,
    MAX_EXPLICIT_PORT,
    MAX_PORT,
    MIN_EXPLICIT_PORT,
    PORT_FOOTPRINT,
    PORT_STEP,
)
from .console import debug
from .errors import (
    AllocationExhaustedError,
    InvalidPortError,
    PortInUseError,
    PortRangeExceededError,
)
from .models import Instance, PortPair, Registry
from .registry import BaseRegistryStore
from .system import PortProbe


def ports_for_offset(offset: int) -> PortPair:
    """Return the port pair an offset maps to."""
    gateway_port = BASE_PORT + offset * PORT_STEP
    return PortPair(gateway_port=gateway_port, bridge_port=gateway_port + 1)


def offset_for_port(gateway_port: int) -> int | None:
    """Return the offset a gateway port was allocated from.

    Returns:
        The offset, or None if the port is not on the offset grid
        (explicitly requested ports usually are not)
    """
    delta = gateway_port - BASE_PORT
    if delta < 0 or delta % PORT_STEP:
        return None
    return delta // PORT_STEP


def _windows_overlap(first: int, second: int) -> bool:
    return first < second + PORT_FOOTPRINT and second < first + PORT_FOOTPRINT


def _insert_offset(offsets: list[int], offset: int) -> None:
    """Insert into an ascending list, skipping duplicates."""
    if offset not in offsets:
        offsets.append(offset)
        offsets.sort()


class PortAllocator:
    """Allocate gateway/bridge port pairs with reuse of reclaimed offsets."""

    def __init__(
        self,
        store: BaseRegistryStore,
        probe: PortProbe | None = None,
        max_attempts: int = MAX_ALLOCATION_ATTEMPTS,
    ) -> None:
        """Initialize allocator.

        Args:
            store: Registry store holding the offset bookkeeping
            probe: Live port probe (defaults to binding on 127.0.0.1)
            max_attempts: Candidate offsets tried before giving up
        """
        self.store = store
        self.probe = probe or PortProbe()
        self.max_attempts = max_attempts

    def allocate(self) -> PortPair:
        """Allocate a port pair for a new instance.

        Strategy:
        1. Take the lowest reclaimed offset, else the watermark offset
        2. Reject the offset if either port is bound on the host, or its
           window overlaps a registered instance
        3. Rejected offsets go back to the reuse pool once the call ends

        Returns:
            The allocated port pair

        Raises:
            PortRangeExceededError: If the next candidate exceeds port 65535
            AllocationExhaustedError: If no candidate succeeded
        """
        with self.store.transaction() as registry:
            rejected: list[int] = []
            for _ in range(self.max_attempts):
                offset = self._next_candidate(registry)
                ports = ports_for_offset(offset)

                if ports.bridge_port > MAX_PORT:
                    raise PortRangeExceededError(
                        f"Port allocation exceeded valid range "
                        f"(gateway: {ports.gateway_port}, bridge: {ports.bridge_port})"
                    )

                if self._is_candidate_free(ports, registry):
                    for skipped in rejected:
                        _insert_offset(registry.available_offsets, skipped)
                    debug(f"Allocated offset {offset}: {ports.gateway_port}/{ports.bridge_port}")
                    return ports

                debug(f"Offset {offset} unavailable, trying next")
                rejected.append(offset)

            # Raised inside the transaction so the registry is left untouched
            raise AllocationExhaustedError(
                f"Could not find available ports after {self.max_attempts} attempts. "
                "Please specify a custom port with --port"
            )

    def reserve_explicit(self, port: int) -> PortPair:
        """Check an explicitly requested gateway port and its bridge port.

        No offset bookkeeping happens for explicit ports.

        Raises:
            InvalidPortError: If the port is outside 1024-65534
            PortInUseError: If either port is bound or already registered
        """
        if port < MIN_EXPLICIT_PORT or port > MAX_EXPLICIT_PORT:
            raise InvalidPortError(
                f"Port must be between {MIN_EXPLICIT_PORT} and {MAX_EXPLICIT_PORT}"
            )
        pair = PortPair(gateway_port=port, bridge_port=port + 1)

        owner = self._overlapping_instance(pair.gateway_port, self.store.read())
        if owner is not None:
            raise PortInUseError(
                f"Port {port} overlaps the port range of instance '{owner.name}'"
            )
        if not self.probe.are_available((pair.gateway_port, pair.bridge_port)):
            raise PortInUseError(f"Port {port} or {port + 1} is already in use")
        return pair

    def reclaim(self, registry: Registry, offset: int | None) -> None:
        """Return an offset to the reuse pool of *registry*.

        The caller persists the registry. Offsets the watermark has not
        reached yet, or None (an off-grid port), are ignored.
        """
        if offset is None or offset < 0 or offset >= registry.next_port_offset:
            return
        _insert_offset(registry.available_offsets, offset)

    def release(self, ports: PortPair) -> None:
        """Return the offset of an allocation that was never committed."""
        with self.store.transaction() as registry:
            self.reclaim(registry, offset_for_port(ports.gateway_port))

    # Internal helpers -------------------------------------------------
    def _next_candidate(self, registry: Registry) -> int:
        if registry.available_offsets:
            return registry.available_offsets.pop(0)
        offset = registry.next_port_offset
        registry.next_port_offset += 1
        return offset

    def _is_candidate_free(self, ports: PortPair, registry: Registry) -> bool:
        if self._overlapping_instance(ports.gateway_port, registry) is not None:
            return False
        return self.probe.are_available((ports.gateway_port, ports.bridge_port))

    @staticmethod
    def _overlapping_instance(gateway_port: int, registry: Registry) -> Instance | None:
        for instance in registry.instances.values():
            if _windows_overlap(gateway_port, instance.gateway_port):
                return instance
        return None
