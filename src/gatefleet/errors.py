"""Exception hierarchy for gatefleet."""


class FleetError(Exception):
    """Base class for errors surfaced to the CLI."""


class ValidationError(FleetError):
    """Raised when user input is rejected before any side effect."""


class InvalidPortError(ValidationError):
    """Raised when an explicit port lies outside the usable range."""


class PortInUseError(ValidationError):
    """Raised when an explicit port pair is already bound or reserved."""


class PortAllocationError(FleetError):
    """Raised when no port pair can be allocated."""


class AllocationExhaustedError(PortAllocationError):
    """Raised when the retry budget runs out without a free port pair."""


class PortRangeExceededError(PortAllocationError):
    """Raised when a computed port pair falls outside the valid port space."""


class InstanceNotFoundError(FleetError):
    """Raised when an operation names an unregistered instance."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Instance '{name}' not found")
        self.name = name


class RegistryCorruptError(FleetError):
    """Raised when the registry document cannot be parsed."""


class RuntimeUnavailableError(FleetError):
    """Raised when the container runtime cannot be invoked."""


class RuntimeFailureError(FleetError):
    """Raised when a runtime command exits non-zero."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class ImageNotFoundError(FleetError):
    """Raised when the gateway image has not been built yet."""
