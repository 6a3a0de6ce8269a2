"""Instance lifecycle - create, start, stop and destroy gateway instances."""

import shutil
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from .allocator import PortAllocator, offset_for_port
from .compose import write_instance_files
from .config import ENV_FILE_NAME, INSTANCES_DIR_NAME, get_build_context, get_image
from .console import debug
from .errors import (
    ImageNotFoundError,
    InstanceNotFoundError,
    RuntimeFailureError,
    RuntimeUnavailableError,
    ValidationError,
)
from .models import Instance, InstanceStatus, InstanceWithStatus
from .registry import BaseRegistryStore, RegistryStore
from .runtime import ComposeRuntime
from .validation import ValidationResult, validate_name


class InstanceManager:
    """Coordinate the registry, the port allocator and the container runtime."""

    def __init__(
        self,
        store: BaseRegistryStore,
        base_dir: Path,
        allocator: PortAllocator | None = None,
        runtime: ComposeRuntime | None = None,
        image: str | None = None,
    ) -> None:
        """Initialize manager.

        Args:
            store: Registry store
            base_dir: Installation base directory; instances live under
                ``<base_dir>/instances/<name>``
            allocator: Port allocator (built on *store* when omitted)
            runtime: Container runtime
            image: Gateway image reference
        """
        self.store = store
        self.base_dir = base_dir
        self.allocator = allocator or PortAllocator(store)
        self.runtime = runtime or ComposeRuntime()
        self.image = image or get_image()

    @classmethod
    def from_base_dir(cls, base_dir: Path | None = None) -> "InstanceManager":
        """Build a manager backed by the on-disk registry."""
        store = RegistryStore(base_dir)
        return cls(store, store.base_dir)

    def instance_dir(self, name: str) -> Path:
        return self.base_dir / INSTANCES_DIR_NAME / name

    # Queries ----------------------------------------------------------
    def validate_name(self, name: str) -> ValidationResult:
        return validate_name(name, self.store.read())

    def exists(self, name: str) -> bool:
        return name in self.store.read().instances

    def get(self, name: str) -> InstanceWithStatus | None:
        """Return an instance with its live status, or None if absent."""
        instance = self.store.read().instances.get(name)
        if instance is None:
            return None
        return InstanceWithStatus(instance, self._statuses([instance])[name])

    def list_instances(self) -> list[InstanceWithStatus]:
        """Return all instances with live status, sorted by name."""
        instances = sorted(self.store.read().instances.values(), key=lambda i: i.name)
        statuses = self._statuses(instances)
        return [InstanceWithStatus(inst, statuses[inst.name]) for inst in instances]

    def _statuses(self, instances: Sequence[Instance]) -> dict[str, InstanceStatus]:
        try:
            running = self.runtime.running_containers()
        except (RuntimeUnavailableError, RuntimeFailureError) as e:
            debug(f"Status unknown: {e}")
            return {inst.name: InstanceStatus.UNKNOWN for inst in instances}
        return {
            inst.name: InstanceStatus.RUNNING
            if inst.container_name in running
            else InstanceStatus.STOPPED
            for inst in instances
        }

    def _require(self, name: str) -> Instance:
        instance = self.store.read().instances.get(name)
        if instance is None:
            raise InstanceNotFoundError(name)
        return instance

    def config_path(self, name: str) -> Path:
        """Return the path of the instance's ``.env`` file."""
        return Path(self._require(name).config_dir) / ENV_FILE_NAME

    def dashboard_url(self, name: str) -> str:
        return self._require(name).dashboard_url

    # Lifecycle --------------------------------------------------------
    def create(self, name: str, port: int | None = None) -> Instance:
        """Create and register a new instance.

        Nothing stays registered if any step fails; an auto-allocated
        offset goes back to the pool and a new instance directory is removed.

        Args:
            name: Instance name
            port: Explicit gateway port (bridge port is ``port + 1``)

        Returns:
            The registered instance

        Raises:
            ValidationError: If the name or explicit port is rejected
            PortAllocationError: If automatic allocation fails
        """
        with self.store.lock():
            result = self.validate_name(name)
            if not result.valid:
                raise ValidationError(result.error)

            if port is not None:
                ports = self.allocator.reserve_explicit(port)
            else:
                ports = self.allocator.allocate()

            instance_dir = self.instance_dir(name)
            instance = Instance(
                name=name,
                gateway_port=ports.gateway_port,
                bridge_port=ports.bridge_port,
                config_dir=str(instance_dir),
                created_at=datetime.now(timezone.utc).isoformat(),
            )
            created_dir = not instance_dir.exists()

            try:
                (instance_dir / "config").mkdir(parents=True, exist_ok=True)
                (instance_dir / "workspace").mkdir(parents=True, exist_ok=True)
                write_instance_files(instance, self.image)
                with self.store.transaction() as registry:
                    registry.instances[name] = instance
            except Exception:
                if port is None:
                    self.allocator.release(ports)
                if created_dir:
                    shutil.rmtree(instance_dir, ignore_errors=True)
                raise

        debug(f"Created instance '{name}' at {instance_dir}")
        return instance

    def start(self, name: str) -> None:
        """Start the gateway container of an instance.

        Raises:
            InstanceNotFoundError: If the instance is not registered
            ImageNotFoundError: If the gateway image has not been built
        """
        instance = self._require(name)
        if not self.runtime.image_exists(self.image):
            raise ImageNotFoundError(
                f"Docker image '{self.image}' not found. Run 'gatefleet build' first."
            )
        self.runtime.up(instance)

    def stop(self, name: str) -> None:
        self.runtime.stop(self._require(name))

    def destroy(self, name: str, keep_data: bool = False) -> None:
        """Tear down an instance and release its port offset.

        Container teardown is best-effort: a runtime failure (including
        "nothing to remove") does not stop the registry cleanup.

        Args:
            name: Instance name
            keep_data: Keep the instance directory on disk

        Raises:
            InstanceNotFoundError: If the instance is not registered
        """
        with self.store.lock():
            instance = self._require(name)
            offset = offset_for_port(instance.gateway_port)
            instance_dir = Path(instance.config_dir)

            try:
                self.runtime.down(instance)
            except (RuntimeUnavailableError, RuntimeFailureError) as e:
                debug(f"Ignoring teardown failure for '{name}': {e}")

            if not keep_data and instance_dir.exists():
                shutil.rmtree(instance_dir)

            with self.store.transaction() as registry:
                registry.instances.pop(name, None)
                self.allocator.reclaim(registry, offset)

        debug(f"Destroyed instance '{name}' (offset {offset})")

    # Pass-through commands --------------------------------------------
    def logs(self, name: str, follow: bool = True) -> int:
        return self.runtime.logs(self._require(name), follow=follow)

    def run_cli(self, name: str, args: Sequence[str]) -> int:
        return self.runtime.run_cli(self._require(name), args)

    def check_runtime(self) -> None:
        """Raise RuntimeUnavailableError unless docker is usable."""
        if not self.runtime.is_available():
            raise RuntimeUnavailableError("Docker is not installed or not running")

    def image_available(self) -> bool:
        return self.runtime.image_exists(self.image)

    def build_image(self, context_dir: Path | None = None) -> None:
        self.runtime.build_image(self.image, context_dir or get_build_context())
