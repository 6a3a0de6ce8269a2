"""Test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from gatefleet.allocator import PortAllocator
from gatefleet.errors import RuntimeFailureError, RuntimeUnavailableError
from gatefleet.manager import InstanceManager
from gatefleet.registry import MemoryRegistryStore, RegistryStore
from gatefleet.runtime import ComposeRuntime
from gatefleet.system import PortProbe


class FakeProbe(PortProbe):
    """Port probe that treats every port as free unless marked busy."""

    def __init__(self, busy=None):
        self.busy = set(busy or ())
        self.probed = []

    def is_port_available(self, port):
        self.probed.append(port)
        return port not in self.busy


class FakeRuntime(ComposeRuntime):
    """Container runtime that records calls instead of running docker."""

    def __init__(self):
        super().__init__()
        self.calls = []
        self.running = set()
        self.available = True
        self.image_present = True
        self.fail_down = False

    def is_available(self):
        return self.available

    def image_exists(self, image):
        return self.image_present

    def build_image(self, image, context_dir, dockerfile="Dockerfile"):
        self.calls.append(("build", image))
        self.image_present = True

    def running_containers(self):
        if not self.available:
            raise RuntimeUnavailableError("Docker is not installed or not running")
        return set(self.running)

    def up(self, instance):
        self.calls.append(("up", instance.name))
        self.running.add(instance.container_name)

    def stop(self, instance):
        self.calls.append(("stop", instance.name))
        self.running.discard(instance.container_name)

    def down(self, instance):
        self.calls.append(("down", instance.name))
        if self.fail_down:
            raise RuntimeFailureError("docker compose down failed with exit code 1", 1)
        self.running.discard(instance.container_name)

    def logs(self, instance, follow=True):
        self.calls.append(("logs", instance.name, follow))
        return 0

    def run_cli(self, instance, args):
        self.calls.append(("run", instance.name, list(args)))
        return 0


@pytest.fixture
def temp_dir():
    """Temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def base_dir(temp_dir):
    """Installation base directory (not yet created)."""
    return temp_dir / "fleet"


@pytest.fixture
def store(base_dir):
    """File-backed registry store."""
    return RegistryStore(base_dir)


@pytest.fixture
def memory_store():
    """In-memory registry store."""
    return MemoryRegistryStore()


@pytest.fixture
def probe():
    return FakeProbe()


@pytest.fixture
def runtime():
    return FakeRuntime()


@pytest.fixture
def manager(store, base_dir, probe, runtime):
    """Instance manager wired to fakes for ports and docker."""
    return InstanceManager(
        store,
        base_dir,
        allocator=PortAllocator(store, probe),
        runtime=runtime,
        image="gatefleet:test",
    )
