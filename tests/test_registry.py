"""Tests for registry module."""

import json
from contextlib import contextmanager

import pytest

from gatefleet.errors import RegistryCorruptError
from gatefleet.models import Instance, Registry
from gatefleet.registry import MemoryRegistryStore, RegistryStore


def _instance(name, gateway_port):
    return Instance(
        name=name,
        gateway_port=gateway_port,
        bridge_port=gateway_port + 1,
        config_dir=f"/fleet/instances/{name}",
        created_at="2026-10-18T12:00:00+00:00",
    )


def test_read_initializes_registry(store, base_dir):
    """Test that first access creates directories and an empty document."""
    registry = store.read()

    assert registry == Registry()
    assert (base_dir / "instances").is_dir()
    data = json.loads((base_dir / "registry.json").read_text())
    assert data["instances"] == {}
    assert data["nextPortOffset"] == 0


def test_write_read_round_trip(store):
    """Test that a written registry reads back field for field."""
    registry = Registry(
        instances={"alpha": _instance("alpha", 18800), "beta": _instance("beta", 19040)},
        next_port_offset=3,
        available_offsets=[1],
    )

    store.write(registry)

    assert store.read() == registry


def test_document_format(store, base_dir):
    """Test the on-disk JSON keys."""
    store.write(Registry(instances={"alpha": _instance("alpha", 18800)}, next_port_offset=1))

    data = json.loads((base_dir / "registry.json").read_text())
    assert data == {
        "instances": {
            "alpha": {
                "name": "alpha",
                "gatewayPort": 18800,
                "bridgePort": 18801,
                "configDir": "/fleet/instances/alpha",
                "createdAt": "2026-10-18T12:00:00+00:00",
            }
        },
        "nextPortOffset": 1,
        "availableOffsets": [],
    }


def test_reads_legacy_document_without_available_offsets(store, base_dir):
    base_dir.mkdir(parents=True)
    (base_dir / "registry.json").write_text(
        json.dumps({"instances": {}, "nextPortOffset": 4})
    )

    registry = store.read()

    assert registry.next_port_offset == 4
    assert registry.available_offsets == []


def test_corrupt_document_raises(store, base_dir):
    """Test that an unparseable document is reported, not repaired."""
    base_dir.mkdir(parents=True)
    path = base_dir / "registry.json"
    path.write_text("{not json")

    with pytest.raises(RegistryCorruptError):
        store.read()

    assert path.read_text() == "{not json"


def test_wrong_shape_raises(store, base_dir):
    base_dir.mkdir(parents=True)
    (base_dir / "registry.json").write_text(json.dumps({"instances": {"x": {"name": "x"}}}))

    with pytest.raises(RegistryCorruptError):
        store.read()


def test_write_leaves_no_temp_files(store, base_dir):
    store.write(Registry(next_port_offset=2))
    store.write(Registry(next_port_offset=3))

    leftovers = [p.name for p in base_dir.iterdir() if p.name.startswith(".registry.json")]
    assert leftovers == []


def test_transaction_persists_on_success(store):
    with store.transaction() as registry:
        registry.next_port_offset = 7

    assert store.read().next_port_offset == 7


def test_transaction_discards_on_error(store):
    """Test that nothing is written when the transaction body raises."""
    store.write(Registry(next_port_offset=2))

    with pytest.raises(RuntimeError):
        with store.transaction() as registry:
            registry.next_port_offset = 9
            raise RuntimeError("boom")

    assert store.read().next_port_offset == 2


def test_lock_is_reentrant(store, base_dir):
    """Test that nested locks on one store do not deadlock."""
    with store.lock():
        with store.transaction() as registry:
            registry.next_port_offset = 1
        assert (base_dir / "registry.lock").exists()

    assert store.read().next_port_offset == 1
    assert store._lock_file is None


def test_first_time_init_writes_under_lock(store):
    depths = []
    original_write = store.write

    def recording_write(registry):
        depths.append(store._depth)
        original_write(registry)

    store.write = recording_write

    store.read()

    assert depths == [1]


def test_first_time_init_keeps_concurrent_document(base_dir):
    """Test that a document created while waiting for the lock is not clobbered."""
    store = RegistryStore(base_dir)
    other = RegistryStore(base_dir)
    original_lock = store.lock

    @contextmanager
    def lock_after_other_create():
        with other.transaction() as registry:
            registry.instances["alpha"] = _instance("alpha", 18800)
            registry.next_port_offset = 1
        with original_lock():
            yield

    store.lock = lock_after_other_create

    registry = store.read()

    assert "alpha" in registry.instances
    assert registry.next_port_offset == 1


def test_lock_closes_handle_when_flock_fails(store, monkeypatch):
    opened = []
    real_open = open

    def recording_open(*args, **kwargs):
        handle = real_open(*args, **kwargs)
        opened.append(handle)
        return handle

    def failing_flock(fd, operation):
        raise KeyboardInterrupt

    monkeypatch.setattr("gatefleet.registry.open", recording_open, raising=False)
    monkeypatch.setattr("gatefleet.registry.fcntl.flock", failing_flock)

    with pytest.raises(KeyboardInterrupt):
        with store.lock():
            pass

    assert len(opened) == 1
    assert opened[0].closed
    assert store._lock_file is None
    assert store._depth == 0


def test_separate_stores_share_document(base_dir):
    first = RegistryStore(base_dir)
    second = RegistryStore(base_dir)

    with first.transaction() as registry:
        registry.instances["alpha"] = _instance("alpha", 18800)

    assert "alpha" in second.read().instances


def test_memory_store_returns_copies():
    """Test that mutating a read registry does not leak into the store."""
    store = MemoryRegistryStore()

    registry = store.read()
    registry.next_port_offset = 5
    registry.available_offsets.append(1)

    assert store.read() == Registry()
    assert store.writes == 0


def test_available_offsets_normalized_on_load():
    registry = Registry.from_dict(
        {"instances": {}, "nextPortOffset": 5, "availableOffsets": [3, 1, 3]}
    )
    assert registry.available_offsets == [1, 3]
