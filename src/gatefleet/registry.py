"""Registry store - durable JSON catalogue of instances and port offsets.

The whole document is loaded on every read and rewritten on every write.
Read-modify-write cycles go through ``transaction()``, which holds an
advisory ``flock`` on a sidecar lock file so that two ``gatefleet``
processes cannot interleave their updates. Writes land in a temp file that
is then renamed over the document.
"""

import fcntl
import json
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

from .config import INSTANCES_DIR_NAME, LOCK_FILE_NAME, REGISTRY_FILE_NAME, get_base_dir
from .console import debug
from .errors import RegistryCorruptError
from .models import Registry


class BaseRegistryStore:
    """Shared locking and transaction logic for registry stores."""

    def __init__(self) -> None:
        self._thread_lock = threading.RLock()

    def read(self) -> Registry:
        raise NotImplementedError

    def write(self, registry: Registry) -> None:
        raise NotImplementedError

    @contextmanager
    def lock(self) -> Iterator[None]:
        """Serialize registry mutations. Reentrant for the same store."""
        with self._thread_lock:
            yield

    @contextmanager
    def transaction(self) -> Iterator[Registry]:
        """Load the registry, yield it for mutation, then persist it.

        Nothing is written if the block raises.
        """
        with self.lock():
            registry = self.read()
            yield registry
            self.write(registry)


class RegistryStore(BaseRegistryStore):
    """File-backed registry stored as ``registry.json`` in the base directory."""

    def __init__(self, base_dir: Path | None = None) -> None:
        """Initialize the store.

        Args:
            base_dir: Installation base directory. If None, uses default location.
        """
        super().__init__()
        self.base_dir = base_dir if base_dir is not None else get_base_dir()
        self.path = self.base_dir / REGISTRY_FILE_NAME
        self.lock_path = self.base_dir / LOCK_FILE_NAME
        self._depth = 0
        self._lock_file: IO[str] | None = None

    @property
    def instances_dir(self) -> Path:
        return self.base_dir / INSTANCES_DIR_NAME

    def _init_registry(self) -> None:
        """Create the base directory and an empty document if absent."""
        self.base_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
        self.instances_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
        if self.path.exists():
            return
        with self.lock():
            # Another process may have created it while we waited
            if not self.path.exists():
                debug(f"Initializing empty registry at {self.path}")
                self.write(Registry())

    def read(self) -> Registry:
        """Read the registry document.

        Returns:
            The parsed registry (an empty one is created on first access)

        Raises:
            RegistryCorruptError: If the document cannot be parsed
        """
        self._init_registry()
        try:
            data: Any = json.loads(self.path.read_text(encoding="utf-8"))
            return Registry.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise RegistryCorruptError(
                f"Registry file {self.path} is corrupt ({e}). "
                "Fix or remove it manually."
            ) from e

    def write(self, registry: Registry) -> None:
        """Atomically replace the registry document.

        Args:
            registry: Registry to persist
        """
        self.base_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
        fd, tmp_name = tempfile.mkstemp(dir=str(self.base_dir), prefix=f".{self.path.name}.")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(registry.to_dict(), handle, indent=2)
                handle.write("\n")
            os.replace(tmp_path, self.path)
        finally:
            tmp_path.unlink(missing_ok=True)

    @contextmanager
    def lock(self) -> Iterator[None]:
        """Hold an exclusive advisory lock on the registry.

        Nested calls on the same store only take the file lock once.
        """
        with self._thread_lock:
            if self._depth == 0:
                self.base_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
                handle = open(self.lock_path, "a+", encoding="utf-8")
                try:
                    fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
                except BaseException:
                    handle.close()
                    raise
                self._lock_file = handle
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0 and self._lock_file is not None:
                    fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_UN)
                    self._lock_file.close()
                    self._lock_file = None


class MemoryRegistryStore(BaseRegistryStore):
    """In-memory registry store, for tests and embedding."""

    def __init__(self, registry: Registry | None = None) -> None:
        super().__init__()
        self._data: dict[str, Any] = (registry or Registry()).to_dict()
        self.writes = 0

    def read(self) -> Registry:
        return Registry.from_dict(json.loads(json.dumps(self._data)))

    def write(self, registry: Registry) -> None:
        self._data = registry.to_dict()
        self.writes += 1
