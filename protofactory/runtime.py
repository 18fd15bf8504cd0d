"""Runtime message id registry used by generated Python factories."""

import threading
from collections.abc import Callable
from typing import Any

MAX_MESSAGE_ID = 0xFFFF


class RegistryError(RuntimeError):
    """Raised when registry operations fail."""


def _descriptor_of(message_type: Any) -> Any:
    try:
        return message_type.DESCRIPTOR
    except AttributeError:
        raise RegistryError(f"{message_type!r} has no DESCRIPTOR") from None


def _check_id(message_id: int) -> None:
    if not isinstance(message_id, int) or isinstance(message_id, bool):
        raise RegistryError(f"Message id must be an int, not {message_id!r}")
    if not 0 <= message_id <= MAX_MESSAGE_ID:
        raise RegistryError(f"Message id {message_id:#x} does not fit in 16 bits")


class _Tables:
    """The name->id and id->descriptor lookup tables."""

    def __init__(self) -> None:
        self.name_ids: dict[str, int] = {}
        self.id_descriptors: dict[int, Any] = {}

    def add(self, message_type: Any, message_id: int) -> None:
        # First registration of a key wins.
        descriptor = _descriptor_of(message_type)
        self.name_ids.setdefault(descriptor.full_name, message_id)
        self.id_descriptors.setdefault(message_id, descriptor)


class Registry:
    """Process-wide registry mapping message ids to protobuf descriptors.

    A registry is populated once by an initializer (the generated
    `init_descriptors` function) and is read-only afterwards, so lookups from
    any thread see the same tables without locking.

    Example:
        registry = Registry.build(init_descriptors)
        registry.get_id(MyMessage.DESCRIPTOR)  # -> 0x0001
        registry.get_descriptor(0x0001)  # -> MyMessage.DESCRIPTOR
    """

    def __init__(self) -> None:
        self._tables = _Tables()
        self._lock = threading.Lock()
        self._init_lock = threading.Lock()
        self._sealed = False

    @classmethod
    def build(cls, initializer: Callable[["Registry"], None]) -> "Registry":
        """Create a registry, populate it and seal it against changes."""
        registry = cls()
        registry.initialize(initializer)
        return registry

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __len__(self) -> int:
        return len(self._tables.id_descriptors)

    def register(self, message_type: Any, message_id: int) -> None:
        """Register `message_type` under `message_id`.

        Existing entries are kept: registering the same name or id twice is a
        no-op for that key.
        """
        _check_id(message_id)
        with self._lock:
            if self._sealed:
                raise RegistryError("Registry is sealed")
            self._tables.add(message_type, message_id)

    def initialize(self, initializer: Callable[["Registry"], None]) -> None:
        """Run `initializer` once and seal the registry.

        Only the first caller runs its initializer; later calls return once
        it has finished.
        """
        with self._init_lock:
            if self._sealed:
                return
            initializer(self)
            with self._lock:
                self._sealed = True

    def get_id(self, descriptor: Any) -> int | None:
        """Look up the id registered for a message descriptor."""
        return self._tables.name_ids.get(descriptor.full_name)

    def get_descriptor(self, message_id: int) -> Any | None:
        """Look up the descriptor registered for a message id."""
        return self._tables.id_descriptors.get(message_id)


class ThreadLocalRegistry:
    """Registry whose tables are private to each thread.

    Every thread gets empty tables and fills them by running the initializer
    on its first lookup. Registrations made on one thread are not visible on
    any other.
    """

    def __init__(self, initializer: Callable[["ThreadLocalRegistry"], None]) -> None:
        self._initializer = initializer
        self._local = threading.local()

    @property
    def _tables(self) -> _Tables:
        tables = getattr(self._local, "tables", None)
        if tables is None:
            tables = self._local.tables = _Tables()
        return tables

    def register(self, message_type: Any, message_id: int) -> None:
        _check_id(message_id)
        self._tables.add(message_type, message_id)

    def get_id(self, descriptor: Any) -> int | None:
        tables = self._tables
        if not tables.name_ids:
            self._initializer(self)
        return tables.name_ids.get(descriptor.full_name)

    def get_descriptor(self, message_id: int) -> Any | None:
        tables = self._tables
        if not tables.id_descriptors:
            self._initializer(self)
        return tables.id_descriptors.get(message_id)
