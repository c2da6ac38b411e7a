"""Slot-map based storage for nodes and external components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Hashable, Iterator, TypeVar

from .component import ComponentId

T = TypeVar("T")


@dataclass(frozen=True)
class SlotKey:
    """Versioned key into a :class:`SlotMap`."""

    index: int
    version: int


class _Slot:
    __slots__ = ("value", "version", "occupied")

    def __init__(self) -> None:
        self.value: Any = None
        self.version = 0
        self.occupied = False


class SlotMap(Generic[T]):
    """Container that hands out stable keys; keys of removed values go stale."""

    def __init__(self) -> None:
        self._slots: list[_Slot] = []
        self._free: list[int] = []
        self._len = 0

    def insert(self, value: T) -> SlotKey:
        """Store ``value`` and return the key that reaches it."""
        if self._free:
            index = self._free.pop()
            slot = self._slots[index]
        else:
            index = len(self._slots)
            slot = _Slot()
            self._slots.append(slot)
        slot.version += 1
        slot.value = value
        slot.occupied = True
        self._len += 1
        return SlotKey(index, slot.version)

    def _slot(self, key: SlotKey) -> _Slot:
        if isinstance(key, SlotKey) and 0 <= key.index < len(self._slots):
            slot = self._slots[key.index]
            if slot.occupied and slot.version == key.version:
                return slot
        raise KeyError(key)

    def remove(self, key: SlotKey) -> T:
        """Remove the value behind ``key`` and return it."""
        slot = self._slot(key)
        value = slot.value
        slot.value = None
        slot.occupied = False
        self._free.append(key.index)
        self._len -= 1
        return value

    def keys(self) -> Iterator[SlotKey]:
        for index, slot in enumerate(self._slots):
            if slot.occupied:
                yield SlotKey(index, slot.version)

    def values(self) -> Iterator[T]:
        return (slot.value for slot in self._slots if slot.occupied)

    def items(self) -> Iterator[tuple[SlotKey, T]]:
        for index, slot in enumerate(self._slots):
            if slot.occupied:
                yield SlotKey(index, slot.version), slot.value

    def __getitem__(self, key: SlotKey) -> T:
        return self._slot(key).value

    def __setitem__(self, key: SlotKey, value: T) -> None:
        self._slot(key).value = value

    def __contains__(self, key: object) -> bool:
        try:
            self._slot(key)  # type: ignore[arg-type]
        except KeyError:
            return False
        return True

    def __len__(self) -> int:
        return self._len

    def __iter__(self) -> Iterator[SlotKey]:
        return self.keys()

    def __repr__(self) -> str:
        return f"SlotMap({dict(self.items())!r})"


class ComponentStorage:
    """Components grouped by type, each type in its own slot map."""

    def __init__(self) -> None:
        self._map: dict[type, SlotMap[Any]] = {}

    def register(self, component_type: type) -> None:
        """Prepare storage for ``component_type``; registering twice is harmless."""
        self._map.setdefault(component_type, SlotMap())

    def _sub_storage(self, component_type: type) -> SlotMap[Any]:
        try:
            return self._map[component_type]
        except KeyError:
            raise KeyError(
                f"component type {component_type.__name__} should be registered first"
            ) from None

    def spawn(self, component_type: type, component: Any) -> ComponentId:
        """Store ``component`` and return its id."""
        key = self._sub_storage(component_type).insert(component)
        return ComponentId(component_type, key)

    def get_all(self, component_type: type) -> Iterator[Any]:
        """Iterate over every stored component of ``component_type``."""
        return self._sub_storage(component_type).values()

    def __getitem__(self, component_id: ComponentId) -> Any:
        return self._sub_storage(component_id.component_type)[component_id.key]

    def __setitem__(self, component_id: ComponentId, value: Any) -> None:
        self._sub_storage(component_id.component_type)[component_id.key] = value

    def __repr__(self) -> str:
        return f"ComponentStorage({self._map!r})"


class NodeStorage:
    """Node recipes grouped by node type, each type in its own slot map."""

    def __init__(self) -> None:
        self._map: dict[Hashable, SlotMap[Any]] = {}

    def register(self, node_type: Hashable) -> None:
        """Prepare storage for ``node_type``; registering twice is harmless."""
        self._map.setdefault(node_type, SlotMap())

    def spawn(self, node_type: Hashable, recipe: Any):
        """Store ``recipe`` under ``node_type`` and return the new node's id."""
        from .node import NodeId

        try:
            sub_storage = self._map[node_type]
        except KeyError:
            raise KeyError("node type should be registered first") from None
        return NodeId(node_type=node_type, instance=sub_storage.insert(recipe))

    def __getitem__(self, node_type: Hashable) -> SlotMap[Any]:
        try:
            return self._map[node_type]
        except KeyError:
            raise KeyError("node should not be retrieved after being freed") from None

    def __repr__(self) -> str:
        return f"NodeStorage({self._map!r})"


@dataclass
class Storage:
    """All node and component storage of a world."""

    nodes: NodeStorage = field(default_factory=NodeStorage)
    components: ComponentStorage = field(default_factory=ComponentStorage)