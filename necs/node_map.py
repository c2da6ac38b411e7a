"""Lookup from (trait, node type) to factories that build nodes as that trait."""

from __future__ import annotations

from typing import Any, Callable, Hashable

from .node import NodeId, _is_node_class
from .storage import Storage

_Factory = Callable[[Storage, NodeId], Any]


def _name(obj: Any) -> str:
    return getattr(obj, "__name__", repr(obj))


class TypeMap:
    """Lets nodes be retrieved as any registered trait without knowing their type."""

    def __init__(self) -> None:
        self._map: dict[type, dict[Hashable, _Factory]] = {}

    def register(
        self,
        node_type: type,
        trait: type,
        to_trait_obj: Callable[[Any], Any] | None = None,
    ) -> None:
        """Make ``node_type`` retrievable as ``trait`` through ``to_trait_obj``.

        Without ``to_trait_obj`` the node itself is handed out.
        """
        if not _is_node_class(node_type):
            raise TypeError(f"{_name(node_type)} is not a node type")
        convert = to_trait_obj if to_trait_obj is not None else (lambda built: built)

        def factory(storage: Storage, node_id: NodeId) -> Any:
            return convert(node_type._build_from_storage(storage, node_id))

        self._map.setdefault(trait, {})[node_type] = factory

    def get_node(self, trait: type, storage: Storage, node_id: NodeId) -> Any:
        """Build the node behind ``node_id`` as ``trait``."""
        try:
            factories = self._map[trait]
        except KeyError:
            raise KeyError(f"trait {_name(trait)} not registered") from None
        try:
            factory = factories[node_id.node_type]
        except KeyError:
            raise KeyError(
                f"type {_name(node_id.node_type)} not registered for Trait {_name(trait)}"
            ) from None
        trait_obj = factory(storage, node_id)
        if not isinstance(trait_obj, trait):
            raise TypeError("Failed to downcast node to expected trait object")
        return trait_obj