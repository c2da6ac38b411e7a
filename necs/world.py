"""The world: owner of all node storage and the node type map."""

from __future__ import annotations

import logging
from typing import Any

from .node import Node, NodeId, _NodeBuilder, _is_node_class
from .node_map import TypeMap
from .storage import Storage

_log = logging.getLogger(__name__)


class World:
    """Storage for all nodes, their metadata, and the ways to reach them."""

    def __init__(self) -> None:
        self.node_map = TypeMap()
        self._storage = Storage()

    def register_node(self, node_type: type) -> None:
        """Prepare storage for ``node_type`` and make it retrievable as :class:`Node`."""
        self.node_map.register(node_type, Node)
        node_type._register_node(self._storage)
        _log.debug("Added %s to type map", node_type.__name__)

    def spawn_node(self, builder: Any) -> NodeId:
        """Move the fields of ``builder`` into storage and return the new node's id."""
        if not isinstance(builder, _NodeBuilder):
            raise TypeError(f"{type(builder).__name__} is not a node builder")
        return builder._move_to_storage(self._storage)

    def get_node(self, node_type: type, node_id: NodeId) -> Any:
        """Return the node behind ``node_id`` as a ``node_type``."""
        if not _is_node_class(node_type):
            raise TypeError(f"{getattr(node_type, '__name__', node_type)} is not a node type")
        return node_type._build_from_storage(self._storage, node_id)

    def get_nodes(self, node_type: type) -> list[Any]:
        """Return every stored node of ``node_type``."""
        return [
            node_type._build_from_storage(self._storage, node_id)
            for node_id in self.get_node_ids(node_type)
        ]

    def get_node_ids(self, node_type: type) -> list[NodeId]:
        """Return the ids of every stored node of ``node_type``."""
        return [
            NodeId(node_type=node_type, instance=key)
            for key in self._storage.nodes[node_type].keys()
        ]

    def get_node_resilient(self, trait: type, node_id: NodeId) -> Any:
        """Return the node behind ``node_id`` as ``trait``, without naming its type."""
        return self.node_map.get_node(trait, self._storage, node_id)