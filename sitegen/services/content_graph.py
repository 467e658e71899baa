"""In-memory content graph: node collections keyed by type name."""

import logging

from sitegen.models.node import ContentNode

logger = logging.getLogger(__name__)


class ContentGraphError(Exception):
    """Base error for content graph operations."""


class DuplicateNodeError(ContentGraphError):
    """Raised when a node id is added twice to the same collection."""


class NodeNotFoundError(ContentGraphError, LookupError):
    """Raised when a node id is not in the collection."""

    def __init__(self, type_name: str, node_id: str) -> None:
        super().__init__(f"No {type_name} node with id {node_id!r}")
        self.type_name = type_name
        self.node_id = node_id


class Collection:
    """Nodes of one type, in insertion order, indexed by id."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        self._nodes: dict[str, ContentNode] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def data(self) -> list[ContentNode]:
        return list(self._nodes.values())

    def get_node_by_id(self, node_id: str) -> ContentNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(self.type_name, node_id)
        return node

    def add_node(self, node: ContentNode) -> ContentNode:
        if node.id in self._nodes:
            raise DuplicateNodeError(
                f"Duplicate {self.type_name} id {node.id!r} "
                f"(from {node.internal.origin or 'unknown origin'})"
            )
        self._nodes[node.id] = node
        return node

    def replace_node(self, node: ContentNode) -> ContentNode:
        if node.id not in self._nodes:
            raise NodeNotFoundError(self.type_name, node.id)
        self._nodes[node.id] = node
        return node


class ContentGraph:
    """All collections of a site build.

    The graph is the single owner of materialized nodes once the per-node
    pass is done; later passes write back through ``replace_node``.
    """

    def __init__(self) -> None:
        self._collections: dict[str, Collection] = {}

    def get_collection(self, type_name: str) -> Collection:
        """Return the collection for *type_name*, creating it if needed."""
        collection = self._collections.get(type_name)
        if collection is None:
            collection = Collection(type_name)
            self._collections[type_name] = collection
        return collection

    def add_node(self, node: ContentNode) -> ContentNode:
        added = self.get_collection(node.internal.type_name).add_node(node)
        logger.debug("Added %s node %s", node.internal.type_name, node.id)
        return added

    def replace_node(self, node: ContentNode) -> ContentNode:
        return self.get_collection(node.internal.type_name).replace_node(node)
