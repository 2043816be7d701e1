"""
Shadow Code Graph - in-memory store of USLM identifiers and cross-references.

Lifecycle:
- Build phase: a single writer adds nodes and edges
- seal(): explicit, one-way transition to the read-only phase
- Read phase: any number of readers may query concurrently; nothing mutates

Nodes are last-write-wins by identifier. Edges are an ordered list; nothing
is ever removed.
"""
import logging
from typing import Any, Dict, List, Optional

from redteam_core.exceptions import GraphSealedError
from redteam_core.graph.models import GraphEdge, GraphNode

logger = logging.getLogger(__name__)


class ShadowCodeGraph:
    """
    Node-id keyed mapping plus an ordered edge list.

    edges_from() is served from an outgoing index maintained on insert;
    edges_to() is derived by scanning the edge list.
    """

    def __init__(self):
        self._nodes: Dict[str, GraphNode] = {}
        self._edges: List[GraphEdge] = []
        self._outgoing: Dict[str, List[GraphEdge]] = {}
        self._sealed = False

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """Enter the read-only phase. Idempotent."""
        if not self._sealed:
            self._sealed = True
            logger.debug(f"Graph sealed with {len(self._nodes)} nodes and {len(self._edges)} edges")

    def _ensure_writable(self) -> None:
        if self._sealed:
            raise GraphSealedError("Graph is sealed; the build phase has ended")

    def add_node(self, node: GraphNode) -> None:
        """Add a node, replacing any existing node with the same identifier."""
        self._ensure_writable()
        self._nodes[node.identifier] = node

    def add_edge(self, edge: GraphEdge) -> None:
        self._ensure_writable()
        self._edges.append(edge)
        self._outgoing.setdefault(edge.from_id, []).append(edge)

    def get_node(self, identifier: str) -> Optional[GraphNode]:
        return self._nodes.get(identifier)

    def has_node(self, identifier: str) -> bool:
        return identifier in self._nodes

    def nodes(self) -> List[GraphNode]:
        """All nodes in insertion order of their identifiers."""
        return list(self._nodes.values())

    def edges_from(self, identifier: str) -> List[GraphEdge]:
        return list(self._outgoing.get(identifier, ()))

    def edges_to(self, identifier: str) -> List[GraphEdge]:
        return [edge for edge in self._edges if edge.to_id == identifier]

    def all_edges(self) -> List[GraphEdge]:
        return list(self._edges)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable snapshot for reporting and visualization."""
        return {
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "edges": [edge.to_dict() for edge in self._edges],
        }


def create_graph() -> ShadowCodeGraph:
    """Create a new, empty Shadow Code Graph."""
    return ShadowCodeGraph()
