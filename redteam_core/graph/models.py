"""
Shadow code graph data model.

Nodes are keyed by USLM identifier; edges refer to identifiers, never to
node objects, so an edge whose target has no node (a dangling reference)
is an ordinary, representable state.
"""
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

from redteam_core.uslm.models import RefType


class NodeType(str, Enum):
    TITLE = "title"
    SUBTITLE = "subtitle"
    CHAPTER = "chapter"
    SUBCHAPTER = "subchapter"
    PART = "part"
    SECTION = "section"


@dataclass(frozen=True)
class GraphNode:
    """
    Attributes:
        identifier: Unique key (e.g., "/us/usc/t42/s1983")
        citation: Human-readable form (e.g., "42 U.S.C. § 1983")
        node_type: Coarse structural category
    """
    identifier: str
    citation: str
    node_type: NodeType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "citation": self.citation,
            "node_type": self.node_type.value,
        }


@dataclass(frozen=True)
class GraphEdge:
    """One citation occurrence; parallel edges are kept, not collapsed."""
    from_id: str
    to_id: str
    ref_type: RefType
    context: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["ref_type"] = self.ref_type.value
        return data
