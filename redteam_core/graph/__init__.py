"""
Shadow Code Graph.

Components:
- ShadowCodeGraph: node/edge store with an explicit sealed (read-only) phase
- GraphBuilder: merges parsed documents into a graph (single writer)
- build_graph: concurrent parse, serialized merge, for batches of XML
"""
from redteam_core.graph.builder import (
    BuildResult,
    GraphBuilder,
    build_graph,
    infer_node_type,
    merge_document,
)
from redteam_core.graph.models import GraphEdge, GraphNode, NodeType
from redteam_core.graph.store import ShadowCodeGraph, create_graph

__all__ = [
    "BuildResult",
    "GraphBuilder",
    "build_graph",
    "infer_node_type",
    "merge_document",
    "GraphEdge",
    "GraphNode",
    "NodeType",
    "ShadowCodeGraph",
    "create_graph",
]
