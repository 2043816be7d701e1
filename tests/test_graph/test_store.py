"""
Shadow Code Graph store tests.

Validates:
- Last-write-wins nodes keyed by identifier
- Parallel edges preserved in order
- edges_from / edges_to queries
- Sealed (read-only) phase
"""
import pytest

from redteam_core.exceptions import GraphSealedError
from redteam_core.graph.models import GraphEdge, GraphNode, NodeType
from redteam_core.graph.store import ShadowCodeGraph, create_graph
from redteam_core.uslm.models import RefType


def test_readding_node_overwrites():
    """Same identifier twice: last write wins, no merge, no error."""
    graph = create_graph()
    graph.add_node(GraphNode("/us/usc/t42", "Title 42, U.S.C.", NodeType.TITLE))
    graph.add_node(GraphNode("/us/usc/t42", "42 U.S.C.", NodeType.CHAPTER))

    assert graph.node_count == 1
    assert graph.get_node("/us/usc/t42").node_type == NodeType.CHAPTER


def test_parallel_edges_preserved(graph_factory):
    graph = graph_factory(["/a"], [("/a", "/b"), ("/a", "/b"), ("/a", "/c")])

    assert graph.edge_count == 3
    assert [e.to_id for e in graph.edges_from("/a")] == ["/b", "/b", "/c"]
    assert len(graph.edges_to("/b")) == 2
    assert graph.edges_to("/a") == []


def test_edges_may_target_unknown_nodes(graph_factory):
    graph = graph_factory(["/a"], [("/a", "/missing")])

    assert graph.get_node("/missing") is None
    assert not graph.has_node("/missing")
    assert graph.edges_to("/missing")[0].from_id == "/a"


def test_nodes_in_insertion_order(graph_factory):
    graph = graph_factory(["/c", "/a", "/b"], [])
    assert [n.identifier for n in graph.nodes()] == ["/c", "/a", "/b"]


def test_query_results_are_copies(graph_factory):
    graph = graph_factory(["/a"], [("/a", "/b")])
    graph.all_edges().clear()
    graph.edges_from("/a").clear()

    assert graph.edge_count == 1
    assert len(graph.edges_from("/a")) == 1


def test_seal_blocks_mutation(graph_factory):
    graph = graph_factory(["/a"], [("/a", "/b")])
    graph.seal()
    graph.seal()  # idempotent

    assert graph.is_sealed
    with pytest.raises(GraphSealedError):
        graph.add_node(GraphNode("/b", "/b", NodeType.SECTION))
    with pytest.raises(GraphSealedError):
        graph.add_edge(GraphEdge("/b", "/a", RefType.CITATION))
    assert graph.edge_count == 1


def test_to_dict_snapshot():
    graph = ShadowCodeGraph()
    graph.add_node(GraphNode("/us/usc/t42/s1983", "42 U.S.C. § 1983", NodeType.SECTION))
    graph.add_edge(GraphEdge("/us/usc/t42/s1983", "/us/usc/t42/s1981", RefType.DEFINITION, "see"))

    assert graph.to_dict() == {
        "nodes": [{
            "identifier": "/us/usc/t42/s1983",
            "citation": "42 U.S.C. § 1983",
            "node_type": "section",
        }],
        "edges": [{
            "from_id": "/us/usc/t42/s1983",
            "to_id": "/us/usc/t42/s1981",
            "ref_type": "definition",
            "context": "see",
        }],
    }
