"""
Pytest fixtures and configuration.

- XML fixtures are small but realistic USLM documents
- Graph fixtures are built by hand so detector tests do not depend on parsing
- Each test should be independent and fast
"""
import pytest

from redteam_core.graph.models import GraphEdge, GraphNode, NodeType
from redteam_core.graph.store import ShadowCodeGraph
from redteam_core.uslm.models import RefType
from redteam_core.uslm.parser import USLMParser


# =============================================================================
# USLM XML FIXTURES
# =============================================================================

@pytest.fixture
def minimal_bill_xml() -> str:
    """Smallest useful bill: one section, one citation, no namespace."""
    return (
        '<bill identifier="/us/bill/118/hr/1">'
        '<section identifier="/us/bill/118/hr/1/s1">'
        '<ref href="/us/usc/t42/s1983">42 U.S.C. 1983</ref>'
        '</section>'
        '</bill>'
    )


@pytest.fixture
def amending_bill_xml() -> str:
    """Namespaced bill with nested levels and every reference type."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<bill xmlns="http://xml.house.gov/schemas/uslm/1.0"
      xmlns:dc="http://purl.org/dc/elements/1.1/"
      identifier="/us/bill/118/hr/2">
  <meta><dc:title>Test Act</dc:title></meta>
  <main>
    <section identifier="/us/bill/118/hr/2/s1">
      <num>SECTION 1.</num>
      <heading>Short title.</heading>
      <content>This Act may be cited as the
        Test Act.</content>
    </section>
    <section identifier="/us/bill/118/hr/2/s2">
      <num>SEC. 2.</num>
      <heading>Amendments.</heading>
      <subsection identifier="/us/bill/118/hr/2/s2/a">
        <num>(a)</num>
        <content>Section 1983 of title 42 (<ref href="/us/usc/t42/s1983">42 U.S.C. 1983</ref>)
          is amended as provided in <ref href="/us/usc/t42/amend/s1983">this subsection</ref>.</content>
        <paragraph identifier="/us/bill/118/hr/2/s2/a/1">
          <num>(1)</num>
          <content>The term has the meaning given in <ref href="/us/usc/t26/def/s45">section 45</ref>.</content>
        </paragraph>
      </subsection>
      <subsection identifier="/us/bill/118/hr/2/s2/b">
        <num>(b)</num>
        <!-- repealer -->
        <content>Section 7401 is repealed (<ref href="/us/usc/t42/repeal/s7401">42 U.S.C. 7401</ref>).</content>
      </subsection>
    </section>
  </main>
</bill>
"""


@pytest.fixture
def usc_section_xml() -> str:
    """Codified section that cites back to H.R. 1."""
    return (
        '<lawDoc xmlns="http://xml.house.gov/schemas/uslm/1.0" identifier="/us/usc/t42/s1983">'
        '<section identifier="/us/usc/t42/s1983">'
        '<num>§ 1983.</num>'
        '<heading>Civil action for deprivation of rights</heading>'
        '<content>As added by <ref href="/us/bill/118/hr/1">H.R. 1</ref>.</content>'
        '</section>'
        '</lawDoc>'
    )


@pytest.fixture
def malformed_xml() -> str:
    return '<bill identifier="/us/bill/118/hr/9"><section></bill>'


@pytest.fixture
def parser() -> USLMParser:
    return USLMParser()


# =============================================================================
# GRAPH FIXTURES
# =============================================================================

def make_node(identifier: str, node_type: NodeType = NodeType.SECTION) -> GraphNode:
    return GraphNode(identifier=identifier, citation=identifier, node_type=node_type)


def make_edge(from_id: str, to_id: str, ref_type: RefType = RefType.CITATION) -> GraphEdge:
    return GraphEdge(from_id=from_id, to_id=to_id, ref_type=ref_type)


def build_test_graph(node_ids, edges) -> ShadowCodeGraph:
    """Graph with the given nodes and (from, to) edges, unsealed."""
    graph = ShadowCodeGraph()
    for identifier in node_ids:
        graph.add_node(make_node(identifier))
    for from_id, to_id in edges:
        graph.add_edge(make_edge(from_id, to_id))
    return graph


@pytest.fixture
def graph_factory():
    """Factory fixture: graph_factory(node_ids, [(from, to), ...])."""
    return build_test_graph


@pytest.fixture
def graph_cycle_docs() -> list:
    """Two sections citing each other, one of them twice."""
    return [
        '<lawDoc identifier="/us/usc/t5/s1"><section>'
        '<ref href="/us/usc/t5/s2"/></section></lawDoc>',
        '<lawDoc identifier="/us/usc/t5/s2"><section>'
        '<ref href="/us/usc/t5/s1"/><ref href="/us/usc/t5/s1"/></section></lawDoc>',
    ]
