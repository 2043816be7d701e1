"""
Graph Builder - merges parsed USLM documents into a Shadow Code Graph.

Each document contributes one node (its root) and one edge per reference.
Every edge is attributed to the document identifier, not to the nested
element that contains the reference.

Concurrency model for batches:
- Parsing is independent per document and runs on a thread pool
- Merging is serialized on the calling thread in input order, so the graph
  only ever has one writer
- The graph is sealed once every document has been merged
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from redteam_core.exceptions import MalformedInputError
from redteam_core.graph.models import GraphEdge, GraphNode, NodeType
from redteam_core.graph.store import ShadowCodeGraph
from redteam_core.uslm.identifiers import format_citation
from redteam_core.uslm.models import Document, ElementType
from redteam_core.uslm.parser import USLMParser

logger = logging.getLogger(__name__)

_NODE_TYPES = {node_type.value: node_type for node_type in NodeType}


def infer_node_type(element_type: ElementType) -> NodeType:
    """Map an element type onto the six node categories; SECTION otherwise."""
    return _NODE_TYPES.get(element_type.value, NodeType.SECTION)


class GraphBuilder:
    """
    Single writer for one ShadowCodeGraph.

    Usage:
        builder = GraphBuilder(graph)
        builder.merge_document(parser.parse(xml_text))
        graph.seal()
    """

    def __init__(self, graph: ShadowCodeGraph):
        self.graph = graph

    def merge_document(self, document: Document) -> None:
        """
        Add the document root as a node and every reference as an edge.

        A document without an identifier is still merged under the empty
        identifier so its references (and any dangling targets) survive.
        """
        if not document.identifier:
            logger.warning(
                f"{document.doc_type.value} document has no identifier; "
                f"merging {len(document.references)} references under ''"
            )

        self.graph.add_node(GraphNode(
            identifier=document.identifier,
            citation=format_citation(document.identifier),
            node_type=infer_node_type(document.root.element_type),
        ))

        for reference in document.references:
            self.graph.add_edge(GraphEdge(
                from_id=document.identifier,
                to_id=reference.target,
                ref_type=reference.ref_type,
                context=reference.text or None,
            ))

        logger.debug(f"Merged {document.identifier} with {len(document.references)} edges")


def merge_document(graph: ShadowCodeGraph, document: Document) -> None:
    """Merge one parsed document into graph."""
    GraphBuilder(graph).merge_document(document)


@dataclass
class BuildResult:
    """
    Outcome of build_graph().

    Attributes:
        graph: Sealed graph holding every document that parsed
        parse_errors: Input index -> MalformedInputError message
        validation_issues: Input index -> structural issues (non-fatal)
        documents_merged: Count of documents merged into the graph
    """
    graph: ShadowCodeGraph
    parse_errors: Dict[int, str] = field(default_factory=dict)
    validation_issues: Dict[int, List[str]] = field(default_factory=dict)
    documents_merged: int = 0


_ParseOutcome = Tuple[Optional[Document], Optional[str], List[str]]


def _parse_one(parser: USLMParser, xml_content: Union[str, bytes]) -> _ParseOutcome:
    try:
        document, validation = parser.parse_checked(xml_content)
    except MalformedInputError as e:
        return None, str(e), []
    return document, None, validation.errors


def build_graph(
    xml_documents: Sequence[Union[str, bytes]],
    parser: Optional[USLMParser] = None,
    max_workers: Optional[int] = None,
    graph: Optional[ShadowCodeGraph] = None,
) -> BuildResult:
    """
    Parse documents concurrently and merge them serially into one graph.

    A document that fails to parse is recorded in parse_errors and skipped;
    it never aborts the batch.

    Args:
        xml_documents: Raw USLM XML texts
        parser: Parser to use (default: USLMParser())
        max_workers: Thread pool size (default: executor default)
        graph: Existing unsealed graph to extend (default: new graph)

    Returns:
        BuildResult with the sealed graph
    """
    parser = parser or USLMParser()
    graph = graph if graph is not None else ShadowCodeGraph()
    builder = GraphBuilder(graph)
    result = BuildResult(graph=graph)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        outcomes = executor.map(lambda xml: _parse_one(parser, xml), xml_documents)

        # executor.map yields in input order; this loop is the only writer
        for index, (document, error, issues) in enumerate(outcomes):
            if error is not None:
                logger.warning(f"Document {index} could not be parsed: {error}")
                result.parse_errors[index] = error
                continue
            if issues:
                result.validation_issues[index] = issues
            builder.merge_document(document)
            result.documents_merged += 1

    graph.seal()
    return result
