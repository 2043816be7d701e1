# Legislative Red Team Core Library
# Main entry point: from redteam_core.pipeline import analyze_documents

from .config import DetectorConfig, load_config
from .pipeline import AnalysisReport, analyze_documents

from .exceptions import (
    RedTeamError,
    MalformedInputError,
    GraphSealedError,
    DetectionCancelledError,
)

from .uslm import (
    USLMParser,
    Document,
    Element,
    ElementType,
    Reference,
    RefType,
    base_path,
    format_citation,
    parse_identifier,
)

from .graph import (
    GraphBuilder,
    GraphEdge,
    GraphNode,
    ShadowCodeGraph,
    build_graph,
)

from .detection import (
    Finding,
    LoopholeDetector,
    LoopholeType,
    Severity,
    detect_loopholes,
)

__all__ = [
    # Main entry point
    "analyze_documents",
    "AnalysisReport",
    "load_config",
    "DetectorConfig",
    # Errors
    "RedTeamError",
    "MalformedInputError",
    "GraphSealedError",
    "DetectionCancelledError",
    # Parsing
    "USLMParser",
    "Document",
    "Element",
    "ElementType",
    "Reference",
    "RefType",
    "base_path",
    "format_citation",
    "parse_identifier",
    # Graph
    "GraphBuilder",
    "GraphEdge",
    "GraphNode",
    "ShadowCodeGraph",
    "build_graph",
    # Detection
    "Finding",
    "LoopholeDetector",
    "LoopholeType",
    "Severity",
    "detect_loopholes",
]
