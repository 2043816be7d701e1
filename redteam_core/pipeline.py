"""
Unified entry point: raw USLM XML in, loophole findings out.

Design Philosophy:
- No file or network I/O; callers hand in already-fetched XML
- Returns typed objects directly, plus persistence-ready records
- One malformed document never aborts the batch

Usage:
    from redteam_core import analyze_documents

    report = analyze_documents([bill_xml, usc_xml], bill_id="118-hr-1")
    for record in report.records:
        store(record)
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, Field

from redteam_core.config import DEFAULT_CONFIG, DetectorConfig
from redteam_core.detection.detector import LoopholeDetector, summarize_findings
from redteam_core.detection.models import Finding
from redteam_core.graph.builder import build_graph
from redteam_core.uslm.parser import USLMParser

logger = logging.getLogger(__name__)


class AnalysisReport(BaseModel):
    """
    Complete output of one analysis run.

    records mirrors findings in the loopholes-table row shape, carrying the
    caller's bill_id.
    """
    bill_id: Optional[str] = None
    findings: List[Finding] = Field(default_factory=list)
    summary: Dict[str, Any] = Field(default_factory=dict)
    node_count: int = 0
    edge_count: int = 0
    documents_merged: int = 0
    parse_errors: Dict[int, str] = Field(default_factory=dict)
    validation_issues: Dict[int, List[str]] = Field(default_factory=dict)
    records: List[Dict[str, Any]] = Field(default_factory=list)


def analyze_documents(
    xml_documents: Sequence[Union[str, bytes]],
    config: Optional[Dict[str, Any]] = None,
    bill_id: Optional[str] = None,
) -> AnalysisReport:
    """
    Parse, build the shadow code graph and run every loophole pass.

    Args:
        xml_documents: Raw USLM XML texts
        config: Configuration dict (see redteam_core.config.DEFAULT_CONFIG)
        bill_id: Caller's bill reference, copied into persistence records

    Returns:
        AnalysisReport
    """
    config = config or DEFAULT_CONFIG
    parser = USLMParser(
        namespace_marker=config.get("parser", {}).get(
            "uslm_namespace", DEFAULT_CONFIG["parser"]["uslm_namespace"]
        )
    )

    build = build_graph(
        xml_documents,
        parser=parser,
        max_workers=config.get("build", {}).get("max_workers"),
    )
    if build.parse_errors:
        logger.warning(f"{len(build.parse_errors)} of {len(xml_documents)} documents failed to parse")

    findings = LoopholeDetector(DetectorConfig.from_dict(config)).detect(build.graph)

    return AnalysisReport(
        bill_id=bill_id,
        findings=findings,
        summary=summarize_findings(findings),
        node_count=build.graph.node_count,
        edge_count=build.graph.edge_count,
        documents_merged=build.documents_merged,
        parse_errors=build.parse_errors,
        validation_issues=build.validation_issues,
        records=[finding.to_record(bill_id) for finding in findings],
    )
