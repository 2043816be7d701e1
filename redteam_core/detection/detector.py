"""
Loophole Detector - structural analysis of the Shadow Code Graph.

Four independent passes, always run and reported in this order:
1. Circular dependencies (high): reference chains that loop back on themselves
2. Orphaned sections (medium): provisions that cite others but are never cited
3. Dangling references (medium): edges whose target has no node
4. Ambiguous references (low): references spread over a few sibling targets

The detector only reads the graph (nodes, edges_from, all_edges). It seals
the graph before the first pass so the read-only phase is explicit. Every
pass is deterministic: running detect() twice on the same graph yields
identical lists.

Usage:
    detector = LoopholeDetector()
    findings = detector.detect(graph)
    for finding in findings:
        print(f"[{finding.severity.value}] {finding.description}")
"""
import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Set

from redteam_core.config import DEFAULT_DETECTOR_CONFIG, DetectorConfig
from redteam_core.detection.models import Finding, LoopholeType, Severity
from redteam_core.exceptions import DetectionCancelledError
from redteam_core.graph.store import ShadowCodeGraph
from redteam_core.uslm.identifiers import base_path

logger = logging.getLogger(__name__)


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise DetectionCancelledError("Circular reference detection cancelled")


class LoopholeDetector:
    """
    Run structural loophole analyses over a populated graph.

    Cycle reporting: a cycle is reported once per path that closes it, so
    parallel edges can report the same loop more than once. Set
    DetectorConfig.dedupe_cycles to keep only the first report per distinct
    node set.
    """

    def __init__(self, config: DetectorConfig = DEFAULT_DETECTOR_CONFIG):
        self.config = config

    def detect(
        self,
        graph: ShadowCodeGraph,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Finding]:
        """
        Run all four passes: circular, orphaned, dangling, ambiguous.

        Args:
            graph: Populated graph; sealed by this call
            cancel_event: Optional event checked between DFS node visits

        Returns:
            Findings in pass order (possibly empty)

        Raises:
            DetectionCancelledError: If cancel_event is set during traversal
        """
        graph.seal()

        findings: List[Finding] = []
        findings.extend(self.detect_circular_references(graph, cancel_event))
        findings.extend(self.detect_orphaned_sections(graph))
        findings.extend(self.detect_dangling_references(graph))
        findings.extend(self.detect_ambiguous_references(graph))

        logger.debug(
            f"Detected {len(findings)} findings over {graph.node_count} nodes / {graph.edge_count} edges"
        )
        return findings

    def detect_circular_references(
        self,
        graph: ShadowCodeGraph,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Finding]:
        """
        Depth-first search with a global done set and a per-branch stack.

        Reaching a node that is on the current path closes a cycle: the
        path suffix starting at that node. Nodes are marked done only after
        all their outgoing edges have been explored.
        """
        done: Set[str] = set()
        cycles: List[List[str]] = []

        for start in self._traversal_roots(graph):
            if start not in done:
                _check_cancelled(cancel_event)
                self._walk(graph, start, done, cycles, cancel_event)

        if self.config.dedupe_cycles:
            cycles = _dedupe_cycles(cycles)

        return [
            Finding.create(
                LoopholeType.CIRCULAR_DEPENDENCY,
                "Circular dependency: " + " → ".join(cycle + [cycle[0]]),
                cycle,
            )
            for cycle in cycles
        ]

    def detect_orphaned_sections(self, graph: ShadowCodeGraph) -> List[Finding]:
        """Nodes with at least one outgoing edge and no incoming edge."""
        incoming = {edge.to_id for edge in graph.all_edges()}

        findings = []
        for node in graph.nodes():
            outgoing = graph.edges_from(node.identifier)
            if outgoing and node.identifier not in incoming:
                findings.append(Finding.create(
                    LoopholeType.ORPHANED_SECTION,
                    f"Orphaned section: {node.citation} ({node.identifier}) cites "
                    f"{len(outgoing)} provision(s) but is never cited",
                    [node.identifier],
                ))
        return findings

    def detect_dangling_references(self, graph: ShadowCodeGraph) -> List[Finding]:
        """One finding per edge whose target is not a node, duplicates included."""
        return [
            Finding.create(
                LoopholeType.DANGLING_REFERENCE,
                f"Dangling reference: {edge.from_id} {edge.ref_type.value} targets "
                f"{edge.to_id}, which is not in the graph",
                [edge.from_id, edge.to_id],
            )
            for edge in graph.all_edges()
            if not graph.has_node(edge.to_id)
        ]

    def detect_ambiguous_references(self, graph: ShadowCodeGraph) -> List[Finding]:
        """
        Group edge targets by base path and flag groups with a small number
        of distinct siblings (2-4 by default). One target is unambiguous;
        five or more reads as a deliberate enumeration.
        """
        groups: Dict[str, Dict[str, None]] = {}
        for edge in graph.all_edges():
            groups.setdefault(base_path(edge.to_id), {})[edge.to_id] = None

        findings = []
        for group, targets in groups.items():
            distinct = list(targets)
            if self.config.ambiguity_min_targets <= len(distinct) <= self.config.ambiguity_max_targets:
                findings.append(Finding.create(
                    LoopholeType.AMBIGUOUS_REFERENCE,
                    f"Ambiguous reference: {len(distinct)} sibling targets under "
                    f"{group or '/'}: " + ", ".join(distinct),
                    distinct,
                ))
        return findings

    def _traversal_roots(self, graph: ShadowCodeGraph) -> List[str]:
        # Every node in insertion order, then edge sources that have no node
        roots = [node.identifier for node in graph.nodes()]
        seen = set(roots)
        for edge in graph.all_edges():
            if edge.from_id not in seen:
                seen.add(edge.from_id)
                roots.append(edge.from_id)
        return roots

    def _walk(
        self,
        graph: ShadowCodeGraph,
        start: str,
        done: Set[str],
        cycles: List[List[str]],
        cancel_event: Optional[threading.Event],
    ) -> None:
        # Iterative DFS: path/position form the on-stack set, pending holds
        # each path node's remaining outgoing edges.
        path = [start]
        position = {start: 0}
        pending = [iter(graph.edges_from(start))]

        while pending:
            edge = next(pending[-1], None)
            if edge is None:
                node = path.pop()
                del position[node]
                pending.pop()
                done.add(node)
                continue

            target = edge.to_id
            if target in position:
                cycles.append(path[position[target]:])
            elif target not in done:
                _check_cancelled(cancel_event)
                position[target] = len(path)
                path.append(target)
                pending.append(iter(graph.edges_from(target)))


def _dedupe_cycles(cycles: List[List[str]]) -> List[List[str]]:
    seen = set()
    unique = []
    for cycle in cycles:
        key = frozenset(cycle)
        if key not in seen:
            seen.add(key)
            unique.append(cycle)
    return unique


def detect_loopholes(
    graph: ShadowCodeGraph,
    config: Optional[DetectorConfig] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[Finding]:
    """Run every pass with the given (or default) configuration."""
    return LoopholeDetector(config or DEFAULT_DETECTOR_CONFIG).detect(graph, cancel_event)


def summarize_findings(findings: Iterable[Finding]) -> Dict[str, Any]:
    """Counts by type and by severity; every category is present."""
    by_type = {loophole_type.value: 0 for loophole_type in LoopholeType}
    by_severity = {severity.value: 0 for severity in Severity}
    total = 0
    for finding in findings:
        by_type[finding.type.value] += 1
        by_severity[finding.severity.value] += 1
        total += 1
    return {"total": total, "by_type": by_type, "by_severity": by_severity}
