"""
End-to-end tests: raw XML -> shadow code graph -> findings -> records.
"""
from redteam_core import analyze_documents
from redteam_core.config import DEFAULT_CONFIG
from redteam_core.detection.models import LoopholeType


def test_bill_and_code_section_form_cycle(minimal_bill_xml, usc_section_xml, malformed_xml):
    report = analyze_documents(
        [minimal_bill_xml, usc_section_xml, malformed_xml],
        bill_id="118-hr-1",
    )

    assert report.node_count == 2
    assert report.edge_count == 2
    assert report.documents_merged == 2
    assert list(report.parse_errors) == [2]
    assert [f.type for f in report.findings] == [LoopholeType.CIRCULAR_DEPENDENCY]
    assert report.findings[0].affected_nodes == ["/us/bill/118/hr/1", "/us/usc/t42/s1983"]
    assert report.summary["total"] == 1
    assert report.records[0]["bill_id"] == "118-hr-1"
    assert report.records[0]["severity"] == "high"


def test_amending_bill_reports_dangling_targets(amending_bill_xml):
    report = analyze_documents([amending_bill_xml])

    dangling = [f for f in report.findings if f.type == LoopholeType.DANGLING_REFERENCE]
    orphans = [f for f in report.findings if f.type == LoopholeType.ORPHANED_SECTION]

    assert len(dangling) == 4
    assert [f.affected_nodes for f in orphans] == [["/us/bill/118/hr/2"]]
    assert report.validation_issues == {}


def test_config_controls_detection(graph_cycle_docs):
    config = {**DEFAULT_CONFIG, "detector": {**DEFAULT_CONFIG["detector"], "dedupe_cycles": True}}

    plain = analyze_documents(graph_cycle_docs)
    deduped = analyze_documents(graph_cycle_docs, config=config)

    assert plain.summary["by_type"]["circular_dependency"] == 2
    assert deduped.summary["by_type"]["circular_dependency"] == 1


def test_no_documents():
    report = analyze_documents([])

    assert report.findings == []
    assert report.node_count == 0
    assert report.summary["total"] == 0


def test_document_without_identifier_still_reports_dangling_target():
    report = analyze_documents(['<bill><section><ref href="/us/usc/t99/s404"/></section></bill>'])

    dangling = [f for f in report.findings if f.type == LoopholeType.DANGLING_REFERENCE]

    assert report.documents_merged == 1
    assert report.edge_count == 1
    assert [f.affected_nodes for f in dangling] == [["", "/us/usc/t99/s404"]]
