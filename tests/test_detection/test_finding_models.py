"""
Tests for Finding model.

Severity is a static mapping from finding type; records map directly onto
the loopholes table row.
"""
import pytest
from pydantic import ValidationError

from redteam_core.detection.models import SEVERITY_BY_TYPE, Finding, LoopholeType, Severity


def test_create_applies_static_severity():
    for loophole_type, severity in SEVERITY_BY_TYPE.items():
        finding = Finding.create(loophole_type, "description", ["/a"])
        assert finding.severity == severity


def test_mismatched_severity_rejected():
    with pytest.raises(ValidationError):
        Finding(
            type=LoopholeType.CIRCULAR_DEPENDENCY,
            severity=Severity.LOW,
            description="Circular dependency: /a → /a",
            affected_nodes=["/a"],
        )


def test_empty_description_rejected():
    with pytest.raises(ValidationError):
        Finding.create(LoopholeType.ORPHANED_SECTION, "", ["/a"])


def test_to_record():
    finding = Finding.create(
        LoopholeType.DANGLING_REFERENCE,
        "Dangling reference: /x citation targets /y, which is not in the graph",
        ["/x", "/y"],
    )

    record = finding.to_record(bill_id="118-hr-1")

    assert record == {
        "bill_id": "118-hr-1",
        "type": "dangling_reference",
        "severity": "medium",
        "description": finding.description,
        "affected_sections": ["/x", "/y"],
    }
    assert "reviewed" not in record


def test_to_record_bill_id_optional():
    finding = Finding.create(LoopholeType.AMBIGUOUS_REFERENCE, "Ambiguous", ["/g/a", "/g/b"])
    assert finding.to_record()["bill_id"] is None


def test_json_serialization():
    finding = Finding.create(LoopholeType.ORPHANED_SECTION, "Orphaned", ["/d"])
    dumped = finding.model_dump(mode="json")
    assert dumped["type"] == "orphaned_section"
    assert dumped["severity"] == "medium"
