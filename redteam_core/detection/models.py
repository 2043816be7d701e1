"""
Loophole findings.

Design Decisions:
- Pydantic BaseModel for validation and JSON serialization
- Severity is a static function of the finding type; a finding whose
  severity disagrees with SEVERITY_BY_TYPE is rejected at construction
- to_record() maps a finding onto the persistence row shape; bill_id is
  supplied by the caller and `reviewed` is left to the storage layer
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LoopholeType(str, Enum):
    CIRCULAR_DEPENDENCY = "circular_dependency"
    ORPHANED_SECTION = "orphaned_section"
    DANGLING_REFERENCE = "dangling_reference"
    AMBIGUOUS_REFERENCE = "ambiguous_reference"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


SEVERITY_BY_TYPE: Dict[LoopholeType, Severity] = {
    LoopholeType.CIRCULAR_DEPENDENCY: Severity.HIGH,
    LoopholeType.ORPHANED_SECTION: Severity.MEDIUM,
    LoopholeType.DANGLING_REFERENCE: Severity.MEDIUM,
    LoopholeType.AMBIGUOUS_REFERENCE: Severity.LOW,
}


class Finding(BaseModel):
    """
    One structural defect found in the shadow code graph.

    affected_nodes is ordered: cycle members in traversal order, or
    [source, target] for a dangling reference, etc.
    """
    model_config = ConfigDict(frozen=True)

    type: LoopholeType
    severity: Severity
    description: str = Field(..., min_length=1)
    affected_nodes: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_severity(self):
        expected = SEVERITY_BY_TYPE[self.type]
        if self.severity != expected:
            raise ValueError(
                f"{self.type.value} findings have severity {expected.value}, got {self.severity.value}"
            )
        return self

    @classmethod
    def create(cls, finding_type: LoopholeType, description: str,
               affected_nodes: Sequence[str]) -> "Finding":
        return cls(
            type=finding_type,
            severity=SEVERITY_BY_TYPE[finding_type],
            description=description,
            affected_nodes=list(affected_nodes),
        )

    def to_record(self, bill_id: Optional[str] = None) -> Dict[str, Any]:
        """Row for the loopholes table."""
        return {
            "bill_id": bill_id,
            "type": self.type.value,
            "severity": self.severity.value,
            "description": self.description,
            "affected_sections": list(self.affected_nodes),
        }
