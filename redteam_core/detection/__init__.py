"""
Loophole detection over the Shadow Code Graph.

Components:
- LoopholeDetector: circular, orphaned, dangling and ambiguous passes
- Finding: pydantic model with a static type -> severity mapping
"""
from redteam_core.detection.detector import (
    LoopholeDetector,
    detect_loopholes,
    summarize_findings,
)
from redteam_core.detection.models import (
    SEVERITY_BY_TYPE,
    Finding,
    LoopholeType,
    Severity,
)

__all__ = [
    "LoopholeDetector",
    "detect_loopholes",
    "summarize_findings",
    "SEVERITY_BY_TYPE",
    "Finding",
    "LoopholeType",
    "Severity",
]
