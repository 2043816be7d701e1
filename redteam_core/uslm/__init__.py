"""
USLM (United States Legislative Markup) parsing.

Components:
- USLMParser: XML -> Document (typed element tree + flattened references)
- identifiers: path parsing, base paths, level segments and citation formatting
"""
from redteam_core.uslm.identifiers import (
    base_path,
    format_citation,
    join_identifier,
    level_segment,
    parse_identifier,
)
from redteam_core.uslm.models import (
    HIERARCHY,
    DocType,
    Document,
    Element,
    ElementType,
    Reference,
    RefType,
)
from redteam_core.uslm.parser import (
    USLMParser,
    ValidationResult,
    classify_reference,
    create_parser,
)

__all__ = [
    "USLMParser",
    "ValidationResult",
    "classify_reference",
    "create_parser",
    "HIERARCHY",
    "DocType",
    "Document",
    "Element",
    "ElementType",
    "Reference",
    "RefType",
    "base_path",
    "format_citation",
    "join_identifier",
    "level_segment",
    "parse_identifier",
]
