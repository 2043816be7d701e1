"""
Typed element tree produced by the USLM parser.

Design Decisions:
- Frozen dataclasses with tuple children: a Document owns its tree outright
  and nothing can be mutated after the parse completes
- ElementType is a closed enum in hierarchy order; classification is a total
  function over it (anything unmatched is UNKNOWN)
- References are stored twice: on the innermost enclosing Element and in the
  Document's flattened list (document order, not deduplicated)
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple


class ElementType(str, Enum):
    """USLM hierarchy levels, top to bottom, plus UNKNOWN."""
    TITLE = "title"
    SUBTITLE = "subtitle"
    CHAPTER = "chapter"
    SUBCHAPTER = "subchapter"
    PART = "part"
    SUBPART = "subpart"
    SECTION = "section"
    SUBSECTION = "subsection"
    PARAGRAPH = "paragraph"
    SUBPARAGRAPH = "subparagraph"
    CLAUSE = "clause"
    SUBCLAUSE = "subclause"
    ITEM = "item"
    SUBITEM = "subitem"
    UNKNOWN = "unknown"


# The fourteen hierarchy levels in order; classification checks them in
# exactly this order and takes the first match.
HIERARCHY: Tuple[ElementType, ...] = tuple(t for t in ElementType if t is not ElementType.UNKNOWN)


class RefType(str, Enum):
    CITATION = "citation"
    AMENDMENT = "amendment"
    REPEAL = "repeal"
    DEFINITION = "definition"


class DocType(str, Enum):
    LAW_DOC = "lawDoc"
    BILL = "bill"
    RESOLUTION = "resolution"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Reference:
    """
    Cross-reference edge found in a document.

    Attributes:
        ref_type: Classified from the target path (amendment/repeal/definition/citation)
        target: Identifier being referenced; may resolve to nothing (dangling)
        text: Display text of the reference tag, possibly empty
    """
    ref_type: RefType
    target: str
    text: str = ""


@dataclass(frozen=True)
class Element:
    """
    One structural node of a parsed document.

    `element_type` is derived from the hierarchy level instantiated by this
    element's children, not from `tag` (the element's own local name).
    """
    element_type: ElementType
    identifier: str = ""
    tag: str = ""
    number: Optional[str] = None
    heading: Optional[str] = None
    content: Optional[str] = None
    children: Tuple["Element", ...] = ()
    refs: Tuple[Reference, ...] = ()

    def iter_elements(self) -> Iterator["Element"]:
        """Pre-order traversal of this element and its descendants."""
        stack = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))


@dataclass(frozen=True)
class Document:
    """Result of parsing one USLM document."""
    doc_type: DocType
    identifier: str
    root: Element
    references: Tuple[Reference, ...] = field(default_factory=tuple)

    def iter_elements(self) -> Iterator[Element]:
        return self.root.iter_elements()


def empty_element() -> Element:
    """Placeholder root used when no lawDoc/bill/resolution is present."""
    return Element(element_type=ElementType.UNKNOWN)
