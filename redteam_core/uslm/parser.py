"""
USLM Parser - turns United States Legislative Markup XML into a typed tree.

Parses bills, resolutions and codified law (lawDoc) conforming to USLM and
extracts every <ref href="..."> as a cross-reference edge.

USLM hierarchy (top to bottom):
    title, subtitle, chapter, subchapter, part, subpart, section,
    subsection, paragraph, subparagraph, clause, subclause, item, subitem

Design rationale:
- lxml does the tokenizing; namespace prefixes are stripped so tag names
  compare directly against the hierarchy
- Only untokenizable input raises (MalformedInputError); a missing root or
  namespace is a recoverable condition reported by validate()
- References are collected in document order into a single flat list that
  the graph builder consumes unchanged

Usage:
    parser = USLMParser()
    document = parser.parse(xml_text)
    for ref in document.references:
        print(f"{ref.ref_type.value}: {ref.target}")
"""
import logging
import re
from typing import Dict, List, Optional, Tuple, Union

from lxml import etree
from pydantic import BaseModel, Field, computed_field

from redteam_core.exceptions import MalformedInputError
from redteam_core.uslm.identifiers import level_segment
from redteam_core.uslm.models import (
    HIERARCHY,
    DocType,
    Document,
    Element,
    ElementType,
    Reference,
    RefType,
    empty_element,
)

logger = logging.getLogger(__name__)

# Substring expected in the root element's namespace
# (full URI: http://xml.house.gov/schemas/uslm/1.0)
USLM_NAMESPACE_MARKER = "xml.house.gov/schemas/uslm"

ROOT_TAGS: Dict[str, DocType] = {
    "lawDoc": DocType.LAW_DOC,
    "bill": DocType.BILL,
    "resolution": DocType.RESOLUTION,
}

# Containers that become Elements of their own besides the hierarchy levels
STRUCTURAL_WRAPPERS = frozenset({
    "main",
    "body",
    "legisBody",
    "resolutionBody",
    "level",
    "division",
    "subdivision",
    "article",
    "subarticle",
    "preliminary",
    "quotedContent",
})

_HIERARCHY_NAMES = frozenset(level.value for level in HIERARCHY)

STRUCTURAL_TAGS = _HIERARCHY_NAMES | STRUCTURAL_WRAPPERS

REFERENCE_TAG = "ref"

# Checked in order; first substring match wins, otherwise CITATION
REF_TYPE_RULES = (
    ("/amend/", RefType.AMENDMENT),
    ("/repeal/", RefType.REPEAL),
    ("/def/", RefType.DEFINITION),
)

_WHITESPACE = re.compile(r"\s+")


class ValidationResult(BaseModel):
    """Outcome of USLMParser.validate(); valid iff there are no errors."""
    errors: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def valid(self) -> bool:
        return not self.errors


def classify_reference(target: str) -> RefType:
    """Classify a reference by substring match on its target path."""
    for marker, ref_type in REF_TYPE_RULES:
        if marker in target:
            return ref_type
    return RefType.CITATION


def _local_name(node) -> Optional[str]:
    # Comments and processing instructions have non-string tags
    if not isinstance(node.tag, str):
        return None
    return node.tag.split("}")[-1] if "}" in node.tag else node.tag


def _plain_text(node) -> str:
    text = etree.tostring(node, method="text", encoding="unicode", with_tail=False)
    return _WHITESPACE.sub(" ", text).strip()


class USLMParser:
    """
    Parse USLM XML documents into Document trees.

    Classification rule: an element's type is the first hierarchy level
    (checked in hierarchy order) that appears among its direct children's
    tag names. A <bill> whose children include <section> is therefore a
    SECTION-typed element; an element with no hierarchy children is UNKNOWN.
    """

    def __init__(self, namespace_marker: str = USLM_NAMESPACE_MARKER):
        self.namespace_marker = namespace_marker

    def parse(self, xml_content: Union[str, bytes]) -> Document:
        """
        Parse one USLM document.

        Args:
            xml_content: Raw XML text (str or bytes)

        Returns:
            Document with typed element tree and flattened references.
            When no lawDoc/bill/resolution element exists, doc_type is
            UNKNOWN and the root is an empty placeholder.

        Raises:
            MalformedInputError: If the markup cannot be tokenized
        """
        document, _ = self.parse_checked(xml_content)
        return document

    def parse_checked(self, xml_content: Union[str, bytes]) -> Tuple[Document, ValidationResult]:
        """
        Parse and structurally validate in one pass over the markup.

        Returns:
            (Document, ValidationResult) where the result carries the same
            structural errors validate() would report for this input

        Raises:
            MalformedInputError: If the markup cannot be tokenized
        """
        document_element = self._tokenize(xml_content)

        issues = self._structural_issues(document_element)
        for issue in issues:
            logger.warning(f"USLM structural issue: {issue}")
        result = ValidationResult(errors=issues)

        root_node = self._find_root(document_element)
        if root_node is None:
            return Document(doc_type=DocType.UNKNOWN, identifier="", root=empty_element()), result

        references: List[Reference] = []
        root = self._build_element(root_node, references)
        logger.debug(f"Parsed {root.identifier or '<no identifier>'}: {len(references)} references")

        document = Document(
            doc_type=ROOT_TAGS[_local_name(root_node)],
            identifier=root.identifier,
            root=root,
            references=tuple(references),
        )
        return document, result

    def validate(self, xml_content: Union[str, bytes]) -> ValidationResult:
        """
        Structural sanity check. Never raises.

        Reports a tokenizer failure as a single error; otherwise one error per
        violated rule (missing root element, missing/invalid USLM namespace).
        """
        try:
            document_element = self._tokenize(xml_content)
        except MalformedInputError as e:
            return ValidationResult(errors=[f"XML parse error: {e}"])
        return ValidationResult(errors=self._structural_issues(document_element))

    def extract_references(self, element: Element) -> List[Reference]:
        """All references in an element's subtree, grouped by element in pre-order."""
        return [ref for node in element.iter_elements() for ref in node.refs]

    def extract_hierarchy(self, xml_content: Union[str, bytes]) -> List[Element]:
        """Every element of the parsed document in pre-order."""
        return list(self.parse(xml_content).iter_elements())

    def build_identifier_path(self, element: Element, parent_path: str = "") -> str:
        """
        Identifier path for an element, following USLM conventions.

        The element's own identifier attribute wins. Otherwise the path is
        parent_path plus a level segment built from the element's level and
        number: "/t42", "/ch21", "/s1983" for the prefixed levels, a bare
        designation ("/a", "/1") below section. Elements with no level or
        no usable number add nothing and get parent_path back.

        Example:
            <subsection><num>(b)</num> under "/us/usc/t42/s1983"
                -> "/us/usc/t42/s1983/b"
        """
        if element.identifier:
            return element.identifier

        level = element.tag if element.tag in _HIERARCHY_NAMES else element.element_type.value
        segment = level_segment(level, element.number or "")
        if segment is None:
            return parent_path
        return f"{parent_path.rstrip('/')}/{segment}"

    def _tokenize(self, xml_content: Union[str, bytes]):
        if isinstance(xml_content, str):
            data = xml_content.encode("utf-8")
            parser = etree.XMLParser(resolve_entities=False, no_network=True, encoding="utf-8")
        else:
            data = xml_content
            parser = etree.XMLParser(resolve_entities=False, no_network=True)

        try:
            document_element = etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            line, column = getattr(e, "position", (None, None))
            raise MalformedInputError(str(e) or "empty document", line=line, column=column) from e
        except ValueError as e:
            # lxml rejects some inputs (e.g. empty bytes) before tokenizing
            raise MalformedInputError(str(e)) from e

        if document_element is None:
            raise MalformedInputError("document contains no elements")
        return document_element

    def _find_root(self, document_element):
        if _local_name(document_element) in ROOT_TAGS:
            return document_element
        for node in document_element.iterdescendants():
            if _local_name(node) in ROOT_TAGS:
                return node
        return None

    def _structural_issues(self, document_element) -> List[str]:
        errors: List[str] = []

        root_node = self._find_root(document_element)
        if root_node is None:
            errors.append(
                "Missing root element: expected one of " + ", ".join(ROOT_TAGS)
            )
            root_node = document_element

        namespaces = [etree.QName(root_node).namespace or ""]
        namespaces.extend(uri for uri in root_node.nsmap.values() if uri)
        if not any(self.namespace_marker in uri for uri in namespaces):
            found = namespaces[0] or "none"
            errors.append(
                f"Missing or invalid USLM namespace: expected '{self.namespace_marker}', found '{found}'"
            )

        return errors

    def _classify(self, node) -> ElementType:
        child_names = {_local_name(child) for child in node}
        for level in HIERARCHY:
            if level.value in child_names:
                return level
        return ElementType.UNKNOWN

    def _child_text(self, node, name: str) -> Optional[str]:
        for child in node:
            if _local_name(child) == name:
                return _plain_text(child)
        return None

    def _build_element(self, node, document_refs: List[Reference]) -> Element:
        refs: List[Reference] = []
        children: List[Element] = []
        self._scan(node, refs, children, document_refs)

        return Element(
            element_type=self._classify(node),
            identifier=(node.get("identifier") or "").strip(),
            tag=_local_name(node) or "",
            number=self._child_text(node, "num"),
            heading=self._child_text(node, "heading"),
            content=self._child_text(node, "content"),
            children=tuple(children),
            refs=tuple(refs),
        )

    def _scan(self, parent, refs: List[Reference], children: List[Element],
              document_refs: List[Reference]) -> None:
        """
        Walk parent's subtree in document order. Structural children become
        Elements (and own the refs beneath them); every other node is
        transparent, so refs inside it belong to the current element.
        """
        for child in parent:
            name = _local_name(child)
            if name is None:
                continue
            if name in STRUCTURAL_TAGS:
                children.append(self._build_element(child, document_refs))
            elif name == REFERENCE_TAG:
                reference = self._make_reference(child)
                if reference is not None:
                    refs.append(reference)
                    document_refs.append(reference)
            else:
                self._scan(child, refs, children, document_refs)

    def _make_reference(self, node) -> Optional[Reference]:
        target = (node.get("href") or "").strip()
        if not target:
            logger.debug(f"Skipping <ref> without href at line {node.sourceline}")
            return None
        return Reference(
            ref_type=classify_reference(target),
            target=target,
            text=_plain_text(node),
        )


def create_parser(namespace_marker: str = USLM_NAMESPACE_MARKER) -> USLMParser:
    """Create a new USLM parser instance."""
    return USLMParser(namespace_marker=namespace_marker)
