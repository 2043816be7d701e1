"""
USLM identifier utilities.

USLM addresses every legislative unit with a `/`-delimited path, e.g.
`/us/usc/t42/s1983` (42 U.S.C. § 1983) or `/us/bill/118/hr/1/s2`.
All functions here are pure and total: malformed input degrades to a
partial result, never an exception.
"""
import re
from typing import Dict, List, Optional, Tuple


# Level prefixes used inside USC identifiers, longest first so that
# "sch12" is a subchapter and not a section "ch12".
LEVEL_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("spt", "subpart"),
    ("sch", "subchapter"),
    ("st", "subtitle"),
    ("ch", "chapter"),
    ("pt", "part"),
    ("t", "title"),
    ("s", "section"),
)

# Congress.gov bill type codes -> citation abbreviation
BILL_TYPE_ABBREVIATIONS: Dict[str, str] = {
    "hr": "H.R.",
    "s": "S.",
    "hres": "H.Res.",
    "sres": "S.Res.",
    "hjres": "H.J.Res.",
    "sjres": "S.J.Res.",
    "hconres": "H.Con.Res.",
    "sconres": "S.Con.Res.",
}

_DESIGNATION = re.compile(r"^[0-9A-Za-z][0-9A-Za-z.\-]*$")

_PREFIX_BY_LEVEL: Dict[str, str] = {level: prefix for prefix, level in LEVEL_PREFIXES}

# Levels below section take a bare designation segment (/a/1/A)
SUBDIVISION_LEVELS = frozenset({
    "subsection", "paragraph", "subparagraph", "clause", "subclause", "item", "subitem",
})

_NUM_TOKEN = re.compile(r"[0-9A-Za-z]+(?:[.\-][0-9A-Za-z]+)*")

# Words that label a level inside <num> text rather than designate it
_LEVEL_WORDS = frozenset(level for _, level in LEVEL_PREFIXES) | SUBDIVISION_LEVELS | {"sec"}


def identifier_segments(identifier: str) -> List[str]:
    """Split an identifier on `/`, discarding empty segments."""
    return [part for part in identifier.split("/") if part]


def parse_identifier(identifier: str) -> Dict[str, str]:
    """
    Pair consecutive path segments into a key/value mapping.

    Segment 2i is the key and segment 2i+1 its value; a trailing unpaired
    segment is dropped.

    Example:
        parse_identifier("/us/usc/t42/s1983") -> {"us": "usc", "t42": "s1983"}
    """
    parts = identifier_segments(identifier)
    result: Dict[str, str] = {}
    for i in range(0, len(parts) - 1, 2):
        result[parts[i]] = parts[i + 1]
    return result


def join_identifier(segments: Dict[str, str]) -> str:
    """
    Re-join a parse_identifier mapping into a path (keys and values in order).

    Only inverts parse_identifier when no key segment repeats: in
    /us/bill/118/hr/118/s1 the second "118" key overwrites the first, so the
    mapping is {"us": "bill", "118": "s1"} and re-joins to /us/bill/118/s1.
    """
    parts: List[str] = []
    for key, value in segments.items():
        parts.extend((key, value))
    return "/" + "/".join(parts) if parts else ""


def base_path(identifier: str) -> str:
    """Return the identifier with its final `/`-delimited segment removed."""
    trimmed = identifier.rstrip("/")
    cut = trimmed.rfind("/")
    if cut <= 0:
        return ""
    return trimmed[:cut]


def split_level(segment: str) -> Optional[Tuple[str, str]]:
    """
    Split a USC level segment into (level name, designation).

    Returns None when the segment does not carry a known level prefix.
    """
    for prefix, level in LEVEL_PREFIXES:
        if segment.startswith(prefix) and len(segment) > len(prefix):
            designation = segment[len(prefix):]
            if _DESIGNATION.match(designation):
                return level, designation
    return None


def designation_from_number(number: str) -> Optional[str]:
    """
    Pull the designation out of a <num> display string.

    "SEC. 2." -> "2", "(a)" -> "a", "§ 1983." -> "1983", "CHAPTER 21—" -> "21"
    """
    tokens = [
        token for token in _NUM_TOKEN.findall(number)
        if token.lower() not in _LEVEL_WORDS
    ]
    return tokens[-1] if tokens else None


def level_segment(level: str, number: str) -> Optional[str]:
    """
    Identifier segment for one level: prefixed for title..section ("t42",
    "ch21", "s1983"), bare designation below section ("a", "1").

    Returns None for non-hierarchy levels or a number with no designation.
    """
    designation = designation_from_number(number)
    if designation is None:
        return None
    prefix = _PREFIX_BY_LEVEL.get(level)
    if prefix is not None:
        return prefix + designation
    if level in SUBDIVISION_LEVELS:
        return designation
    return None


def _ordinal(number: str) -> str:
    if not number.isdigit():
        return number
    value = int(number)
    if 10 <= value % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(value % 10, "th")
    return f"{value}{suffix}"


def _format_usc(parts: List[str]) -> Optional[str]:
    levels: Dict[str, str] = {}
    subdivisions: List[str] = []
    for part in parts:
        if "section" in levels:
            # Everything after the section is a subdivision: (a)(1)(A)...
            subdivisions.append(part)
            continue
        split = split_level(part)
        if split is None:
            return None
        levels[split[0]] = split[1]

    title = levels.get("title")
    if title is None:
        return None
    if "section" in levels:
        suffix = "".join(f"({sub})" for sub in subdivisions)
        return f"{title} U.S.C. § {levels['section']}{suffix}"
    for level, abbreviation in (("subchapter", "subch."), ("chapter", "ch."),
                                ("subpart", "subpt."), ("part", "pt."),
                                ("subtitle", "subtitle")):
        if level in levels:
            return f"{title} U.S.C. {abbreviation} {levels[level]}"
    return f"Title {title}, U.S.C."


def _format_bill(parts: List[str]) -> Optional[str]:
    if len(parts) < 3:
        return None
    congress, bill_type, number = parts[0], parts[1], parts[2]
    abbreviation = BILL_TYPE_ABBREVIATIONS.get(bill_type.lower())
    if abbreviation is None:
        return None
    citation = f"{abbreviation} {number}, {_ordinal(congress)} Congress"
    if len(parts) > 3:
        split = split_level(parts[3])
        if split and split[0] == "section":
            citation += f", § {split[1]}"
    return citation


def format_citation(identifier: str) -> str:
    """
    Render an identifier as a human-readable citation.

    Examples:
        /us/usc/t42/s1983      -> 42 U.S.C. § 1983
        /us/usc/t42/ch21       -> 42 U.S.C. ch. 21
        /us/pl/117/169         -> Pub. L. 117-169
        /us/stat/134/501       -> 134 Stat. 501
        /us/bill/118/hr/1      -> H.R. 1, 118th Congress

    Unrecognized identifiers are returned unchanged.
    """
    parts = identifier_segments(identifier)
    if len(parts) < 3 or parts[0] != "us":
        return identifier

    collection, rest = parts[1], parts[2:]
    citation: Optional[str] = None
    if collection == "usc":
        citation = _format_usc(rest)
    elif collection == "pl" and len(rest) >= 2:
        citation = f"Pub. L. {rest[0]}-{rest[1]}"
        if len(rest) > 2:
            split = split_level(rest[2])
            if split and split[0] == "section":
                citation += f", § {split[1]}"
    elif collection == "stat" and len(rest) >= 2:
        citation = f"{rest[0]} Stat. {rest[1]}"
    elif collection == "bill":
        citation = _format_bill(rest)

    return citation if citation is not None else identifier
