"""Numbering-scheme registry and main-clause schema detection.

Each scheme identifier maps to two compiled patterns:
  header: anchored match for a main-clause header at the start of a line
  split: zero-width boundary used to cut a document before each header

Split patterns fire either after a newline (consumed) or after sentence-ending
``.``/``;`` plus 1-3 whitespace characters, since text extracted from PDFs
often loses its line breaks. The marker must be followed by a capitalized
word so inline references ("clause 5.2 above") do not split.

Scheme coverage:
  numeric            1.        numeric-paren      1)
  paren-numeric      (1)       decimal            1.1
  decimal-zero       1.0       decimal-triple     1.1.1
  alpha-upper        A.        alpha-lower        a.
  alpha-lower-paren  a)        paren-alpha        (a)
  roman-upper        I.        roman-lower        i.
  roman-upper-paren  I)        roman-lower-paren  i)
  paren-roman-upper  (I)       paren-roman-lower  (i)
  section            Section 1.
  section-decimal    Section 1. (not Section 1.1)
  article            Article IV / ARTICLE 4
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Literal, get_args

log = logging.getLogger(__name__)

type SchemeId = Literal[
    "numeric",
    "numeric-paren",
    "paren-numeric",
    "decimal",
    "decimal-zero",
    "decimal-triple",
    "alpha-upper",
    "alpha-lower",
    "alpha-lower-paren",
    "paren-alpha",
    "roman-upper",
    "roman-lower",
    "roman-upper-paren",
    "roman-lower-paren",
    "paren-roman-upper",
    "paren-roman-lower",
    "section",
    "section-decimal",
    "article",
]

NO_SCHEME = "none"
SCHEME_IDS: frozenset[str] = frozenset(get_args(SchemeId.__value__))

# Roman numerals I-XX(+), ordered so the regex engine can backtrack through
# IV/IX/XIV when the shorter alternative does not reach the delimiter.
_ROMAN_UPPER = r"(?:I{1,3}|IV|VI{0,3}|IX|XI{0,3}|XIV|XV|XVI{0,3}|XIX|XX[IVX]*)"
_ROMAN_LOWER = r"(?:i{1,3}|iv|vi{0,3}|ix|xi{0,3}|xiv|xv|xvi{0,3}|xix|xx[ivx]*)"

# Boundary prefix shared by every split pattern. Python lookbehinds must be
# fixed-width, so "1-3 whitespace chars" is spelled out as three alternatives.
_AFTER_PUNCT = "|".join(
    f"(?<={punct}{ws})"
    for punct in (r"\.", ";")
    for ws in (r"\s", r"\s\s", r"\s\s\s")
)
_BOUNDARY = rf"(?:\n\s*|{_AFTER_PUNCT})"
_BOUNDARY_WIDE = rf"(?:\n\s*|{_AFTER_PUNCT}|(?<=\s\s))"


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SchemaPattern:
    """Compiled header/split pair for one numbering scheme."""

    scheme: str
    header: re.Pattern[str]
    split: re.Pattern[str]


@dataclass(frozen=True, slots=True)
class NumberingSchema:
    """Caller-declared numbering convention, one scheme per nesting level."""

    main_clause: str = NO_SCHEME
    sub_clause_1: str = NO_SCHEME
    sub_clause_2: str = NO_SCHEME
    sub_clause_3: str = NO_SCHEME

    def __post_init__(self) -> None:
        for name in ("main_clause", "sub_clause_1", "sub_clause_2", "sub_clause_3"):
            value = getattr(self, name)
            if value != NO_SCHEME and value not in SCHEME_IDS:
                raise ValueError(f"Unknown numbering scheme for {name}: {value!r}")

    @property
    def has_main_clause(self) -> bool:
        return self.main_clause != NO_SCHEME

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> NumberingSchema:
        """Build from a caller record; accepts snake_case or camelCase keys."""
        aliases = {
            "main_clause": ("main_clause", "mainClause"),
            "sub_clause_1": ("sub_clause_1", "subClause1"),
            "sub_clause_2": ("sub_clause_2", "subClause2"),
            "sub_clause_3": ("sub_clause_3", "subClause3"),
        }
        converted: dict[str, str] = {}
        for field_name, keys in aliases.items():
            for key in keys:
                value = payload.get(key)
                if isinstance(value, str) and value.strip():
                    converted[field_name] = value.strip()
                    break
        return cls(**converted)


@dataclass(frozen=True, slots=True)
class DetectedSchema:
    """Main-clause pattern picked by ``detect_schema`` or a segmenter fallback."""

    scheme_type: str
    split: re.Pattern[str]
    header: re.Pattern[str]
    match_count: int = 0


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_HEADER_PATTERNS: dict[str, str] = {
    "numeric": r"^(\d+)\.\s+",
    "numeric-paren": r"^(\d+)\)\s+",
    "paren-numeric": r"^\((\d+)\)\s+",
    "decimal": r"^(\d+\.\d+)\s+",
    "decimal-zero": r"^(\d+)\.0\s+",
    "decimal-triple": r"^(\d+\.\d+\.\d+)\s+",
    "alpha-upper": r"^([A-Z])\.\s+",
    "alpha-lower": r"^([a-z])\.\s+",
    "alpha-lower-paren": r"^([a-z])\)\s+",
    "paren-alpha": r"^\(([a-z])\)\s+",
    "roman-upper": rf"^({_ROMAN_UPPER})\.\s+",
    "roman-lower": rf"^({_ROMAN_LOWER})\.\s+",
    "roman-upper-paren": rf"^({_ROMAN_UPPER})\)\s+",
    "roman-lower-paren": rf"^({_ROMAN_LOWER})\)\s+",
    "paren-roman-upper": rf"^\(({_ROMAN_UPPER})\)\s+",
    "paren-roman-lower": rf"^\(({_ROMAN_LOWER})\)\s+",
    "section": r"(?i)^Section\s+(\d+)\.",
    "section-decimal": r"(?i)^Section\s+(\d+)\.(?!\d)",
    "article": r"(?i)^Article\s+([IVX]+|\d+)",
}

# Lookahead bodies: the clause marker followed by a capitalized word.
_SPLIT_MARKERS: dict[str, str] = {
    "numeric": r"\d+\.\s+[A-Z]",
    "numeric-paren": r"\d+\)\s+[A-Z]",
    "paren-numeric": r"\(\d+\)\s+[A-Z]",
    "decimal": r"\d+\.\d+\s+[A-Z]",
    "decimal-zero": r"\d+\.0\s+[A-Z]",
    "decimal-triple": r"\d+\.\d+\.\d+\s+[A-Z]",
    "alpha-upper": r"[A-Z]\.\s+[A-Z]",
    "alpha-lower": r"[a-z]\.\s+[A-Z]",
    "alpha-lower-paren": r"[a-z]\)\s+[A-Z]",
    "paren-alpha": r"\([a-z]\)\s+[A-Z]",
    "roman-upper": rf"{_ROMAN_UPPER}\.\s+[A-Z]",
    "roman-lower": rf"{_ROMAN_LOWER}\.\s+[A-Z]",
    "roman-upper-paren": rf"{_ROMAN_UPPER}\)\s+[A-Z]",
    "roman-lower-paren": rf"{_ROMAN_LOWER}\)\s+[A-Z]",
    "paren-roman-upper": rf"\({_ROMAN_UPPER}\)\s+[A-Z]",
    "paren-roman-lower": rf"\({_ROMAN_LOWER}\)\s+[A-Z]",
    "section": r"[Ss][Ee][Cc][Tt][Ii][Oo][Nn]\s+\d+\.",
    "section-decimal": r"[Ss][Ee][Cc][Tt][Ii][Oo][Nn]\s+\d+\.(?!\d)",
    "article": r"(?:Article|ARTICLE)\s+(?:[IVX]+|\d+)",
}

# "Section N." headers are often separated only by a run of spaces
_WIDE_BOUNDARY_SCHEMES = frozenset({"section", "section-decimal"})


def _compile_split(scheme: str) -> re.Pattern[str]:
    boundary = _BOUNDARY_WIDE if scheme in _WIDE_BOUNDARY_SCHEMES else _BOUNDARY
    return re.compile(rf"{boundary}(?={_SPLIT_MARKERS[scheme]})")


_REGISTRY: dict[str, SchemaPattern] = {
    scheme: SchemaPattern(
        scheme=scheme,
        header=re.compile(_HEADER_PATTERNS[scheme]),
        split=_compile_split(scheme),
    )
    for scheme in sorted(SCHEME_IDS)
}


def schema_pattern(scheme: str) -> SchemaPattern | None:
    """Return the compiled pattern pair for ``scheme`` (None for unknown/none)."""
    return _REGISTRY.get(scheme)


def header_regex(scheme: str) -> re.Pattern[str] | None:
    """Anchored main-clause header pattern for ``scheme``."""
    pattern = _REGISTRY.get(scheme)
    return pattern.header if pattern is not None else None


def split_regex(scheme: str) -> re.Pattern[str] | None:
    """Zero-width boundary pattern locating main clauses of ``scheme``."""
    pattern = _REGISTRY.get(scheme)
    return pattern.split if pattern is not None else None


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------

# Roman numeral + capital, used whenever nothing better supplies a header
DEFAULT_HEADER: re.Pattern[str] = re.compile(rf"^{_ROMAN_UPPER}\.\s+[A-Z]")


@dataclass(frozen=True, slots=True)
class _Candidate:
    scheme_type: str
    counter: re.Pattern[str]
    split: re.Pattern[str]
    header: re.Pattern[str]


# Priority order matters: on equal counts the earlier candidate wins.
# Roman numerals and Section/Article headers denote main sections; A./B.
# markers are usually sub-clauses and are deliberately not candidates.
_CANDIDATES: tuple[_Candidate, ...] = (
    _Candidate(
        "roman",
        re.compile(rf"(?:^|\n)[ \t]*{_ROMAN_UPPER}\.\s+[A-Z][A-Z\s]"),
        re.compile(rf"\n\s*(?={_ROMAN_UPPER}\.\s+[A-Z])"),
        DEFAULT_HEADER,
    ),
    _Candidate(
        "section",
        re.compile(r"(?:^|\n)[ \t]*Section\s+\d+\.", re.IGNORECASE),
        re.compile(r"\n\s*(?=Section\s+\d+\.)", re.IGNORECASE),
        _REGISTRY["section"].header,
    ),
    _Candidate(
        "article",
        re.compile(r"(?:^|\n)[ \t]*Article\s+\d+", re.IGNORECASE),
        re.compile(r"\n\s*(?=Article\s+\d+)", re.IGNORECASE),
        _REGISTRY["article"].header,
    ),
    _Candidate(
        "article-roman",
        re.compile(r"(?:^|\n)[ \t]*ARTICLE\s+[IVX]+"),
        re.compile(r"\n\s*(?=ARTICLE\s+[IVX]+)"),
        _REGISTRY["article"].header,
    ),
    _Candidate(
        "numeric",
        re.compile(r"(?:^|\n)[ \t]*\d+\.\s+[A-Z][A-Z\s]{3,}"),
        re.compile(r"\n\s*(?=\d+\.\s+[A-Z][A-Z])"),
        _REGISTRY["numeric"].header,
    ),
)

_MIN_DETECTED_SECTIONS = 2


def detect_schema(text: str) -> DetectedSchema:
    """Pick the main-clause numbering pattern best supported by ``text``.

    Counts occurrences of each candidate pattern at line starts and keeps the
    highest count (ties go to the earlier candidate). Documents with fewer
    than 2 detectable sections fall back to the roman-numeral pattern rather
    than failing.
    """
    best = _CANDIDATES[0]
    best_count = 0
    for candidate in _CANDIDATES:
        count = len(candidate.counter.findall(text))
        log.debug("Pattern %s: %d matches", candidate.scheme_type, count)
        if count > best_count:
            best = candidate
            best_count = count

    if best_count < _MIN_DETECTED_SECTIONS:
        log.debug("Few main sections detected, using roman numeral pattern")
        best = _CANDIDATES[0]

    log.info("Detected numbering schema: %s with %d matches", best.scheme_type, best_count)
    return DetectedSchema(
        scheme_type=best.scheme_type,
        split=best.split,
        header=best.header,
        match_count=best_count,
    )


# Segmenter fallbacks, tried in order when the primary split is too coarse.
FALLBACK_SCHEMAS: tuple[DetectedSchema, ...] = (
    DetectedSchema(
        scheme_type="roman-upper",
        split=re.compile(r"\n\s*(?=[IVX]+\.\s+[A-Z][A-Z])"),
        header=DEFAULT_HEADER,
    ),
    DetectedSchema(
        scheme_type="section",
        split=re.compile(r"\n\s*(?=(?:Section|Article|ARTICLE)\s+\d+\.)", re.IGNORECASE),
        header=re.compile(r"(?i)^(?:Section|Article)\s+(\d+)\."),
    ),
    DetectedSchema(
        scheme_type="numeric",
        split=re.compile(r"\n\s*(?=\d+\.\s+[A-Z][A-Z])"),
        header=_REGISTRY["numeric"].header,
    ),
)
