"""Clause-number and header-title parsing for segmented blocks.

``parse_clause_number`` separates the display label ("1. INDEMNITY",
"Section 4. Term") from the body text. ``parse_header_title`` pulls the short
title phrase the classifier maps to a clause type.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Clause-number patterns (tried in order)
# ---------------------------------------------------------------------------

# "1. INDEMNITY. Each party ..." / "IV. Term\nThe agreement ..."
_NUMBERED_TITLE_RE = re.compile(
    r"^((?:\d+|[IVX]+|[A-Z])\.\s*[^\n.]+?)(?:\.\s*|\n\s*)(.+)$",
    re.DOTALL,
)
# "Section 4. Term. The agreement ..." / "ARTICLE II Payment\n..."
_SECTION_TITLE_RE = re.compile(
    r"^((?:Section|Article|ARTICLE|Clause)\s+(?:\d+|[IVX]+)\.?\s*[^\n.]*?)(?:\.\s*|\n\s*)(.+)$",
    re.IGNORECASE | re.DOTALL,
)
# Bare "3." prefix
_BARE_NUMBER_RE = re.compile(r"^((?:\d+|[IVX]+|[A-Z])\.)\s*(.+)$", re.DOTALL)
# "CONFIDENTIALITY\nEach party ..."
_CAPS_TITLE_RE = re.compile(r"^([A-Z][A-Z\s]{3,50})(?:\.\s*|\n\s*)(.+)$", re.DOTALL)

_MAX_BARE_TITLE_LEN = 80
_MAX_BARE_TITLE_OFFSET = 100

# ---------------------------------------------------------------------------
# Header-title patterns (tried in order)
# ---------------------------------------------------------------------------

_HEADER_NUMBERED_RE = re.compile(
    r"^([0-9]+|[A-Z]|[IVX]+)\.\s+([A-Z][A-Za-z\s,/()]{3,100}?)"
    r"(?:\n|\.|\s{2,}|$|(?=\s+[0-9]+\.[0-9]+))"
)
_HEADER_SIMPLE_RE = re.compile(r"^([0-9]+|[A-Z]|[IVX]+)\.\s+([^\n.]+)(?:\n|\.|$)")
_HEADER_SECTION_RE = re.compile(
    r"^(?:Section|Article|Clause)\s+[0-9A-ZIVX]+\.?\s*([^\n.]+)?(?:\n|\.|$)",
    re.IGNORECASE,
)
_HEADER_CAPS_RE = re.compile(r"^([A-Z\s]{4,})(?:\n|$)")

_TITLE_MIN_LEN = 3
_TITLE_MAX_LEN = 50
_TITLE_MAX_WORDS = 12
_TITLE_EDGE_CHARS = ".;,: -"


@dataclass(frozen=True, slots=True)
class ClauseNumber:
    """Display label and body split out of a block."""

    clause_no: str
    body_text: str


def parse_clause_number(block: str) -> ClauseNumber:
    """Split a block into its clause label and body.

    Falls back to an empty label with the whole (trimmed) block as body when
    no leading number or title is recognized.
    """
    trimmed = block.strip()

    m = _NUMBERED_TITLE_RE.match(trimmed)
    if m:
        return ClauseNumber(m.group(1).strip(), m.group(2).strip())

    m = _SECTION_TITLE_RE.match(trimmed)
    if m:
        return ClauseNumber(m.group(1).strip(), m.group(2).strip())

    m = _BARE_NUMBER_RE.match(trimmed)
    if m:
        number = m.group(1)
        rest = m.group(2)
        newline = rest.find("\n")
        if 0 < newline < _MAX_BARE_TITLE_OFFSET:
            first_line = rest[:newline].strip()
            remainder = rest[newline + 1:].strip()
            if first_line and len(first_line) <= _MAX_BARE_TITLE_LEN and remainder:
                return ClauseNumber(f"{number} {first_line}", remainder)
        return ClauseNumber(number, rest.strip())

    m = _CAPS_TITLE_RE.match(trimmed)
    if m:
        return ClauseNumber(m.group(1).strip(), m.group(2).strip())

    return ClauseNumber("", trimmed)


def _clean_title_text(raw: str) -> str | None:
    """Keep the first line, trimmed of punctuation; reject body-like text."""
    line = raw.split("\n", 1)[0]
    cleaned = re.sub(r"\s+", " ", line).strip(_TITLE_EDGE_CHARS)
    if len(cleaned) < _TITLE_MIN_LEN or len(cleaned) > _TITLE_MAX_LEN:
        return None
    if len(cleaned.split()) > _TITLE_MAX_WORDS:
        return None
    return cleaned


def parse_header_title(block: str) -> str | None:
    """Return the short title phrase at the head of ``block``, if any.

    Recognizes "1. INDEMNITY", "A. Independent Contractor",
    "Section 3. Payment" and a bare ALL-CAPS first line. Titles longer than
    50 chars or 12 words are treated as body text, not headings.
    """
    text = block.strip()

    m = _HEADER_NUMBERED_RE.match(text)
    if m:
        title = _clean_title_text(m.group(2))
        if title:
            return title

    m = _HEADER_SIMPLE_RE.match(text)
    if m:
        title = _clean_title_text(m.group(2))
        if title:
            return title

    m = _HEADER_SECTION_RE.match(text)
    if m and m.group(1):
        title = _clean_title_text(m.group(1))
        if title:
            return title

    m = _HEADER_CAPS_RE.match(text)
    if m:
        return _clean_title_text(m.group(1))

    return None
