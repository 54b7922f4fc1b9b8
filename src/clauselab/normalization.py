"""Deterministic text cleanup applied before segmentation.

Three transforms, in pipeline order:
1. ``normalize_text``: whitespace variants to plain spaces, collapsed runs,
   trimmed lines. Idempotent.
2. ``remove_page_numbers``: best-effort removal of stray page markers left
   behind by PDF/DOCX text acquisition.
3. ``strip_running_headers``: drops short lines repeated on every page.

Pure string functions, no I/O.
"""
from __future__ import annotations

import re
from collections import Counter

# Every whitespace-like character except LF/CR. Zero-width no-break space
# (BOM) is included because extracted PDF text scatters it between words.
_SPACE_LIKE_RE = re.compile(
    "[\t\x0b\x0c \u00a0\u1680\u2000-\u200a\u202f\u205f\u3000\ufeff]"
)
_SPACE_RUN_RE = re.compile(r" {2,}")

# ---------------------------------------------------------------------------
# Page-number patterns (applied in order)
# ---------------------------------------------------------------------------

# Standalone number on its own line, unless the next line is a numbered clause
_PAGE_STANDALONE_RE = re.compile(r"\n\s*(\d{1,4})\s*\n(?!\s*\d+\.)")
# Number isolated right after a sentence end
_PAGE_AFTER_SENTENCE_RE = re.compile(r"\.\s*\n\s*(\d{1,4})\s*\n")
# Number preceding the opening words of the document body
_PAGE_BEFORE_START_RE = re.compile(
    r"\n\s*(\d{1,4})\s*\n\s*\n\s*(THIS|WHEREAS|BETWEEN|PARTIES)",
    re.IGNORECASE,
)
_PAGE_LABEL_RE = re.compile(r"\n\s*Page\s+\d+(\s+of\s+\d+)?\s*\n", re.IGNORECASE)
_PAGE_BRACKETED_RE = re.compile(r"\n\s*[\[(]\d{1,4}[\])]\s*\n")
_PAGE_DASHED_RE = re.compile(r"\n\s*-\s*\d{1,4}\s*-\s*\n")
# Number directly above an ALL-CAPS line ("1\n\nTHIS SERVICES AGREEMENT")
_PAGE_BEFORE_CAPS_RE = re.compile(r"\n\s*(\d{1,4})\s*\n(?=\s*[A-Z]{2,})")
_NEWLINE_RUN_RE = re.compile(r"\n{3,}")

# Footer stamped on every page of some template agreements:
# "Agreement between X and Y ... Page 3 of 12 ... (01/2021 v2)"
_TEMPLATE_FOOTER_RE = re.compile(
    r"Agreement between.*Page\s+\d+\s+of\s+\d+.*\(01/2021 v[^)]*\)",
    re.IGNORECASE,
)

_HEADER_MIN_LEN = 8
_HEADER_MAX_LEN = 120
_SENTENCE_END = (".", ";", ":", "!", "?")


def normalize_text(text: str | None) -> str:
    """Collapse whitespace variants and trim every line.

    Replaces tabs, non-breaking and typographic spaces and the zero-width
    no-break space with a plain space; line breaks are kept. Runs of spaces
    collapse to one, each line is trimmed, then the whole string.

    ``normalize_text(normalize_text(s)) == normalize_text(s)`` for all ``s``.
    """
    if not text:
        return ""
    result = _SPACE_LIKE_RE.sub(" ", text)
    result = _SPACE_RUN_RE.sub(" ", result)
    result = "\n".join(line.strip() for line in result.split("\n"))
    return result.strip()


def remove_page_numbers(text: str) -> str:
    """Strip stray page numbers from extracted document text.

    Heuristic and lossy: a real clause number standing alone on its line
    can be removed along with genuine page markers. Runs of 3+ newlines
    left behind are collapsed to exactly 2.
    """
    if not text:
        return ""
    cleaned = _PAGE_STANDALONE_RE.sub("\n\n", text)
    cleaned = _PAGE_AFTER_SENTENCE_RE.sub(".\n\n", cleaned)
    cleaned = _PAGE_BEFORE_START_RE.sub(r"\n\n\2", cleaned)
    cleaned = _PAGE_LABEL_RE.sub("\n\n", cleaned)
    cleaned = _PAGE_BRACKETED_RE.sub("\n\n", cleaned)
    cleaned = _PAGE_DASHED_RE.sub("\n\n", cleaned)
    cleaned = _PAGE_BEFORE_CAPS_RE.sub("\n\n", cleaned)
    return _NEWLINE_RUN_RE.sub("\n\n", cleaned)


def strip_template_footer(text: str) -> str:
    """Remove the per-page template footer from a block of text."""
    return _TEMPLATE_FOOTER_RE.sub("", text).strip()


def strip_running_headers(text: str, min_repeats: int = 3) -> str:
    """Drop short lines repeated verbatim at least ``min_repeats`` times.

    Running headers and footers ("Confidential", "Master Services
    Agreement - Execution Copy") repeat once per page. Lines ending in
    sentence punctuation are kept since those are body text.
    """
    if not text:
        return ""
    lines = text.split("\n")
    counts = Counter(line.strip() for line in lines)
    repeated = {
        line for line, n in counts.items()
        if n >= min_repeats
        and _HEADER_MIN_LEN <= len(line) <= _HEADER_MAX_LEN
        and not line.endswith(_SENTENCE_END)
    }
    if not repeated:
        return text
    kept = [line for line in lines if line.strip() not in repeated]
    return _NEWLINE_RUN_RE.sub("\n\n", "\n".join(kept))


def prepare_document(text: str | None) -> str:
    """Run the full cleanup chain used ahead of segmentation."""
    cleaned = normalize_text(text)
    cleaned = remove_page_numbers(cleaned)
    cleaned = strip_running_headers(cleaned)
    return cleaned.strip()
