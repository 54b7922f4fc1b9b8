"""Catch-all section expansion.

"Miscellaneous" and "General" sections bundle unrelated boilerplate
(governing law, counterparts, notices ...). Such a block is re-split into
its sub-clauses and each piece typed on its own. Every emitted piece keeps
the parent's ``clause_no`` so it can be traced back to its section.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from clauselab.config import DEFAULT_CONFIG, ExtractionConfig
from clauselab.extraction_types import ExtractedClause, TypeDecision, build_clause
from clauselab.normalization import normalize_text
from clauselab.repository import RepositoryClause, find_best_clause_type_match
from clauselab.textmatch import heading_matches

log = logging.getLogger(__name__)

CATCH_ALL_HEADINGS: tuple[str, ...] = ("miscellaneous", "general")

# "Section 8.1 ..." / "8.1 ..." at the start of the text or a line, or after
# a sentence end; amounts like "$1,250.50" and inline references stay put
_DECIMAL_SPLIT_RE = re.compile(
    r"(?:^|(?<=\n)|(?<=[.;:]\s)|(?<=[.;:]\s\s))(?=(?:Section\s+)?\d+\.\d+[\s.:])",
    re.IGNORECASE,
)
# "(a) ..." / "(1) ..."
_PAREN_SPLIT_RE = re.compile(r"(?=\([a-z0-9]\)\s+)", re.IGNORECASE)
_BLANK_LINE_SPLIT_RE = re.compile(r"\n\s*\n")

_MIN_MARKED_PIECE = 20
_MIN_PARAGRAPH_PIECE = 30
_MIN_SUBCLAUSE_CHARS = 30


def is_catch_all_section(clause_no: str) -> bool:
    """True when the label names a miscellaneous/general section."""
    return bool(clause_no) and heading_matches(clause_no, CATCH_ALL_HEADINGS) is not None


def _pieces(pattern: re.Pattern[str], text: str, min_len: int) -> list[str]:
    return [p for p in pattern.split(text) if len(p.strip()) > min_len]


def split_catch_all(block_text: str, sub_split: re.Pattern[str] | None = None) -> list[str]:
    """Cut a catch-all block into candidate sub-clauses.

    Strategies in order, first yielding 2+ pieces wins: the caller's
    sub-clause scheme (when given), decimal ``N.M`` markers, parenthetical
    ``(a)``/``(1)`` markers, then blank lines.
    """
    strategies: list[tuple[re.Pattern[str], int]] = []
    if sub_split is not None:
        strategies.append((sub_split, _MIN_MARKED_PIECE))
    strategies.extend((
        (_DECIMAL_SPLIT_RE, _MIN_MARKED_PIECE),
        (_PAREN_SPLIT_RE, _MIN_MARKED_PIECE),
    ))
    pieces: list[str] = []
    for pattern, min_len in strategies:
        pieces = _pieces(pattern, block_text, min_len)
        if len(pieces) >= 2:
            return pieces
    return _pieces(_BLANK_LINE_SPLIT_RE, block_text, _MIN_PARAGRAPH_PIECE)


def detect_boilerplate_type(text: str) -> str | None:
    """Keyword detector tuned for catch-all boilerplate sub-clauses."""
    lower = text.lower()
    if (
        "governing law" in lower
        or ("state" in lower and "laws" in lower)
        or ("construed" in lower and "laws" in lower)
        or "governed by the laws" in lower
    ):
        return "Governing Law"
    if "counterpart" in lower:
        return "Counterparts"
    if any(w in lower for w in ("amended", "modified", "amendment", "modification")):
        return "Modification"
    if (
        "entire agreement" in lower
        or "entire understanding" in lower
        or ("constitutes the entire" in lower and "agreement" in lower)
    ):
        return "Entire Agreement"
    if (
        "severability" in lower
        or "severable" in lower
        or ("invalid" in lower and "provision" in lower)
        or ("unenforceable" in lower and "provision" in lower)
    ):
        return "Severability"
    if "waive" in lower:
        return "Waiver"
    if "notice" in lower and ("shall be" in lower or "given" in lower):
        return "Notice Period"
    if "assign" in lower:
        return "Anti-Assignment"
    return None


def _classify_piece(
    piece: str,
    repository: Sequence[RepositoryClause],
    config: ExtractionConfig,
) -> TypeDecision | None:
    clause_type = detect_boilerplate_type(piece)
    if clause_type is not None:
        return TypeDecision(clause_type, "boilerplate", 0.7)
    if not repository:
        return None
    match = find_best_clause_type_match(piece, repository)
    if match is None or match.score <= config.boilerplate_repository_score:
        return None
    return TypeDecision(
        clause_type=match.clause_type,
        stage="repository",
        confidence=match.score,
        matched_from_repository=True,
        similarity_score=match.score,
        matched_clause_id=match.matched_clause_id,
    )


def expand_catch_all(
    parent_clause_no: str,
    block_text: str,
    repository: Sequence[RepositoryClause] = (),
    *,
    config: ExtractionConfig = DEFAULT_CONFIG,
    sub_split: re.Pattern[str] | None = None,
) -> list[ExtractedClause]:
    """Typed sub-clauses of a catch-all block; untyped pieces are dropped.

    Returns an empty list when nothing qualifies; the caller then emits the
    block undivided.
    """
    out: list[ExtractedClause] = []
    for piece in split_catch_all(block_text, sub_split):
        trimmed = piece.strip()
        if len(trimmed) < _MIN_SUBCLAUSE_CHARS:
            continue
        decision = _classify_piece(trimmed, repository, config)
        if decision is None:
            continue
        out.append(build_clause(decision, parent_clause_no, normalize_text(trimmed), config=config))
    log.debug("Catch-all section %r expanded into %d sub-clauses", parent_clause_no, len(out))
    return out
