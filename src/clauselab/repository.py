"""Repository matching: type a block by similarity to labeled clauses.

Two scoring strategies over the caller's clause repository:

- individual: best single clause, ``0.4 * words + 0.6 * trigrams``,
  threshold 0.15
- grouped: clauses grouped by declared type, per-type maximum of
  ``0.35 * words + 0.65 * bigrams``, threshold 0.12

Both skip generic types and clauses too short to carry signal. Exact-score
ties keep the first candidate seen in repository order.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from clauselab.textmatch import combined_similarity
from clauselab.vocabulary import GENERIC_TYPES

log = logging.getLogger(__name__)

type RepositoryStrategyName = Literal["grouped", "individual"]

REPOSITORY_STRATEGIES: frozenset[str] = frozenset({"grouped", "individual"})

INDIVIDUAL_THRESHOLD = 0.15
GROUPED_THRESHOLD = 0.12

_INDIVIDUAL_MIN_CHARS = 50
_GROUPED_MIN_CHARS = 30


@dataclass(frozen=True, slots=True)
class RepositoryClause:
    """A previously labeled clause supplied by the caller. Read-only."""

    id: str
    clause_type: str
    clause_text: str
    clause_no: str = ""
    subtags: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> RepositoryClause:
        """Build from a caller record; unknown keys ignored.

        Raises:
            ValueError: if ``clause_type`` is missing.
        """
        clause_type = payload.get("clause_type") or payload.get("clauseType")
        if not isinstance(clause_type, str) or not clause_type.strip():
            raise ValueError("Repository clause missing clause_type")
        raw_subtags = payload.get("subtags") or ()
        if not isinstance(raw_subtags, (list, tuple)):
            raw_subtags = (raw_subtags,)
        return cls(
            id=str(payload.get("id", "")),
            clause_type=clause_type.strip(),
            clause_text=str(payload.get("clause_text") or payload.get("clauseText") or ""),
            clause_no=str(payload.get("clause_no") or payload.get("clauseNo") or ""),
            subtags=tuple(str(t) for t in raw_subtags),
        )


@dataclass(frozen=True, slots=True)
class RepositoryMatch:
    """Winning repository type with its score and the clause that scored it."""

    clause_type: str
    score: float
    matched_clause_id: str


def coerce_repository(
    clauses: Iterable[RepositoryClause | Mapping[str, Any]],
) -> tuple[RepositoryClause, ...]:
    """Accept dataclass instances or plain mappings; drop untyped and malformed records."""
    out: list[RepositoryClause] = []
    for item in clauses:
        if isinstance(item, RepositoryClause):
            out.append(item)
            continue
        if not isinstance(item, Mapping):
            log.debug("Skipping non-mapping repository record: %r", item)
            continue
        try:
            out.append(RepositoryClause.from_dict(item))
        except ValueError:
            log.debug("Skipping repository record without clause_type: %r", item.get("id"))
    return tuple(out)


def group_by_type(repository: Iterable[RepositoryClause]) -> dict[str, list[RepositoryClause]]:
    """Group clauses by declared type, preserving first-seen type order."""
    grouped: dict[str, list[RepositoryClause]] = {}
    for clause in repository:
        grouped.setdefault(clause.clause_type, []).append(clause)
    return grouped


def match_clause_from_repository(
    text: str,
    repository: Sequence[RepositoryClause],
    threshold: float = INDIVIDUAL_THRESHOLD,
) -> RepositoryMatch | None:
    """Best single repository clause by word + trigram similarity."""
    best: RepositoryMatch | None = None
    for clause in repository:
        if len(clause.clause_text) < _INDIVIDUAL_MIN_CHARS:
            continue
        if clause.clause_type in GENERIC_TYPES:
            continue
        score = combined_similarity(text, clause.clause_text, n=3, word_weight=0.4)
        if score >= threshold and (best is None or score > best.score):
            best = RepositoryMatch(clause.clause_type, score, clause.id)
    return best


def find_best_clause_type_match(
    text: str,
    repository: Sequence[RepositoryClause],
    threshold: float = GROUPED_THRESHOLD,
) -> RepositoryMatch | None:
    """Best clause type by the maximum word + bigram similarity within each type."""
    best: RepositoryMatch | None = None
    for clause_type, members in group_by_type(repository).items():
        if clause_type in GENERIC_TYPES:
            continue
        type_score = 0.0
        type_clause_id = ""
        for clause in members:
            if len(clause.clause_text) < _GROUPED_MIN_CHARS:
                continue
            score = combined_similarity(text, clause.clause_text, n=2, word_weight=0.35)
            if score > type_score:
                type_score = score
                type_clause_id = clause.id
        if type_score >= threshold and (best is None or type_score > best.score):
            best = RepositoryMatch(clause_type, type_score, type_clause_id)
    return best


def best_match(
    text: str,
    repository: Sequence[RepositoryClause],
    threshold: float | None = None,
    *,
    strategy: RepositoryStrategyName = "grouped",
) -> RepositoryMatch | None:
    """Dispatch to the configured repository scoring strategy.

    Raises:
        ValueError: for an unknown strategy name.
    """
    if not repository:
        return None
    if strategy == "grouped":
        match = find_best_clause_type_match(
            text, repository, GROUPED_THRESHOLD if threshold is None else threshold,
        )
    elif strategy == "individual":
        match = match_clause_from_repository(
            text, repository, INDIVIDUAL_THRESHOLD if threshold is None else threshold,
        )
    else:
        raise ValueError(f"Unknown repository strategy: {strategy!r}")
    if match is not None:
        log.debug(
            "Repository match %s (score %.3f, clause %s)",
            match.clause_type, match.score, match.matched_clause_id,
        )
    return match
