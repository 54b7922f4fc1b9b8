"""Core types shared by the extraction pipeline.

Type hierarchy:
  TypeDecision     classifier verdict for one block or sub-clause
  ExtractedClause  emitted clause record (the engine's only output)

All records are frozen; the engine never mutates one after emitting it.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Literal

from clauselab.analysis import assess_balance

if TYPE_CHECKING:
    from clauselab.config import ExtractionConfig

type ClassifierStage = Literal[
    "header",
    "keyword",
    "repository",
    "vocabulary",
    "generic",
    "boilerplate",
]

# Repository provenance keys in the caller's camelCase wire format
_WIRE_KEYS = {
    "matched_from_repository": "matchedFromRepository",
    "similarity_score": "similarityScore",
}


@dataclass(frozen=True, slots=True)
class TypeDecision:
    """Which clause type a block was assigned, and by which stage."""

    clause_type: str
    stage: ClassifierStage
    confidence: float = 0.0
    matched_from_repository: bool = False
    similarity_score: float = 0.0
    matched_clause_id: str | None = None


@dataclass(frozen=True, slots=True)
class ExtractedClause:
    """One clause found in a document.

    ``clause_no`` is the display label of the enclosing main clause ("" when
    none was recognized); sub-clauses split out of a catch-all section carry
    their parent's label.
    """

    clause_type: str
    clause_no: str
    clause_text: str
    preferred_position: str
    party_role: str
    complexity: int
    balance: int
    matched_from_repository: bool = False
    similarity_score: float = 0.0


def clause_to_dict(clause: ExtractedClause, *, camel_case: bool = False) -> dict[str, Any]:
    """Convert an ExtractedClause to a JSON-serializable dict.

    ``similarity_score`` is 0.0 unless a repository match decided the type.
    With ``camel_case`` the provenance keys use the caller's wire names.
    """
    payload = asdict(clause)
    if camel_case:
        payload = {_WIRE_KEYS.get(k, k): v for k, v in payload.items()}
    return payload


def build_clause(
    decision: TypeDecision,
    clause_no: str,
    clause_text: str,
    *,
    config: ExtractionConfig,
) -> ExtractedClause:
    """Assemble the emitted record for a classified block or sub-clause."""
    return ExtractedClause(
        clause_type=decision.clause_type,
        clause_no=clause_no,
        clause_text=clause_text,
        preferred_position=f"Standard legal position for {decision.clause_type}",
        party_role=config.default_party_role,
        complexity=config.default_complexity,
        balance=assess_balance(clause_text).score,
        matched_from_repository=decision.matched_from_repository,
        similarity_score=decision.similarity_score,
    )
