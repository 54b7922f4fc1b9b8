"""Clause-type classification: an ordered chain of rule-based strategies.

Chain order (first confident decision wins):
    1. HeaderTitleStrategy  leading title phrase through the synonym table
    2. KeywordStrategy      fixed-priority keyword scan of the block opening
    3. RepositoryStrategy   similarity to caller-labeled clauses; may override
                            a weak or generic earlier decision
    4. VocabularyStrategy   any vocabulary type named verbatim in short blocks
    5. GenericStrategy      "General Clause" for substantial legal text

Each strategy sees the decision reached so far and returns a replacement or
None. A block with no decision after the chain is dropped from output.

No file I/O; pure functions over the block text and injected inputs.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from clauselab.config import DEFAULT_CONFIG, ExtractionConfig
from clauselab.extraction_types import TypeDecision
from clauselab.headings import parse_header_title
from clauselab.repository import RepositoryClause, best_match
from clauselab.vocabulary import (
    DEFAULT_VOCABULARY,
    GENERIC_CLAUSE_TYPE,
    ClauseVocabulary,
    match_title_synonym,
)

log = logging.getLogger(__name__)

# ── Keyword Rules ───────────────────────────────────────────────────────

# (needles, clause type): any needle present in the opening window fires.
# Scanned top to bottom; the first firing rule wins.
KEYWORD_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("confidential", "proprietary"), "Confidentiality"),
    (("liability", "cap", "uncapped"), "Liability Cap"),
    (("indemnif",), "Indemnification"),
    (("terminat",), "Termination"),
    (("payment", "fee", "royalty"), "Payment Terms"),
    (("intellectual", "ipr", "ownership"), "Ip Ownership"),
    (("law", "jurisdiction"), "Governing Law"),
    (("arbitration", "dispute"), "Dispute Resolution"),
    (("notice",), "Notice Period"),
    (("force majeure",), "Force Majeure"),
    (("severability", "invalid"), "Severability"),
    (("assignment", "transfer"), "Anti-Assignment"),
    (("warranty", "guarantee"), "Warranty Duration"),
    (("favored nation",), "Most Favored Nation"),
    (("non-compete", "noncompete"), "Non-Compete"),
    (("exclusiv",), "Exclusivity"),
    (("non-disparage", "nondisparage"), "Non-Disparagement"),
    (("solicit",), "No-Solicit"),
    (("change of control",), "Change of Control"),
    (("first refusal", "rofr"), "Rofr/Rofo/Rofn"),
    (("revenue share", "profit share"), "Revenue/Profit Sharing"),
    (("price restriction",), "Price Restrictions"),
    (("minimum commitment", "commits to purchase"), "Minimum Commitment"),
    (("volume restriction",), "Volume Restriction"),
    (("license", "grant"), "License Grant"),
    (("escrow",), "Source Code Escrow"),
    (("audit",), "Audit Rights"),
    (("liquidated damages",), "Liquidated Damages"),
    (("insurance",), "Insurance"),
    (("covenant not to sue",), "Covenant Not To Sue"),
    (("third party beneficiary",), "Third Party Beneficiary"),
    (("effective date",), "Effective Date"),
    (("expiration date",), "Expiration Date"),
    (("renewal term",), "Renewal Term"),
)

# Contractual language that keeps a short, untyped block as "General Clause"
RE_LEGAL_MARKER: re.Pattern[str] = re.compile(r"shall|hereby|party|agreement", re.IGNORECASE)

# Confidence attached to each stage's decision (repository uses its score)
_HEADER_CONFIDENCE = 0.9
_KEYWORD_CONFIDENCE = 0.7
_VOCABULARY_CONFIDENCE = 0.4
_GENERIC_CONFIDENCE = 0.1


def clean_title(title: str) -> str:
    """Map a header title to a clause type; unmapped titles are kept as-is."""
    trimmed = title.strip()
    return match_title_synonym(trimmed) or trimmed


def _scan_keywords(text: str, config: ExtractionConfig) -> str | None:
    lower = text.lower()
    early = lower[:config.early_window]
    if "between" in early and "party" in early:
        return "Parties"
    if "agreement" in early and ("made" in early or "dated" in early):
        return "Document Name"

    window = lower[:config.keyword_window].strip()
    for needles, clause_type in KEYWORD_RULES:
        if any(n in window for n in needles):
            return clause_type
    return None


def detect_clause_type(text: str, config: ExtractionConfig = DEFAULT_CONFIG) -> str | None:
    """Keyword-scan the opening of ``text`` for a clause type."""
    return _scan_keywords(text, config)


# ── Strategy Chain ──────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ClassificationContext:
    """Inputs every strategy may consult for one block."""

    text: str
    repository: Sequence[RepositoryClause] = ()
    vocabulary: ClauseVocabulary = DEFAULT_VOCABULARY
    config: ExtractionConfig = DEFAULT_CONFIG
    title: str | None = None


class ClassifierStrategy(Protocol):
    name: str

    def attempt(
        self, ctx: ClassificationContext, current: TypeDecision | None,
    ) -> TypeDecision | None: ...


@dataclass(frozen=True, slots=True)
class HeaderTitleStrategy:
    name: str = "header"

    def attempt(
        self, ctx: ClassificationContext, current: TypeDecision | None,
    ) -> TypeDecision | None:
        if current is not None or not ctx.title:
            return None
        return TypeDecision(clean_title(ctx.title), "header", _HEADER_CONFIDENCE)


@dataclass(frozen=True, slots=True)
class KeywordStrategy:
    name: str = "keyword"

    def attempt(
        self, ctx: ClassificationContext, current: TypeDecision | None,
    ) -> TypeDecision | None:
        if current is not None:
            return None
        clause_type = _scan_keywords(ctx.text, ctx.config)
        if clause_type is None:
            return None
        return TypeDecision(clause_type, "keyword", _KEYWORD_CONFIDENCE)


@dataclass(frozen=True, slots=True)
class RepositoryStrategy:
    """Repository evidence overrides weak guesses, not strong ones."""

    name: str = "repository"

    def attempt(
        self, ctx: ClassificationContext, current: TypeDecision | None,
    ) -> TypeDecision | None:
        if not ctx.repository:
            return None
        match = best_match(
            ctx.text,
            ctx.repository,
            ctx.config.repository_threshold,
            strategy=ctx.config.repository_strategy,
        )
        if match is None:
            return None
        weak = current is None or current.clause_type == GENERIC_CLAUSE_TYPE
        if not weak and match.score <= ctx.config.repository_override_score:
            return None
        if current is not None:
            log.debug(
                "Repository match %s overrides %s (score %.3f)",
                match.clause_type, current.clause_type, match.score,
            )
        return TypeDecision(
            clause_type=match.clause_type,
            stage="repository",
            confidence=match.score,
            matched_from_repository=True,
            similarity_score=match.score,
            matched_clause_id=match.matched_clause_id,
        )


@dataclass(frozen=True, slots=True)
class VocabularyStrategy:
    name: str = "vocabulary"

    def attempt(
        self, ctx: ClassificationContext, current: TypeDecision | None,
    ) -> TypeDecision | None:
        if current is not None or len(ctx.text) >= ctx.config.vocabulary_max_chars:
            return None
        clause_type = ctx.vocabulary.find_in_text(ctx.text)
        if clause_type is None:
            return None
        return TypeDecision(clause_type, "vocabulary", _VOCABULARY_CONFIDENCE)


@dataclass(frozen=True, slots=True)
class GenericStrategy:
    name: str = "generic"

    def attempt(
        self, ctx: ClassificationContext, current: TypeDecision | None,
    ) -> TypeDecision | None:
        if current is not None:
            return None
        if len(ctx.text) > ctx.config.generic_min_chars or RE_LEGAL_MARKER.search(ctx.text):
            return TypeDecision(GENERIC_CLAUSE_TYPE, "generic", _GENERIC_CONFIDENCE)
        return None


DEFAULT_CHAIN: tuple[ClassifierStrategy, ...] = (
    HeaderTitleStrategy(),
    KeywordStrategy(),
    RepositoryStrategy(),
    VocabularyStrategy(),
    GenericStrategy(),
)


@dataclass(frozen=True, slots=True)
class BlockClassifier:
    """Runs a strategy chain over blocks."""

    chain: tuple[ClassifierStrategy, ...] = DEFAULT_CHAIN

    def classify(self, ctx: ClassificationContext) -> TypeDecision | None:
        current: TypeDecision | None = None
        for strategy in self.chain:
            decision = strategy.attempt(ctx, current)
            if decision is not None:
                current = decision
        return current


def classify_block(
    block: str,
    repository: Sequence[RepositoryClause] = (),
    *,
    vocabulary: ClauseVocabulary = DEFAULT_VOCABULARY,
    config: ExtractionConfig = DEFAULT_CONFIG,
    title: str | None = None,
) -> TypeDecision | None:
    """Assign a clause type to ``block``, or None when it should be dropped.

    ``title`` defaults to the parsed header title of the block.
    """
    ctx = ClassificationContext(
        text=block,
        repository=repository,
        vocabulary=vocabulary,
        config=config,
        title=title if title is not None else parse_header_title(block),
    )
    return BlockClassifier().classify(ctx)
