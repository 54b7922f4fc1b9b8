"""Clause-type vocabulary: canonical names, title synonyms, custom types.

The caller keeps user-defined clause types in its own key-value store (two
JSON-array entries). The engine only ever receives a read-only
``ClauseVocabulary`` built from those entries.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import orjson

log = logging.getLogger(__name__)

GENERIC_CLAUSE_TYPE = "General Clause"
GENERIC_TYPES: frozenset[str] = frozenset({GENERIC_CLAUSE_TYPE, "Other"})

CUSTOM_TYPES_KEY = "customClauseTypes"
DELETED_TYPES_KEY = "customClauseTypes_deleted"

CANONICAL_CLAUSE_TYPES: tuple[str, ...] = (
    "Document Name",
    "Parties",
    "Agreement Date",
    "Effective Date",
    "Expiration Date",
    "Renewal Term",
    "Notice Period",
    "Governing Law",
    "Most Favored Nation",
    "Competitive Restriction",
    "Non-Compete",
    "Exclusivity",
    "No-Solicit",
    "Non-Disparagement",
    "Termination",
    "Rofr/Rofo/Rofn",
    "Change of Control",
    "Anti-Assignment",
    "Revenue/Profit Sharing",
    "Price Restrictions",
    "Minimum Commitment",
    "Volume Restriction",
    "Ip Ownership",
    "License Grant",
    "Source Code Escrow",
    "Post-Termination Services",
    "Audit Rights",
    "Liability Cap",
    "Liquidated Damages",
    "Warranty Duration",
    "Insurance",
    "Covenant Not To Sue",
    "Third Party Beneficiary",
    "Indemnification",
    "Confidentiality",
    "Force Majeure",
    "Payment Terms",
    "Dispute Resolution",
    "Severability",
    "Amendment",
    "Modification",
    "Waiver",
    "Entire Agreement",
    "Counterparts",
)

# Title keyword -> clause type. Order matters: first hit wins, so the more
# specific phrases precede the bare words they contain.
TITLE_SYNONYMS: tuple[tuple[str, str], ...] = (
    ("indemnity", "Indemnification"),
    ("indemnification", "Indemnification"),
    ("limitation of liability", "Liability Cap"),
    ("liability", "Liability Cap"),
    ("confidentiality", "Confidentiality"),
    ("proprietary", "Confidentiality"),
    ("termination", "Termination"),
    ("term", "Termination"),
    ("force majeure", "Force Majeure"),
    ("intellectual property", "Ip Ownership"),
    ("ip", "Ip Ownership"),
    ("ownership", "Ip Ownership"),
    ("warranty", "Warranty Duration"),
    ("guarantee", "Warranty Duration"),
    ("payment", "Payment Terms"),
    ("fee", "Payment Terms"),
    ("non-compete", "Non-Compete"),
    ("noncompete", "Non-Compete"),
    ("governing law", "Governing Law"),
    ("law", "Governing Law"),
    ("assignment", "Anti-Assignment"),
    ("transfer", "Anti-Assignment"),
    ("notice", "Notice Period"),
    ("most favored nation", "Most Favored Nation"),
    ("exclusivity", "Exclusivity"),
    ("solicit", "No-Solicit"),
    ("disparage", "Non-Disparagement"),
    ("rofr", "Rofr/Rofo/Rofn"),
    ("rofo", "Rofr/Rofo/Rofn"),
    ("refusal", "Rofr/Rofo/Rofn"),
    ("change of control", "Change of Control"),
    ("revenue", "Revenue/Profit Sharing"),
    ("profit", "Revenue/Profit Sharing"),
    ("sharing", "Revenue/Profit Sharing"),
    ("commitment", "Minimum Commitment"),
    ("restriction", "Volume Restriction"),
    ("license", "License Grant"),
    ("escrow", "Source Code Escrow"),
    ("audit", "Audit Rights"),
    ("liquidated", "Liquidated Damages"),
    ("insurance", "Insurance"),
    ("effective", "Effective Date"),
    ("expiration", "Expiration Date"),
    ("renewal", "Renewal Term"),
)


def match_title_synonym(title: str) -> str | None:
    """Map a header title to a canonical type via ``TITLE_SYNONYMS``."""
    lower = title.lower()
    for key, clause_type in TITLE_SYNONYMS:
        if key in lower:
            return clause_type
    return None


@dataclass(frozen=True, slots=True)
class ClauseVocabulary:
    """Read-only set of clause-type names available to the classifier."""

    canonical: tuple[str, ...] = CANONICAL_CLAUSE_TYPES
    custom: tuple[str, ...] = ()
    deleted: frozenset[str] = field(default_factory=frozenset)

    def types(self) -> tuple[str, ...]:
        """Canonical then custom names, de-duplicated in order, minus deleted."""
        seen: set[str] = set()
        out: list[str] = []
        for name in (*self.canonical, *self.custom):
            if name in seen or name in self.deleted:
                continue
            seen.add(name)
            out.append(name)
        return tuple(out)

    def find_in_text(self, text: str) -> str | None:
        """First vocabulary type appearing verbatim (case-insensitive) in text."""
        lower = text.lower()
        for name in self.types():
            if name.lower() in lower:
                return name
        return None

    @classmethod
    def from_store(cls, store: Mapping[str, Any]) -> ClauseVocabulary:
        """Build from the caller's key-value store entries.

        Each entry may be a JSON-encoded array string or an already-decoded
        list. Malformed entries are logged and ignored.
        """
        return cls(
            custom=tuple(_read_names(store.get(CUSTOM_TYPES_KEY), CUSTOM_TYPES_KEY)),
            deleted=frozenset(_read_names(store.get(DELETED_TYPES_KEY), DELETED_TYPES_KEY)),
        )


def _read_names(raw: Any, key: str) -> list[str]:
    if raw is None:
        return []
    value = raw
    if isinstance(raw, (str, bytes)):
        try:
            value = orjson.loads(raw)
        except orjson.JSONDecodeError:
            log.warning("Ignoring malformed vocabulary entry %s", key)
            return []
    if not isinstance(value, list):
        log.warning("Ignoring non-array vocabulary entry %s", key)
        return []
    return [name.strip() for name in _strings(value) if name.strip()]


def _strings(values: Iterable[Any]) -> Iterable[str]:
    return (v for v in values if isinstance(v, str))


DEFAULT_VOCABULARY = ClauseVocabulary()
