"""Rule-based clause extraction entry point.

Pipeline:
  1. prepare_document     whitespace normalization, page-number and
                          running-header removal
  2. segment_blocks       main-clause blocks (explicit or detected schema)
  3. per block            noise filters, clause label, type classification
  4. catch-all sections   expanded into typed boilerplate sub-clauses

Pure and synchronous: no I/O, no shared state between calls. Malformed or
unstructured text degrades to fewer (or zero) clauses, never an exception.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from clauselab.classifier import classify_block
from clauselab.config import DEFAULT_CONFIG, ExtractionConfig
from clauselab.extraction_types import ExtractedClause, build_clause
from clauselab.headings import parse_clause_number, parse_header_title
from clauselab.miscellaneous import expand_catch_all, is_catch_all_section
from clauselab.normalization import normalize_text, prepare_document, strip_template_footer
from clauselab.numbering import NumberingSchema, split_regex
from clauselab.repository import RepositoryClause, coerce_repository
from clauselab.segmenter import segment_blocks
from clauselab.vocabulary import DEFAULT_VOCABULARY, ClauseVocabulary

log = logging.getLogger(__name__)


def _coerce_schema(schema: NumberingSchema | Mapping[str, Any] | None) -> NumberingSchema | None:
    if schema is None or isinstance(schema, NumberingSchema):
        return schema
    if not isinstance(schema, Mapping):
        log.warning("Ignoring numbering schema of type %s, detecting instead", type(schema).__name__)
        return None
    try:
        return NumberingSchema.from_dict(dict(schema))
    except ValueError as exc:
        log.warning("Ignoring invalid numbering schema, detecting instead: %s", exc)
        return None


def extract_clauses(
    document_text: str | None,
    repository_clauses: Iterable[RepositoryClause | Mapping[str, Any]] = (),
    schema: NumberingSchema | Mapping[str, Any] | None = None,
    *,
    vocabulary: ClauseVocabulary = DEFAULT_VOCABULARY,
    config: ExtractionConfig = DEFAULT_CONFIG,
) -> list[ExtractedClause]:
    """Extract typed clauses from contract text.

    Args:
        document_text: Plain text of the whole contract.
        repository_clauses: Previously labeled clauses used as similarity
            evidence; dataclass instances or caller mappings. Never mutated.
        schema: Caller-declared numbering convention; auto-detected when
            omitted, when its main clause is "none", or when the mapping
            names an unknown scheme.
        vocabulary: Clause-type names available to the vocabulary stage.
        config: Thresholds and defaults.

    Returns:
        Clauses in document order. No two share the same ``clause_text``.
    """
    numbering = _coerce_schema(schema)
    repository = coerce_repository(repository_clauses)
    log.debug("Repository has %d clauses for matching", len(repository))

    text = prepare_document(document_text)
    if not text:
        return []

    segmentation = segment_blocks(text, numbering)
    log.info(
        "Segmented %d blocks using %s schema%s",
        len(segmentation.blocks),
        segmentation.scheme_type,
        f" (fallback {segmentation.fallback})" if segmentation.fallback else "",
    )
    sub_split = (
        split_regex(numbering.sub_clause_1) if numbering is not None else None
    )

    clauses: list[ExtractedClause] = []
    seen_blocks: set[str] = set()
    emitted_texts: set[str] = set()

    def emit(clause: ExtractedClause) -> None:
        if not clause.clause_text or clause.clause_text in emitted_texts:
            return
        emitted_texts.add(clause.clause_text)
        clauses.append(clause)

    for block in segmentation.blocks:
        trimmed = block.text.strip()
        if len(trimmed) < config.min_block_chars or trimmed in seen_blocks:
            continue
        cleaned = strip_template_footer(trimmed)
        if len(cleaned) < config.min_cleaned_chars:
            continue

        number = parse_clause_number(cleaned)
        decision = classify_block(
            cleaned,
            repository,
            vocabulary=vocabulary,
            config=config,
            title=parse_header_title(cleaned),
        )
        if decision is None:
            log.debug("Dropping untyped block %d", block.index)
            continue
        seen_blocks.add(trimmed)

        if is_catch_all_section(number.clause_no):
            expanded = expand_catch_all(
                number.clause_no, cleaned, repository, config=config, sub_split=sub_split,
            )
            if expanded:
                for sub in expanded:
                    emit(sub)
                continue
            log.debug("Catch-all section %r kept undivided", number.clause_no)

        body = normalize_text(number.body_text) or normalize_text(cleaned)
        emit(build_clause(decision, number.clause_no, body, config=config))

    log.info(
        "Extracted %d clauses (%d matched from repository)",
        len(clauses),
        sum(1 for c in clauses if c.matched_from_repository),
    )
    return clauses
