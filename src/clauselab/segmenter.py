"""Block segmentation: cut a prepared document into main-clause blocks.

Each block starts at a main-clause header and carries every sub-clause up to
the next main header. Fragments that do not start with a header are glued
back onto the preceding block, so sub-clause markers that happen to look like
main headers never orphan text.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from clauselab.numbering import (
    FALLBACK_SCHEMAS,
    DetectedSchema,
    NumberingSchema,
    detect_schema,
    schema_pattern,
)

log = logging.getLogger(__name__)

_MIN_PIECE_CHARS = 10
_MIN_SEGMENTS = 3


@dataclass(frozen=True, slots=True)
class Block:
    """One main-clause-sized span of the document."""

    text: str
    first_line: str
    index: int


@dataclass(frozen=True, slots=True)
class Segmentation:
    """Segmenter output plus the diagnostics the extractor logs."""

    blocks: tuple[Block, ...]
    scheme_type: str
    preamble: str | None = None
    fallback: str | None = None

    @property
    def texts(self) -> list[str]:
        return [b.text for b in self.blocks]


def _first_line(text: str) -> str:
    return text.strip().split("\n", 1)[0].strip()


def _split(pattern: re.Pattern[str], text: str) -> list[str]:
    return [piece for piece in pattern.split(text) if piece.strip()]


def _resolve(text: str, schema: NumberingSchema | None) -> tuple[DetectedSchema, bool]:
    """Pick split/header patterns; the flag is True for a caller-declared scheme."""
    if schema is not None and schema.has_main_clause:
        pattern = schema_pattern(schema.main_clause)
        if pattern is not None:
            log.debug("Using explicit main clause schema: %s", schema.main_clause)
            return (
                DetectedSchema(
                    scheme_type=pattern.scheme,
                    split=pattern.split,
                    header=pattern.header,
                ),
                True,
            )
    return detect_schema(text), False


def segment_blocks(text: str, schema: NumberingSchema | None = None) -> Segmentation:
    """Split ``text`` into main-clause blocks.

    Order of operations:
      1. explicit schema split, else auto-detected split
      2. with an explicit schema, drop a leading preamble that does not start
         with a main-clause header
      3. with fewer than 3 pieces, try each fallback split in turn; the first
         producing 3+ pieces wins and supplies its own header pattern
      4. merge: pieces under 10 chars are dropped, pieces whose first line is
         not a main-clause header are appended to the previous block

    Never raises. A document with no recognizable structure comes back as a
    single block holding the whole text.
    """
    if not text or not text.strip():
        return Segmentation(blocks=(), scheme_type="none")

    detected, explicit = _resolve(text, schema)
    header = detected.header
    pieces = _split(detected.split, text)
    preamble: str | None = None
    fallback: str | None = None

    if explicit and len(pieces) > 1 and not header.match(_first_line(pieces[0])):
        preamble = pieces.pop(0)
        log.debug("Dropped preamble of %d chars", len(preamble))

    if len(pieces) < _MIN_SEGMENTS:
        for candidate in FALLBACK_SCHEMAS:
            alt = _split(candidate.split, text)
            if len(alt) >= _MIN_SEGMENTS:
                log.debug(
                    "Fallback split %s produced %d pieces", candidate.scheme_type, len(alt),
                )
                pieces = alt
                header = candidate.header
                fallback = candidate.scheme_type
                preamble = None
                break

    merged: list[str] = []
    for piece in pieces:
        chunk = piece.strip()
        if len(chunk) < _MIN_PIECE_CHARS:
            continue
        if not merged or header.match(_first_line(chunk)):
            merged.append(chunk)
        else:
            merged[-1] = f"{merged[-1]}\n\n{chunk}"

    if not merged:
        merged = [text.strip()]

    blocks = tuple(
        Block(text=chunk, first_line=_first_line(chunk), index=i)
        for i, chunk in enumerate(merged)
    )
    log.debug("Segmented document into %d blocks", len(blocks))
    return Segmentation(
        blocks=blocks,
        scheme_type=fallback or detected.scheme_type,
        preamble=preamble,
        fallback=fallback,
    )


def segment(text: str, schema: NumberingSchema | None = None) -> list[str]:
    """Convenience wrapper returning block texts only."""
    return segment_blocks(text, schema).texts

