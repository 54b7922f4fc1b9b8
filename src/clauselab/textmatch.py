"""Reusable text-matching primitives for repository and keyword scoring.

Pure text operations with zero domain dependencies. All similarity scores
are Jaccard coefficients in [0, 1]; empty inputs score 0.
"""
from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

_PUNCT_RE = re.compile(r"[^\w\s]")
_WS_RE = re.compile(r"\s+")

_MIN_WORD_LEN = 3


@dataclass(frozen=True, slots=True)
class PhraseHit:
    """A phrase match at a specific offset. Domain-neutral primitive."""

    phrase: str
    char_offset: int


def word_set(text: str) -> frozenset[str]:
    """Lowercased, punctuation-stripped words longer than 2 chars."""
    cleaned = _PUNCT_RE.sub(" ", text.lower())
    return frozenset(w for w in cleaned.split() if len(w) >= _MIN_WORD_LEN)


def ngram_set(text: str, n: int) -> frozenset[str]:
    """Contiguous word n-grams over the lowercased, punctuation-stripped text.

    Texts shorter than ``n`` words have no n-grams.
    """
    cleaned = _WS_RE.sub(" ", _PUNCT_RE.sub(" ", text.lower())).strip()
    words = [w for w in cleaned.split(" ") if w]
    return frozenset(" ".join(words[i:i + n]) for i in range(len(words) - n + 1))


def jaccard(a: frozenset[str], b: frozenset[str]) -> float:
    """|a & b| / |a | b|, 0.0 when both are empty."""
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union


def word_similarity(text1: str, text2: str) -> float:
    """Jaccard similarity of the two texts' significant-word sets."""
    return jaccard(word_set(text1), word_set(text2))


def ngram_similarity(text1: str, text2: str, n: int = 3) -> float:
    """Jaccard similarity of the two texts' word n-gram sets."""
    return jaccard(ngram_set(text1, n), ngram_set(text2, n))


def combined_similarity(
    text1: str,
    text2: str,
    n: int,
    word_weight: float,
) -> float:
    """Weighted blend: ``word_weight * words + (1 - word_weight) * n-grams``.

    Args:
        text1: First text.
        text2: Second text.
        n: N-gram size for the phrase-overlap component.
        word_weight: Weight in [0, 1] given to the word-set component.

    Returns:
        Score in [0, 1].
    """
    words = word_similarity(text1, text2)
    grams = ngram_similarity(text1, text2, n)
    return word_weight * words + (1.0 - word_weight) * grams


def heading_matches(
    heading: str,
    patterns: Iterable[str],
    *,
    case_insensitive: bool = True,
) -> str | None:
    """Check if a heading matches any pattern.

    Supports exact substring match and whitespace-collapsed containment
    (handles headings where extraction split a word: "MISCEL LANEOUS").

    Returns:
        The matched pattern string, or None if no match.
    """
    h = heading.lower() if case_insensitive else heading
    h_nospace = h.replace(" ", "")
    for pattern in patterns:
        p = pattern.lower() if case_insensitive else pattern
        if p in h or p.replace(" ", "") in h_nospace:
            return pattern
    return None


def find_phrases(text_lower: str, phrases: Iterable[str]) -> list[PhraseHit]:
    """First occurrence of each phrase in pre-lowercased text."""
    hits: list[PhraseHit] = []
    for phrase in phrases:
        pos = text_lower.find(phrase.lower())
        if pos >= 0:
            hits.append(PhraseHit(phrase, pos))
    return hits
