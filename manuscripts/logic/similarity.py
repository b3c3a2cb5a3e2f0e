"""
Bigram similarity between two text blobs.

Dice coefficient over the multisets of overlapping character bigrams, with
whitespace removed and case folded, scaled to a percentage in [0, 100].
"""
from __future__ import annotations

import re
from collections import Counter

_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Remove all whitespace and lower-case."""
    return _WHITESPACE_RE.sub("", text).lower()


def bigrams(text: str) -> Counter:
    """Multiset of overlapping 2-character windows."""
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def similarity(a: str, b: str) -> float:
    """Return the similarity of *a* and *b* as a percentage.

    Identical inputs score 100. After normalization two empty strings score
    100, one empty string scores 0. Two different single characters have no
    bigrams at all and score 0.
    """
    if a == b:
        return 100.0

    clean_a = normalize(a)
    clean_b = normalize(b)

    if not clean_a and not clean_b:
        return 100.0
    if not clean_a or not clean_b:
        return 0.0
    if clean_a == clean_b:
        return 100.0

    denominator = (len(clean_a) - 1) + (len(clean_b) - 1)
    if denominator <= 0:
        return 0.0

    grams_a = bigrams(clean_a)
    grams_b = bigrams(clean_b)
    intersection = sum(min(count, grams_b[gram]) for gram, count in grams_a.items() if gram in grams_b)

    score = 200.0 * intersection / denominator
    return min(100.0, max(0.0, score))
