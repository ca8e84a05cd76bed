"""Sparse term-frequency vectors and cosine similarity."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable


def vectorize(tokens: Iterable[str]) -> dict[str, int]:
    """Return a token → count mapping."""
    return dict(Counter(tokens))


def _sum_squares(vec: dict[str, int]) -> int:
    return sum(v * v for v in vec.values())


def cosine_similarity(a: dict[str, int], b: dict[str, int]) -> float:
    """Cosine of the angle between two sparse vectors; 0.0 if either is empty."""
    norm = math.sqrt(_sum_squares(a) * _sum_squares(b))
    if norm == 0:
        return 0.0
    # Walk the smaller vector only
    if len(a) > len(b):
        a, b = b, a
    dot = sum(count * b.get(term, 0) for term, count in a.items())
    return dot / norm
