"""Lexicon-based sentiment scoring for short mentions."""

from __future__ import annotations

import re

# ── Lexicon ────────────────────────────────────────────────────────────────
SENTIMENT_WORDS: dict[str, int] = {
    "love": 2, "great": 2, "awesome": 2, "amazing": 3, "good": 1, "nice": 1,
    "happy": 1, "like": 1, "excellent": 3,
    "bad": -2, "terrible": -3, "hate": -3, "awful": -3, "disappointed": -2,
    "issue": -1, "problem": -2, "bug": -2, "stuck": -1, "slow": -1, "urgent": -1,
    "outage": -3, "angry": -2, "frustrated": -2, "fixed": 1, "helpful": 2,
}

_STRIP_RE = re.compile(r"[^a-z0-9\s#@]")

# Raw sums are clamped to ±_CLAMP and then divided by it
_CLAMP = 6

POSITIVE = "positive"
NEUTRAL = "neutral"
NEGATIVE = "negative"

_POSITIVE_THRESHOLD = 0.4
_NEGATIVE_THRESHOLD = -0.4


def tokenize(text: str | None) -> list[str]:
    """Lower-case *text*, keep ``a-z0-9#@`` and whitespace, split into tokens."""
    cleaned = _STRIP_RE.sub("", (text or "").lower())
    return cleaned.split()


def score(text: str | None) -> float:
    """Return the normalised sentiment of *text* in ``[-1.0, 1.0]``."""
    raw = sum(SENTIMENT_WORDS.get(token, 0) for token in tokenize(text))
    raw = max(-_CLAMP, min(_CLAMP, raw))
    return round(raw / _CLAMP, 3)


def label(value: float) -> str:
    if value >= _POSITIVE_THRESHOLD:
        return POSITIVE
    if value <= _NEGATIVE_THRESHOLD:
        return NEGATIVE
    return NEUTRAL
