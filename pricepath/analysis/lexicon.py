"""Keyword lexicon for social-mention sentiment.

Kept as data so it can be versioned, tested and extended independently of
the scoring code. Each term maps to ``(direction, weight)``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

LEXICON_VERSION = "2024.1"

BULLISH = "bullish"
BEARISH = "bearish"

_BULLISH_TERMS: dict[str, float] = {
    "bullish": 1.0,
    "moon": 1.0,
    "mooning": 1.0,
    "rocket": 1.0,
    "skyrocket": 1.25,
    "pump": 0.75,
    "breakout": 1.0,
    "rally": 1.0,
    "surge": 1.0,
    "explosion": 0.75,
    "momentum": 0.75,
    "buy": 0.75,
    "buying": 0.75,
    "long": 0.5,
    "calls": 0.5,
    "accumulating": 1.0,
    "accumulate": 1.0,
    "uptrend": 1.0,
    "undervalued": 0.75,
    "squeeze": 0.75,
}

_BEARISH_TERMS: dict[str, float] = {
    "bearish": 1.0,
    "crash": 1.25,
    "dump": 1.0,
    "dumping": 1.0,
    "sell": 0.75,
    "selling": 0.75,
    "short": 0.5,
    "puts": 0.5,
    "plunge": 1.0,
    "decline": 0.75,
    "downtrend": 1.0,
    "resistance": 0.5,
    "overbought": 0.75,
    "bubble": 1.0,
    "overvalued": 0.75,
    "correction": 0.75,
    "tank": 0.75,
}


def _build() -> Mapping[str, tuple[str, float]]:
    table: dict[str, tuple[str, float]] = {}
    for term, weight in _BULLISH_TERMS.items():
        table[term] = (BULLISH, weight)
    for term, weight in _BEARISH_TERMS.items():
        table[term] = (BEARISH, weight)
    return MappingProxyType(table)


LEXICON: Mapping[str, tuple[str, float]] = _build()


def terms_for(direction: str) -> frozenset[str]:
    return frozenset(t for t, (d, _) in LEXICON.items() if d == direction)


def extend_lexicon(
    base: Mapping[str, tuple[str, float]],
    extra: Mapping[str, tuple[str, float]],
) -> Mapping[str, tuple[str, float]]:
    """Return a new read-only lexicon with ``extra`` entries merged over ``base``."""
    for term, (direction, weight) in extra.items():
        if direction not in (BULLISH, BEARISH):
            raise ValueError(f"Unknown direction for {term!r}: {direction}")
        if weight <= 0:
            raise ValueError(f"Weight for {term!r} must be positive")
    merged = dict(base)
    merged.update({t.lower(): v for t, v in extra.items()})
    return MappingProxyType(merged)
