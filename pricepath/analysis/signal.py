"""Resolve the overall signal direction from the most probable scenario."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from pricepath.models import ScenarioPath, SignalClassification

DIRECTIONAL_THRESHOLD = 10.0  # percent
STRONG_THRESHOLD = 20.0  # percent

# Tie-break order when two scenarios share the top probability
_TIE_ORDER = {"base": 0, "bullish": 1, "bearish": 2}


def most_likely_path(paths: Sequence[ScenarioPath]) -> ScenarioPath:
    if not paths:
        raise ValueError("No scenario paths")
    return min(paths, key=lambda p: (-p.probability, _TIE_ORDER.get(p.scenario, 3)))


def resolve_direction(paths: Sequence[ScenarioPath]) -> tuple[str, str]:
    """Return ``(direction, strength)`` for the most likely path."""
    top = most_likely_path(paths)
    ret = top.expected_return
    if top.scenario == "bullish" and ret > DIRECTIONAL_THRESHOLD:
        return "bullish", "strong" if ret > STRONG_THRESHOLD else "moderate"
    if top.scenario == "bearish" and ret < -DIRECTIONAL_THRESHOLD:
        return "bearish", "strong" if ret < -STRONG_THRESHOLD else "moderate"
    return "neutral", "weak"


def apply_resolved_direction(
    signal: SignalClassification,
    paths: Sequence[ScenarioPath],
    ticker: str,
) -> SignalClassification:
    """Copy of ``signal`` with direction/strength overridden by the scenarios.

    Other fields pass through; ``ticker`` is guaranteed to be in ``tickers``.
    """
    direction, strength = resolve_direction(paths)
    tickers = list(signal.tickers)
    if ticker not in tickers:
        tickers.append(ticker)

    top = most_likely_path(paths)
    metadata = dict(signal.metadata)
    metadata["baseline_direction"] = signal.direction
    metadata["most_likely_scenario"] = top.scenario
    metadata["scenarios"] = {
        p.scenario: {
            "probability": p.probability,
            "expected_return": p.expected_return,
            "confidence": p.confidence,
        }
        for p in paths
    }
    return replace(
        signal,
        direction=direction,
        strength=strength,
        tickers=tickers,
        metadata=metadata,
    )
