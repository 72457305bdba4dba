"""Scenario probability and confidence assignment."""

from __future__ import annotations

from typing import Mapping

PRIORS: dict[str, float] = {"bullish": 0.30, "base": 0.40, "bearish": 0.30}
DIRECTIONAL_TILT = 0.15
BASE_DECAY = 0.10
PROBABILITY_FLOOR = 0.05


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def scenario_probabilities(
    sentiment_bias: float,
    priors: Mapping[str, float] = PRIORS,
) -> dict[str, float]:
    """Sentiment-shifted scenario probabilities, rounded to 2 dp, summing to 1.

    Positive bias moves mass from bearish to bullish; any strong bias (either
    sign) pulls mass away from the base case.
    """
    tilt = DIRECTIONAL_TILT * sentiment_bias
    raw = {
        "bullish": priors["bullish"] + tilt,
        "base": priors["base"] - BASE_DECAY * abs(sentiment_bias),
        "bearish": priors["bearish"] - tilt,
    }
    raw = {k: max(PROBABILITY_FLOOR, v) for k, v in raw.items()}
    total = sum(raw.values())
    rounded = {k: round(v / total, 2) for k, v in raw.items()}

    # Park the rounding residual on the largest bucket.
    residual = round(1.0 - sum(rounded.values()), 2)
    if residual:
        top = max(rounded, key=lambda k: rounded[k])
        rounded[top] = round(rounded[top] + residual, 2)
    return rounded


def scenario_confidence(scenario: str, sentiment_bias: float) -> float:
    """Confidence in [0, 1]; rises when the scenario agrees with sentiment."""
    if scenario == "bullish":
        value = 0.5 + 0.3 * sentiment_bias
    elif scenario == "bearish":
        value = 0.5 - 0.3 * sentiment_bias
    else:
        value = 0.6 - 0.2 * abs(sentiment_bias)
    return round(_clamp01(value), 2)


def assign_probabilities(paths, sentiment_bias: float):
    """Fill ``probability`` and ``confidence`` on each ScenarioPath in place."""
    probabilities = scenario_probabilities(sentiment_bias)
    for path in paths:
        path.probability = probabilities[path.scenario]
        path.confidence = scenario_confidence(path.scenario, sentiment_bias)
    return paths
