"""Per-scenario drift / volatility calibration."""

from __future__ import annotations

from dataclasses import dataclass

from pricepath.config import section
from pricepath.models import SCENARIOS, TRADING_DAYS

_CAL = section("simulation").get("calibration", {}) or {}

SENTIMENT_SCALE: float = float(_CAL.get("sentiment_scale", 0.15))
MAX_SENTIMENT_ADJUSTMENT: float = float(_CAL.get("max_sentiment_adjustment", 0.15))
DRIFT_OFFSET_SIGMA: float = float(_CAL.get("drift_offset_sigma", 0.10))

# Bullish paths trend more smoothly; bearish paths carry wider uncertainty.
VOL_MULTIPLIERS: dict[str, float] = {
    "bullish": float(_CAL.get("bullish_vol_multiplier", 0.9)),
    "base": 1.0,
    "bearish": float(_CAL.get("bearish_vol_multiplier", 1.1)),
}


@dataclass(frozen=True)
class ScenarioParameters:
    drift: float  # per-day
    volatility: float  # per-day


@dataclass(frozen=True)
class ScenarioCalibration:
    sentiment_adjustment: float  # annualized
    scenarios: dict[str, ScenarioParameters]

    def __getitem__(self, scenario: str) -> ScenarioParameters:
        return self.scenarios[scenario]


def sentiment_adjustment(bias: float, scale: float = SENTIMENT_SCALE) -> float:
    """Annualized drift tilt implied by a sentiment bias, bounded to +/-0.15."""
    cap = MAX_SENTIMENT_ADJUSTMENT
    return max(-cap, min(cap, bias * scale))


def calibrate_scenarios(
    drift: float,
    volatility: float,
    sentiment_bias: float,
) -> ScenarioCalibration:
    """Split historical drift into bullish / base / bearish parameter sets.

    The sentiment tilt shifts all three scenarios together; the bullish and
    bearish branches sit a symmetric, volatility-proportional offset above
    and below base, so bullish > base > bearish whenever volatility > 0.
    """
    if volatility < 0:
        raise ValueError("volatility must be non-negative")

    adjustment = sentiment_adjustment(sentiment_bias)
    base_drift = drift + adjustment / TRADING_DAYS
    offset = DRIFT_OFFSET_SIGMA * volatility

    drifts = {
        "bullish": base_drift + offset,
        "base": base_drift,
        "bearish": base_drift - offset,
    }
    scenarios = {
        name: ScenarioParameters(
            drift=drifts[name],
            volatility=volatility * VOL_MULTIPLIERS[name],
        )
        for name in SCENARIOS
    }
    return ScenarioCalibration(sentiment_adjustment=adjustment, scenarios=scenarios)
