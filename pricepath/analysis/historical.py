"""Historical drift / volatility estimation from daily closes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from pricepath.config import section
from pricepath.errors import InsufficientDataError
from pricepath.models import PriceBar
from pricepath.utils.logger import setup_logger

logger = setup_logger("historical")

MIN_PRICE_POINTS: int = int(section("simulation").get("min_price_points", 20))


@dataclass(frozen=True)
class HistoricalMetrics:
    drift: float  # mean daily log return
    volatility: float  # sample std of daily log returns
    current_price: float
    observations: int


def closes_from_bars(bars: Sequence[PriceBar]) -> pd.Series:
    """Ordered close series, dropping non-positive / non-finite values."""
    closes = pd.Series(
        [b.close for b in bars],
        index=pd.to_datetime([b.timestamp for b in bars]),
        dtype="float64",
    )
    closes = closes[np.isfinite(closes) & (closes > 0)]
    return closes.sort_index(kind="stable")


def log_returns(closes: pd.Series) -> pd.Series:
    return np.log(closes / closes.shift(1)).dropna()


def estimate_historical_metrics(
    bars: Sequence[PriceBar],
    ticker: str = "",
    min_points: int = MIN_PRICE_POINTS,
) -> HistoricalMetrics:
    """Estimate per-day drift and volatility of log returns.

    Raises:
        InsufficientDataError: fewer than ``min_points`` usable closes.
    """
    closes = closes_from_bars(bars)
    if len(closes) < min_points:
        raise InsufficientDataError(ticker or "ticker", len(closes), min_points)

    returns = log_returns(closes)
    drift = float(returns.mean())
    volatility = float(returns.std(ddof=1))
    if not np.isfinite(volatility):
        volatility = 0.0

    logger.debug(
        "%s: %d closes, drift=%.6f vol=%.6f",
        ticker, len(closes), drift, volatility,
    )
    return HistoricalMetrics(
        drift=drift,
        volatility=max(volatility, 0.0),
        current_price=float(closes.iloc[-1]),
        observations=len(closes),
    )
