"""Scenario price-path generation (one geometric random walk per scenario)."""

from __future__ import annotations

import math
from datetime import date, timedelta

import numpy as np
from scipy.stats import norm

from pricepath.models import CONFIDENCE_LEVEL, PricePoint

PRICE_FLOOR = 0.01


def z_score(confidence_level: float = CONFIDENCE_LEVEL) -> float:
    """Two-sided z-score, e.g. 1.96 for 0.95."""
    return float(norm.ppf(0.5 + confidence_level / 2.0))


def _round_price(value: float) -> float:
    return max(PRICE_FLOOR, round(float(value), 2))


def expected_return_pct(points: list[PricePoint], current_price: float) -> float:
    return round((points[-1].price - current_price) / current_price * 100.0, 2)


class PathGenerator:
    """Draws simulated daily prices with confidence bands.

    The random source is injected so runs are reproducible::

        gen = PathGenerator(np.random.default_rng(42))
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        confidence_level: float = CONFIDENCE_LEVEL,
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.confidence_level = confidence_level
        self._z = z_score(confidence_level)

    def generate(
        self,
        current_price: float,
        days_forward: int,
        drift: float,
        volatility: float,
        start: date | None = None,
    ) -> list[PricePoint]:
        """Return ``days_forward + 1`` points; index 0 is today at ``current_price``."""
        if current_price <= 0:
            raise ValueError("current_price must be positive")
        if days_forward < 1:
            raise ValueError("days_forward must be >= 1")

        start = start or date.today()
        shocks = self.rng.standard_normal(days_forward)
        prices = current_price * np.exp(np.cumsum(drift + volatility * shocks))

        points = [PricePoint(start, current_price, current_price, current_price)]
        for day, price in enumerate(prices, start=1):
            band = self._z * volatility * math.sqrt(day)
            rounded = _round_price(price)
            points.append(
                PricePoint(
                    date=start + timedelta(days=day),
                    price=rounded,
                    high=max(rounded, round(float(price * (1 + band)), 2)),
                    low=min(rounded, _round_price(price * (1 - band))),
                )
            )
        return points
