"""Build the collaborator set (mock or real) from configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from pricepath.config import section
from pricepath.data_sources.base import PriceSource, SignalClassifier, TweetSource
from pricepath.errors import ConfigurationError
from pricepath.utils.logger import setup_logger

logger = setup_logger("factory")

MODES = ("mock", "real")


@dataclass(frozen=True)
class Sources:
    prices: PriceSource
    tweets: TweetSource
    classifier: SignalClassifier
    mode: str


def resolve_mode(mode: str | None = None) -> str:
    """Explicit argument, then PRICEPATH_MODE, then settings.yaml, then mock."""
    candidate = mode or os.getenv("PRICEPATH_MODE") or section("app").get("mode") or "mock"
    candidate = str(candidate).lower()
    if candidate not in MODES:
        raise ConfigurationError(f"Unknown mode {candidate!r}; expected one of {MODES}")
    return candidate


def create_sources(mode: str | None = None) -> Sources:
    mode = resolve_mode(mode)
    logger.info("Using %s data sources", mode)
    if mode == "real":
        # Imported lazily so mock mode works without network libraries configured
        from pricepath.data_sources.market_data import MarketDataClient
        from pricepath.data_sources.signal_classifier import GrokClient
        from pricepath.data_sources.social_media import XClient

        return Sources(
            prices=MarketDataClient(),
            tweets=XClient(),
            classifier=GrokClient(),
            mode=mode,
        )

    from pricepath.data_sources.mock_data import MockClassifier, MockPriceSource, MockTweetSource

    return Sources(
        prices=MockPriceSource(),
        tweets=MockTweetSource(),
        classifier=MockClassifier(),
        mode=mode,
    )
