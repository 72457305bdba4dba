"""Future price-path simulation.

Combines historical log-return statistics with a social-sentiment bias to
produce three scenario paths (bullish / base / bearish), each with a
probability and confidence, and resolves a directional trading signal from
the most probable scenario.

Stages:
  1. Fetch price history and recent mentions (concurrently)
  2. Estimate per-day drift and volatility from log returns
  3. Score mentions into an engagement-weighted sentiment bias
  4. Calibrate per-scenario drift / volatility
  5. Generate one path per scenario with 95% confidence bands
  6. Assign probabilities and confidence
  7. Override the baseline classifier's direction with the scenario outcome
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import numpy as np

from pricepath.analysis.historical import MIN_PRICE_POINTS, estimate_historical_metrics
from pricepath.analysis.paths import PathGenerator, expected_return_pct
from pricepath.analysis.probability import assign_probabilities
from pricepath.analysis.scenarios import calibrate_scenarios
from pricepath.analysis.sentiment_bias import calculate_sentiment_bias
from pricepath.analysis.signal import apply_resolved_direction
from pricepath.config import section
from pricepath.data_sources.base import PriceSource, SignalClassifier, TweetSource
from pricepath.errors import InsufficientDataError
from pricepath.models import (
    SCENARIOS,
    ScenarioPath,
    SimulationParameters,
    SimulationResult,
    TweetSearchParams,
)
from pricepath.utils.logger import setup_logger

logger = setup_logger("price_paths")

_SIM = section("simulation")

SIGNAL_TYPE = "future_price_path"
DEFAULT_DAYS_FORWARD: int = int(_SIM.get("days_forward", 30))
DEFAULT_HISTORICAL_DAYS: int = int(_SIM.get("historical_days", 60))
MENTION_LOOKBACK_DAYS: int = int(_SIM.get("mention_lookback_days", 7))
MAX_MENTIONS: int = int(_SIM.get("max_mentions", 100))


def mention_query(ticker: str) -> str:
    """Cashtag or bare symbol, reshares excluded."""
    return f"(${ticker} OR {ticker}) -is:retweet"


def _require_positive_int(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


class PricePathSimulator:
    """Scenario price-path simulator.

    Collaborators and an immutable seed are bound once at construction.
    Every call builds its own generator from that seed, so repeated calls on
    identical inputs give identical paths and concurrent calls never share
    generator state.

    Args:
        price_source: historical price provider
        tweet_source: social mention search
        classifier: baseline signal classifier
        seed: optional int or ``numpy.random.SeedSequence``; when omitted each
            call draws fresh OS entropy
    """

    def __init__(
        self,
        price_source: PriceSource,
        tweet_source: TweetSource,
        classifier: SignalClassifier,
        seed: int | np.random.SeedSequence | None = None,
    ):
        self.price_source = price_source
        self.tweet_source = tweet_source
        self.classifier = classifier
        self.seed = seed

    def _fetch_inputs(self, ticker: str, historical_days: int):
        search = TweetSearchParams(
            query=mention_query(ticker),
            max_results=MAX_MENTIONS,
            start_time=datetime.now(timezone.utc) - timedelta(days=MENTION_LOOKBACK_DAYS),
        )
        with ThreadPoolExecutor(max_workers=2) as executor:
            prices_future = executor.submit(
                self.price_source.get_historical_prices, ticker, historical_days
            )
            tweets_future = executor.submit(self.tweet_source.search_tweets, search)
            # Price failure wins: it is checked (and raised) first.
            bars = prices_future.result()
            tweets = tweets_future.result()
        return bars, tweets

    def simulate_price_paths(
        self,
        ticker: str,
        days_forward: int = DEFAULT_DAYS_FORWARD,
        historical_days: int = DEFAULT_HISTORICAL_DAYS,
        rng: np.random.Generator | None = None,
    ) -> SimulationResult:
        """Run the full simulation for ``ticker``.

        ``rng`` overrides the seeded generator for this call only.

        Raises:
            ValueError: non-positive ``days_forward`` / ``historical_days``
            InsufficientDataError: fewer than 20 historical prices
            Exception: any collaborator failure, propagated unchanged
        """
        _require_positive_int("days_forward", days_forward)
        _require_positive_int("historical_days", historical_days)
        ticker = ticker.strip().upper()

        logger.info(
            "Simulating %s: %d days forward from %d days of history",
            ticker, days_forward, historical_days,
        )
        bars, tweets = self._fetch_inputs(ticker, historical_days)

        if len(bars) < MIN_PRICE_POINTS:
            logger.warning("%s: only %d price points", ticker, len(bars))
            raise InsufficientDataError(ticker, len(bars), MIN_PRICE_POINTS)

        metrics = estimate_historical_metrics(bars, ticker)
        # sub-cent closes would round to zero
        current_price = round(metrics.current_price, 2) or metrics.current_price

        sentiment_bias = round(calculate_sentiment_bias(tweets), 4)
        calibration = calibrate_scenarios(metrics.drift, metrics.volatility, sentiment_bias)

        generator = PathGenerator(rng if rng is not None else np.random.default_rng(self.seed))
        today = datetime.now().date()
        paths: list[ScenarioPath] = []
        for scenario in SCENARIOS:
            params = calibration[scenario]
            points = generator.generate(
                current_price, days_forward, params.drift, params.volatility, start=today
            )
            paths.append(
                ScenarioPath(
                    scenario=scenario,
                    confidence=0.0,
                    price_points=points,
                    expected_return=expected_return_pct(points, current_price),
                    volatility=params.volatility,
                    probability=0.0,
                )
            )
        assign_probabilities(paths, sentiment_bias)

        baseline = self.classifier.classify_signal(tweets, SIGNAL_TYPE)
        signal = apply_resolved_direction(baseline, paths, ticker)

        simulation = SimulationParameters(
            days_forward=days_forward,
            historical_days=historical_days,
            volatility=metrics.volatility,
            drift=metrics.drift,
            sentiment_adjustment=calibration.sentiment_adjustment,
        )
        logger.info(
            "%s: bias=%.2f direction=%s (%s)",
            ticker, sentiment_bias, signal.direction, signal.strength,
        )
        return SimulationResult(
            ticker=ticker,
            current_price=current_price,
            paths=paths,
            simulation=simulation,
            sentiment_bias=sentiment_bias,
            signal=signal,
            tweets=list(tweets),
        )


def simulate_price_paths(
    ticker: str,
    price_source: PriceSource,
    tweet_source: TweetSource,
    classifier: SignalClassifier,
    days_forward: int = DEFAULT_DAYS_FORWARD,
    historical_days: int = DEFAULT_HISTORICAL_DAYS,
    seed: int | np.random.SeedSequence | None = None,
    rng: np.random.Generator | None = None,
) -> SimulationResult:
    """Functional form: collaborators passed per call."""
    simulator = PricePathSimulator(price_source, tweet_source, classifier, seed=seed)
    return simulator.simulate_price_paths(ticker, days_forward, historical_days, rng=rng)
