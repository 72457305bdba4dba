"""Offline collaborators for demos and tests.

Everything here is deterministic: price history is a seeded geometric random
walk per ticker, mentions come from fixed templates, and the classifier
scores mentions with the keyword lexicon instead of calling an LLM.
"""

from __future__ import annotations

import zlib
from datetime import datetime, timedelta, timezone

import numpy as np

from pricepath.analysis.sentiment_bias import calculate_sentiment_bias, keyword_signal
from pricepath.data_sources.base import PriceSource, SignalClassifier, TweetSource
from pricepath.errors import DataSourceError
from pricepath.models import (
    EngagementMetrics,
    PriceBar,
    SignalClassification,
    Tweet,
    TweetSearchParams,
    UserProfile,
)

# symbol -> (base price, daily volatility, base volume)
MOCK_UNIVERSE: dict[str, tuple[float, float, int]] = {
    "TSLA": (250.0, 0.030, 100_000_000),
    "NVDA": (850.0, 0.025, 40_000_000),
    "AAPL": (185.0, 0.015, 50_000_000),
    "MSFT": (420.0, 0.020, 30_000_000),
    "META": (475.0, 0.025, 10_000_000),
    "GME": (18.0, 0.080, 15_000_000),
    "AMC": (4.5, 0.070, 25_000_000),
    "XOM": (110.0, 0.020, 10_000_000),
    "CVX": (155.0, 0.018, 10_000_000),
    "TSM": (145.0, 0.022, 10_000_000),
}

HISTORY_DAYS = 365

MOCK_USERS: list[UserProfile] = [
    UserProfile(id="1001", username="macro_mike", display_name="Macro Mike",
                verified=True, follower_count=2_100_000),
    UserProfile(id="1002", username="chart_queen", display_name="Chart Queen",
                verified=True, follower_count=350_000),
    UserProfile(id="1003", username="wsb_trader", display_name="WSB Trader",
                verified=False, follower_count=45_000),
    UserProfile(id="1004", username="value_vic", display_name="Value Vic",
                verified=False, follower_count=8_200),
]

_TEMPLATES: list[str] = [
    "${t} breakout confirmed, momentum building. Buying more here",
    "${t} to the moon, this rally is just getting started",
    "Accumulating ${t} on every dip, uptrend intact",
    "${t} looks overvalued at these levels, expecting a correction",
    "Taking profits on ${t}, resistance overhead and momentum fading",
    "${t} earnings next week, holding my position",
    "Watching ${t} closely, volume has been light",
    "${t} bubble territory? Could see a sharp decline",
]


def _seed(*parts: str) -> int:
    return zlib.crc32("|".join(parts).encode())


class MockPriceSource(PriceSource):
    """Seeded daily history for the mock universe (plus any injected series)."""

    def __init__(self, series: dict[str, list[PriceBar]] | None = None, now: datetime | None = None):
        self._now = now or datetime.now(timezone.utc)
        self._series: dict[str, list[PriceBar]] = {k.upper(): v for k, v in (series or {}).items()}

    def _generate(self, ticker: str) -> list[PriceBar]:
        base, vol, base_volume = MOCK_UNIVERSE[ticker]
        rng = np.random.default_rng(_seed("prices", ticker))
        bars: list[PriceBar] = []
        close = base
        for i in range(HISTORY_DAYS, -1, -1):
            # downtrend first half, uptrend second
            trend = -0.001 if i > HISTORY_DAYS // 2 else 0.002
            open_ = close * (1 + rng.normal(0, vol * 0.25))
            close = close * float(np.exp(trend + rng.normal(0, vol)))
            high = max(open_, close) * (1 + abs(rng.normal(0, vol * 0.3)))
            low = min(open_, close) * (1 - abs(rng.normal(0, vol * 0.3)))
            volume = base_volume * (1 + abs(close - open_) / open_ * 10)
            bars.append(
                PriceBar(
                    timestamp=self._now - timedelta(days=i),
                    open=round(open_, 2),
                    high=round(high, 2),
                    low=round(low, 2),
                    close=round(close, 2),
                    volume=float(int(volume)),
                )
            )
        return bars

    def _history(self, ticker: str) -> list[PriceBar]:
        ticker = ticker.upper()
        if ticker not in self._series:
            if ticker not in MOCK_UNIVERSE:
                raise DataSourceError("mock_prices", f"Price data not found for ticker: {ticker}")
            self._series[ticker] = self._generate(ticker)
        return self._series[ticker]

    def get_historical_prices(self, ticker: str, days: int) -> list[PriceBar]:
        history = self._history(ticker)
        if not history:
            return []
        cutoff = history[-1].timestamp - timedelta(days=days)
        return sorted(
            (b for b in history if b.timestamp >= cutoff),
            key=lambda b: b.timestamp,
        )

    def get_current_price(self, ticker: str) -> float:
        return self.get_latest_price(ticker).close

    def get_latest_price(self, ticker: str) -> PriceBar:
        history = self._history(ticker)
        if not history:
            raise DataSourceError("mock_prices", f"Price data not found for ticker: {ticker}")
        return history[-1]


class MockTweetSource(TweetSource):
    """Templated mentions for any ticker named in the query."""

    def __init__(self, tweets: list[Tweet] | None = None, now: datetime | None = None):
        self._tweets = tweets
        self._now = now or datetime.now(timezone.utc)
        self._users = {u.username: u for u in MOCK_USERS}
        self._users.update({u.id: u for u in MOCK_USERS})

    @staticmethod
    def _ticker_from_query(query: str) -> str:
        for token in query.replace("(", " ").replace(")", " ").split():
            if token.startswith("$") and len(token) > 1:
                return token[1:].upper()
        return query.split()[0].strip("()$").upper()

    def _generate(self, ticker: str) -> list[Tweet]:
        rng = np.random.default_rng(_seed("tweets", ticker))
        tweets = []
        for i, template in enumerate(_TEMPLATES):
            author = MOCK_USERS[i % len(MOCK_USERS)]
            tweets.append(
                Tweet(
                    id=f"mock-{ticker}-{i}",
                    text=template.format(t=ticker),
                    author=author,
                    created_at=self._now - timedelta(hours=int(rng.integers(1, 24 * 6))),
                    engagement=EngagementMetrics(
                        likes=int(rng.integers(10, 5000)),
                        retweets=int(rng.integers(0, 800)),
                        replies=int(rng.integers(0, 300)),
                        quotes=int(rng.integers(0, 100)),
                    ),
                    language="en",
                    cashtags=[ticker],
                )
            )
        return tweets

    def search_tweets(self, params: TweetSearchParams) -> list[Tweet]:
        if self._tweets is not None:
            tweets = list(self._tweets)
        else:
            tweets = self._generate(self._ticker_from_query(params.query))
        if params.start_time is not None:
            tweets = [t for t in tweets if t.created_at >= params.start_time]
        if params.end_time is not None:
            tweets = [t for t in tweets if t.created_at <= params.end_time]
        if "-is:retweet" in params.query:
            tweets = [t for t in tweets if not t.is_retweet]
        return tweets[: params.max_results]

    def get_user_profile(self, username: str) -> UserProfile:
        try:
            return self._users[username]
        except KeyError:
            raise DataSourceError("mock_tweets", f"User not found: {username}") from None

    def get_user_by_id(self, user_id: str) -> UserProfile:
        return self.get_user_profile(user_id)

    def get_user_tweets(self, username: str, max_results: int = 10) -> list[Tweet]:
        user = self.get_user_profile(username)
        pool = self._tweets if self._tweets is not None else []
        return [t for t in pool if t.author.id == user.id][:max_results]


class MockClassifier(SignalClassifier):
    """Lexicon-based stand-in for the LLM classifier."""

    def analyze_sentiment(self, text: str) -> dict:
        signal = keyword_signal(text)
        score = max(-1.0, min(1.0, signal / 2.0))
        label = "bullish" if score > 0.2 else "bearish" if score < -0.2 else "neutral"
        return {
            "score": score,
            "label": label,
            "confidence": round(min(1.0, 0.5 + abs(score) / 2), 2),
            "reasoning": "keyword lexicon",
            "keywords": [],
            "analyzed_at": datetime.now(timezone.utc),
        }

    def classify_signal(self, tweets: list[Tweet], signal_type: str) -> SignalClassification:
        bias = calculate_sentiment_bias(tweets)
        direction = "bullish" if bias > 0.2 else "bearish" if bias < -0.2 else "neutral"
        tickers: list[str] = []
        for tweet in tweets:
            for tag in tweet.cashtags:
                if tag.upper() not in tickers:
                    tickers.append(tag.upper())
        return SignalClassification(
            type=signal_type,
            strength="strong" if abs(bias) > 0.5 else "moderate" if tweets else "weak",
            confidence=round(0.5 + abs(bias) / 2, 2) if tweets else 0.0,
            direction=direction,
            timeframe="medium",
            tickers=tickers,
            metadata={"scenario_count": 3, "source": "mock"},
        )
