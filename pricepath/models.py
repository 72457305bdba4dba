"""Data model for mentions, price bars, scenario paths and simulation results."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Literal

Scenario = Literal["bullish", "base", "bearish"]
Direction = Literal["bullish", "bearish", "neutral"]
Strength = Literal["weak", "moderate", "strong"]
Timeframe = Literal["short", "medium", "long"]

SCENARIOS: tuple[str, ...] = ("bullish", "base", "bearish")
TRADING_DAYS = 252
CONFIDENCE_LEVEL = 0.95


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Collaborator types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PriceBar:
    """One daily OHLCV bar as returned by a price source."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


@dataclass
class EngagementMetrics:
    likes: int = 0
    retweets: int = 0
    replies: int = 0
    quotes: int = 0
    impressions: int | None = None
    bookmarks: int | None = None

    @property
    def total(self) -> int:
        return self.likes + self.retweets + self.replies + self.quotes


@dataclass
class UserProfile:
    id: str
    username: str
    display_name: str = ""
    verified: bool = False
    follower_count: int = 0
    following_count: int = 0
    tweet_count: int = 0
    created_at: datetime | None = None
    bio: str | None = None
    location: str | None = None
    url: str | None = None
    profile_image_url: str | None = None


@dataclass
class Tweet:
    id: str
    text: str
    author: UserProfile
    created_at: datetime
    engagement: EngagementMetrics = field(default_factory=EngagementMetrics)
    language: str | None = None
    is_retweet: bool = False
    is_quote: bool = False
    in_reply_to_tweet_id: str | None = None
    quoted_tweet_id: str | None = None
    retweeted_tweet_id: str | None = None
    hashtags: list[str] = field(default_factory=list)
    mentions: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    cashtags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TweetSearchParams:
    query: str
    max_results: int = 10
    start_time: datetime | None = None
    end_time: datetime | None = None


@dataclass
class SignalClassification:
    """Directional verdict for a signal type, produced by a classifier."""

    type: str
    strength: Strength
    confidence: float
    direction: Direction
    timeframe: Timeframe
    tickers: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# Simulation output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PricePoint:
    """A simulated day: price plus its confidence band."""

    date: date
    price: float
    high: float
    low: float


@dataclass
class ScenarioPath:
    scenario: Scenario
    confidence: float
    price_points: list[PricePoint]
    expected_return: float  # percent
    volatility: float  # per-day
    probability: float

    @property
    def final_price(self) -> float:
        return self.price_points[-1].price


@dataclass(frozen=True)
class SimulationParameters:
    days_forward: int
    historical_days: int
    volatility: float  # per-day sample std of log returns
    drift: float  # per-day mean log return
    sentiment_adjustment: float  # annualized drift tilt, |x| <= 0.15
    confidence_level: float = CONFIDENCE_LEVEL

    @property
    def annualized_volatility(self) -> float:
        return self.volatility * math.sqrt(TRADING_DAYS)


@dataclass
class SimulationResult:
    ticker: str
    current_price: float
    paths: list[ScenarioPath]
    simulation: SimulationParameters
    sentiment_bias: float
    signal: SignalClassification
    tweets: list[Tweet]
    analyzed_at: datetime = field(default_factory=_utcnow)

    def path(self, scenario: str) -> ScenarioPath:
        for p in self.paths:
            if p.scenario == scenario:
                return p
        raise KeyError(scenario)

    @property
    def most_likely_path(self) -> ScenarioPath:
        from pricepath.analysis.signal import most_likely_path

        return most_likely_path(self.paths)

    def to_dict(self, include_tweets: bool = False) -> dict[str, Any]:
        """JSON-friendly representation (dates as ISO strings)."""
        data = {
            "ticker": self.ticker,
            "current_price": self.current_price,
            "paths": [_jsonify(asdict(p)) for p in self.paths],
            "simulation": {
                **asdict(self.simulation),
                "annualized_volatility": round(self.simulation.annualized_volatility, 4),
            },
            "sentiment_bias": self.sentiment_bias,
            "signal": _jsonify(asdict(self.signal)),
            "tweet_count": len(self.tweets),
            "analyzed_at": self.analyzed_at.isoformat(),
        }
        if include_tweets:
            data["tweets"] = [_jsonify(asdict(t)) for t in self.tweets]
        return data


def _jsonify(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _jsonify(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_jsonify(v) for v in obj]
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return obj
