"""Shared pytest fixtures for the pricepath test suite.

Provides synthetic price histories and mention sets with fixed seeds.
All fixtures are independent of external APIs.
"""

from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from pricepath.data_sources.mock_data import MockClassifier, MockPriceSource, MockTweetSource
from pricepath.models import EngagementMetrics, PriceBar, Tweet, UserProfile

NOW = datetime(2024, 6, 3, 21, 0, tzinfo=timezone.utc)


def _bars_from_closes(closes, end=None):
    end = end or datetime.now(timezone.utc)
    n = len(closes)
    return [
        PriceBar(
            timestamp=end - timedelta(days=n - 1 - i),
            open=float(c),
            high=float(c),
            low=float(c),
            close=float(c),
            volume=1_000_000.0,
        )
        for i, c in enumerate(closes)
    ]


# ---------------------------------------------------------------------------
# 1. Price histories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_bars():
    """Factory: list of closes -> ascending daily PriceBars ending now."""
    return _bars_from_closes


@pytest.fixture
def gbm_bars():
    """61 daily bars from a geometric random walk, seeded at 42.

    Starting price 150, daily drift ~0.04%, daily vol ~1.5%.
    Closes are rounded to cents like real quotes.
    """
    rng = np.random.default_rng(42)
    log_returns = rng.normal(0.0004, 0.015, 60)
    closes = np.round(150.0 * np.exp(np.concatenate([[0.0], np.cumsum(log_returns)])), 2)
    return _bars_from_closes(closes.tolist())


@pytest.fixture
def flat_bars():
    """60 daily bars pinned at 100.00 (zero volatility)."""
    return _bars_from_closes([100.0] * 60)


# ---------------------------------------------------------------------------
# 2. Mentions
# ---------------------------------------------------------------------------

@pytest.fixture
def make_tweet():
    """Factory for a Tweet with controllable engagement and author reach."""
    counter = {"n": 0}

    def _make(
        text,
        likes=0,
        retweets=0,
        replies=0,
        quotes=0,
        followers=0,
        verified=False,
        created_at=None,
        cashtags=None,
        is_retweet=False,
    ):
        counter["n"] += 1
        n = counter["n"]
        return Tweet(
            id=str(n),
            text=text,
            author=UserProfile(
                id=f"u{n}",
                username=f"user{n}",
                verified=verified,
                follower_count=followers,
            ),
            created_at=created_at or datetime.now(timezone.utc) - timedelta(hours=1),
            engagement=EngagementMetrics(
                likes=likes, retweets=retweets, replies=replies, quotes=quotes
            ),
            cashtags=list(cashtags or []),
            is_retweet=is_retweet,
        )

    return _make


@pytest.fixture
def bullish_tweets(make_tweet):
    return [
        make_tweet("$TEST breakout confirmed, going to the moon", likes=500, retweets=50,
                   followers=120_000, verified=True, cashtags=["TEST"]),
        make_tweet("Buying more $TEST, this rally has momentum", likes=80, retweets=10,
                   followers=3_000, cashtags=["TEST"]),
        make_tweet("$TEST uptrend intact, accumulating", likes=20, cashtags=["TEST"]),
    ]


@pytest.fixture
def bearish_tweets(make_tweet):
    return [
        make_tweet("$TEST looks like a bubble, expecting a crash", likes=400, retweets=60,
                   followers=90_000, verified=True, cashtags=["TEST"]),
        make_tweet("Selling all my $TEST, downtrend confirmed", likes=70, retweets=5,
                   followers=2_000, cashtags=["TEST"]),
        make_tweet("$TEST overvalued, correction incoming", likes=15, cashtags=["TEST"]),
    ]


_CROWD_TEXT = {
    "bullish": [
        "$TEST breakout, momentum is real",
        "Buying the dip on $TEST, uptrend intact",
        "$TEST rally just getting started, moon soon",
        "Accumulating $TEST, bullish into earnings",
    ],
    "bearish": [
        "$TEST breakdown, time to sell",
        "Dumping $TEST, downtrend confirmed",
        "$TEST overvalued, correction coming",
        "$TEST bubble about to crash, bearish",
    ],
}
_CROWD_LIKES = [12, 45, 3, 150, 27, 8, 310, 64, 19, 5]
_CROWD_FOLLOWERS = [850, 12_000, 150, 96_000, 3_400]


@pytest.fixture
def make_crowd(make_tweet):
    """Factory: 20 mentions leaning ``direction`` with everyday engagement.

    Two of the twenty take the opposite side with small engagement.
    """

    def _make(direction, n=20):
        other = "bearish" if direction == "bullish" else "bullish"
        tweets = []
        for i in range(n):
            side = other if i in (7, 15) else direction
            likes = 2 if side == other else _CROWD_LIKES[i % len(_CROWD_LIKES)]
            tweets.append(
                make_tweet(
                    _CROWD_TEXT[side][i % 4],
                    likes=likes,
                    retweets=likes // 10,
                    replies=likes // 20,
                    followers=_CROWD_FOLLOWERS[i % len(_CROWD_FOLLOWERS)],
                    verified=(i % 6 == 0),
                    cashtags=["TEST"],
                )
            )
        return tweets

    return _make


@pytest.fixture
def neutral_tweets(make_tweet):
    return [
        make_tweet("$TEST earnings are next week", likes=30, cashtags=["TEST"]),
        make_tweet("Anyone watching $TEST today?", likes=5, cashtags=["TEST"]),
    ]


# ---------------------------------------------------------------------------
# 3. Collaborators
# ---------------------------------------------------------------------------

@pytest.fixture
def make_sources():
    """Factory: (bars, tweets) -> (price_source, tweet_source, classifier) for ticker TEST."""

    def _make(bars, tweets):
        return (
            MockPriceSource(series={"TEST": bars}),
            MockTweetSource(tweets=tweets),
            MockClassifier(),
        )

    return _make


@pytest.fixture
def fixed_now():
    return NOW
