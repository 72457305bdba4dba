"""Engagement-weighted sentiment bias from social mentions.

Each mention is scored against the keyword lexicon (bullish terms add,
bearish terms subtract), then scaled by its engagement and by the author's
reach. The bias is the net weighted signal over the gross weighted signal,
so it lands in [-1, +1]: unanimous bullish chatter gives +1, an even split
gives ~0, and a handful of heavily-engaged posts outweigh a long tail of
ignored ones.
"""

from __future__ import annotations

import math
import re
from typing import Any, Mapping, Sequence

from pricepath.analysis.lexicon import BEARISH, BULLISH, LEXICON
from pricepath.models import Tweet
from pricepath.utils.logger import setup_logger

logger = setup_logger("sentiment_bias")

RETWEET_WEIGHT = 2.0
VERIFIED_MULTIPLIER = 1.2
FOLLOWER_LOG_SCALE = 0.05

_TOKEN_RE = re.compile(r"[a-z][a-z']*")


def _clamp(value: float, lo: float = -1.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def tokenize(text: str) -> list[str]:
    """Lower-cased word tokens; cashtags lose their ``$``."""
    return _TOKEN_RE.findall(text.lower())


def keyword_signal(
    text: str, lexicon: Mapping[str, tuple[str, float]] = LEXICON
) -> float:
    """Net lexicon weight of a text: bullish weights minus bearish weights."""
    signal = 0.0
    for token in tokenize(text):
        entry = lexicon.get(token)
        if entry is None:
            continue
        direction, weight = entry
        signal += weight if direction == BULLISH else -weight
    return signal


def classify_mention(
    text: str, lexicon: Mapping[str, tuple[str, float]] = LEXICON
) -> str:
    signal = keyword_signal(text, lexicon)
    if signal > 0:
        return BULLISH
    if signal < 0:
        return BEARISH
    return "neutral"


def engagement_weight(tweet: Tweet) -> float:
    """1 + ln(1 + likes + 2*retweets + replies + quotes)."""
    e = tweet.engagement
    raw = e.likes + RETWEET_WEIGHT * e.retweets + e.replies + e.quotes
    return 1.0 + math.log1p(max(raw, 0.0))


def author_weight(tweet: Tweet) -> float:
    followers = max(tweet.author.follower_count, 0)
    weight = 1.0 + FOLLOWER_LOG_SCALE * math.log10(1 + followers)
    if tweet.author.verified:
        weight *= VERIFIED_MULTIPLIER
    return weight


def calculate_sentiment_bias(
    tweets: Sequence[Tweet],
    lexicon: Mapping[str, tuple[str, float]] = LEXICON,
) -> float:
    """Aggregate mentions into a single bias in [-1, 1].

    No mentions, or no lexicon hits at all, gives exactly 0.
    """
    if not tweets:
        return 0.0

    net = 0.0
    gross = 0.0
    for tweet in tweets:
        signal = keyword_signal(tweet.text, lexicon)
        if signal == 0:
            continue
        contribution = signal * engagement_weight(tweet) * author_weight(tweet)
        net += contribution
        gross += abs(contribution)

    if gross == 0:
        return 0.0
    bias = _clamp(net / gross)
    logger.debug("Sentiment bias over %d mentions: %.4f", len(tweets), bias)
    return bias


def summarize_mentions(
    tweets: Sequence[Tweet],
    lexicon: Mapping[str, tuple[str, float]] = LEXICON,
) -> dict[str, Any]:
    """Per-class counts and engagement totals, for signal metadata."""
    counts = {BULLISH: 0, BEARISH: 0, "neutral": 0}
    engagement = 0
    for tweet in tweets:
        counts[classify_mention(tweet.text, lexicon)] += 1
        engagement += tweet.engagement.total
    return {
        "mention_count": len(tweets),
        "bullish_mentions": counts[BULLISH],
        "bearish_mentions": counts[BEARISH],
        "neutral_mentions": counts["neutral"],
        "total_engagement": engagement,
    }
