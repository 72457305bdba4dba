"""Baseline signal classification using Grok (xAI chat completions).

One chat call per request; the model is asked for a bare JSON object which
is extracted from the reply (code fences and surrounding prose tolerated).
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any

import httpx

from pricepath.config import Keys, section
from pricepath.data_sources.base import SignalClassifier
from pricepath.errors import ConfigurationError, DataSourceError
from pricepath.models import SignalClassification, Tweet
from pricepath.utils.logger import setup_logger

logger = setup_logger("signal_classifier")

_CFG = section("grok")

SIGNAL_DESCRIPTIONS: dict[str, str] = {
    "future_price_path": "Scenario analysis for potential future price paths with probabilities",
}

SENTIMENT_SYSTEM_PROMPT = """\
You are a financial sentiment analysis expert. Analyze the sentiment of the
provided text and return a JSON object with EXACTLY this structure:

{
  "score": <float from -1.0 (very bearish) to 1.0 (very bullish)>,
  "label": "<bullish|bearish|neutral>",
  "confidence": <float from 0.0 to 1.0>,
  "reasoning": "<brief explanation>",
  "keywords": ["<key>", "<sentiment>", "<words>"]
}

Only respond with the JSON object, no additional text.\
"""

CLASSIFY_SYSTEM_PROMPT = """\
You are a sophisticated financial signal classifier. Analyze the provided
tweets in the context of the "{signal_type}" signal type.

Signal description: {description}

Return a JSON object with EXACTLY this structure:

{{
  "strength": "<weak|moderate|strong>",
  "confidence": <float from 0.0 to 1.0>,
  "direction": "<bullish|bearish|neutral>",
  "timeframe": "<short|medium|long>",
  "reasoning": "<explanation of the classification>",
  "metadata": {{}}
}}

Only respond with the JSON object, no additional text.\
"""

_VALID = {
    "strength": {"weak", "moderate", "strong"},
    "direction": {"bullish", "bearish", "neutral"},
    "timeframe": {"short", "medium", "long"},
}
_DEFAULTS = {"strength": "weak", "direction": "neutral", "timeframe": "medium"}

_JSON_RE = re.compile(r"\{.*\}", re.DOTALL)


def extract_json(text: str) -> dict[str, Any]:
    """Pull the outermost JSON object out of a model reply."""
    match = _JSON_RE.search(text)
    if not match:
        raise DataSourceError("grok", "Failed to extract JSON from Grok response")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise DataSourceError("grok", f"Malformed JSON in Grok response: {e}") from e


def _choice(parsed: dict, key: str) -> str:
    value = str(parsed.get(key, "")).lower()
    return value if value in _VALID[key] else _DEFAULTS[key]


def _confidence(value: Any) -> float:
    try:
        return max(0.0, min(1.0, float(value)))
    except (TypeError, ValueError):
        return 0.5


def _score(value: Any) -> float:
    try:
        return max(-1.0, min(1.0, float(value)))
    except (TypeError, ValueError) as e:
        raise DataSourceError("grok", f"Non-numeric sentiment score: {value!r}") from e


def tweet_tickers(tweets: list[Tweet]) -> list[str]:
    """Unique cashtags across tweets, first-seen order."""
    seen: dict[str, None] = {}
    for tweet in tweets:
        for tag in tweet.cashtags:
            seen.setdefault(tag.upper(), None)
    return list(seen)


class GrokClient(SignalClassifier):
    """Classify signals and score text with Grok."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        client: httpx.Client | None = None,
    ):
        self.api_key = api_key or Keys.XAI
        if not self.api_key:
            raise ConfigurationError("XAI_API_KEY not set. Add it to your .env file.")
        self.model = model or _CFG.get("model", "grok-beta")
        self.base_url = (base_url or _CFG.get("base_url", "https://api.x.ai/v1")).rstrip("/")
        self._client = client or httpx.Client(timeout=_CFG.get("timeout", 60))

    def _chat(self, system: str, user: str, temperature: float = 0.4, max_tokens: int = 1000) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
        }
        try:
            resp = self._client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DataSourceError(
                "grok", f"Grok API request failed: {e.response.status_code} - {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise DataSourceError("grok", f"Grok API request failed: {e}") from e

        choices = resp.json().get("choices") or []
        if not choices:
            raise DataSourceError("grok", "Grok API returned no choices")
        return choices[0]["message"]["content"]

    def analyze_sentiment(self, text: str) -> dict:
        raw = self._chat(
            SENTIMENT_SYSTEM_PROMPT,
            f"Analyze the sentiment of this text:\n\n{text}",
            temperature=0.3,
            max_tokens=500,
        )
        parsed = extract_json(raw)
        return {
            "score": _score(parsed.get("score", 0.0)),
            "label": parsed.get("label", "neutral"),
            "confidence": _confidence(parsed.get("confidence")),
            "reasoning": parsed.get("reasoning", ""),
            "keywords": parsed.get("keywords", []),
            "analyzed_at": datetime.now(timezone.utc),
        }

    def classify_signal(self, tweets: list[Tweet], signal_type: str) -> SignalClassification:
        tickers = tweet_tickers(tweets)
        if not tweets:
            logger.info("No tweets to classify for %s, returning neutral baseline", signal_type)
            return SignalClassification(
                type=signal_type,
                strength="weak",
                confidence=0.0,
                direction="neutral",
                timeframe="medium",
                tickers=tickers,
                metadata={"reasoning": "No mentions available"},
            )

        summaries = []
        for tweet in tweets[:30]:
            engagement = tweet.engagement.likes + tweet.engagement.retweets
            tags = ", ".join(tweet.cashtags) or "none"
            summaries.append(
                f"@{tweet.author.username} ({engagement} engagement): "
                f"{tweet.text[:200]} [Tickers: {tags}]"
            )
        system = CLASSIFY_SYSTEM_PROMPT.format(
            signal_type=signal_type,
            description=SIGNAL_DESCRIPTIONS.get(signal_type, signal_type),
        )
        user = f'Classify these tweets for the "{signal_type}" signal:\n\n' + "\n\n".join(summaries)

        logger.info("Classifying %d tweets as %s", len(tweets), signal_type)
        parsed = extract_json(self._chat(system, user))

        metadata = parsed.get("metadata") or {}
        if parsed.get("reasoning"):
            metadata = {**metadata, "reasoning": parsed["reasoning"]}
        return SignalClassification(
            type=signal_type,
            strength=_choice(parsed, "strength"),
            confidence=_confidence(parsed.get("confidence")),
            direction=_choice(parsed, "direction"),
            timeframe=_choice(parsed, "timeframe"),
            tickers=tickers,
            metadata=metadata,
        )
