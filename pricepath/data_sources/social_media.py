"""X (Twitter) API v2 client - recent mention search and user lookups."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import requests

from pricepath.config import Keys, section
from pricepath.data_sources.base import TweetSource
from pricepath.errors import ConfigurationError, DataSourceError
from pricepath.models import EngagementMetrics, Tweet, TweetSearchParams, UserProfile
from pricepath.utils.logger import setup_logger
from pricepath.utils.rate_limiter import RateLimiter

logger = setup_logger("social_media")

_CFG = section("x_api")

TWEET_FIELDS = ",".join([
    "id", "text", "author_id", "created_at", "lang",
    "public_metrics", "entities", "referenced_tweets",
])
USER_FIELDS = ",".join([
    "id", "username", "name", "description", "verified", "public_metrics",
    "created_at", "profile_image_url", "location", "url",
])


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _iso(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def map_user(data: dict[str, Any]) -> UserProfile:
    metrics = data.get("public_metrics") or {}
    return UserProfile(
        id=data["id"],
        username=data.get("username", ""),
        display_name=data.get("name", ""),
        bio=data.get("description"),
        verified=bool(data.get("verified", False)),
        follower_count=metrics.get("followers_count", 0),
        following_count=metrics.get("following_count", 0),
        tweet_count=metrics.get("tweet_count", 0),
        created_at=_parse_time(data.get("created_at")),
        profile_image_url=data.get("profile_image_url"),
        location=data.get("location"),
        url=data.get("url"),
    )


def map_tweet(data: dict[str, Any], users: dict[str, UserProfile]) -> Tweet:
    author = users.get(data.get("author_id", ""))
    if author is None:
        raise DataSourceError("x_api", f"Author not found for tweet {data.get('id')}")

    metrics = data.get("public_metrics") or {}
    entities = data.get("entities") or {}
    refs = {r["type"]: r["id"] for r in data.get("referenced_tweets") or []}

    return Tweet(
        id=data["id"],
        text=data.get("text", ""),
        author=author,
        created_at=_parse_time(data.get("created_at")) or datetime.now(timezone.utc),
        engagement=EngagementMetrics(
            likes=metrics.get("like_count", 0),
            retweets=metrics.get("retweet_count", 0),
            replies=metrics.get("reply_count", 0),
            quotes=metrics.get("quote_count", 0),
            impressions=metrics.get("impression_count"),
            bookmarks=metrics.get("bookmark_count"),
        ),
        language=data.get("lang"),
        is_retweet="retweeted" in refs,
        is_quote="quoted" in refs,
        in_reply_to_tweet_id=refs.get("replied_to"),
        quoted_tweet_id=refs.get("quoted"),
        retweeted_tweet_id=refs.get("retweeted"),
        hashtags=[h["tag"] for h in entities.get("hashtags", [])],
        mentions=[m["username"] for m in entities.get("mentions", [])],
        urls=[u.get("expanded_url", "") for u in entities.get("urls", [])],
        cashtags=[c["tag"] for c in entities.get("cashtags", [])],
    )


class XClient(TweetSource):
    """Thin X API v2 wrapper returning pricepath Tweet objects."""

    def __init__(
        self,
        bearer_token: str | None = None,
        base_url: str | None = None,
        session: requests.Session | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self.bearer_token = bearer_token or Keys.X_BEARER_TOKEN
        if not self.bearer_token:
            raise ConfigurationError("X_BEARER_TOKEN not set. Add it to your .env file.")
        self.base_url = (base_url or _CFG.get("base_url", "https://api.twitter.com/2")).rstrip("/")
        self.timeout = _CFG.get("timeout", 30)
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {self.bearer_token}"})
        self.rate_limiter = rate_limiter or RateLimiter(
            max_calls=_CFG.get("calls_per_window", 450),
            window_seconds=_CFG.get("window_seconds", 900),
        )

    def _get(self, endpoint: str, params: dict[str, str] | None = None) -> dict:
        self.rate_limiter.wait()
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise DataSourceError("x_api", f"request to {endpoint} failed: {e}") from e

        if not resp.ok:
            raise DataSourceError(
                "x_api", f"X API request failed: {resp.status_code} {resp.reason} - {resp.text}"
            )
        body = resp.json()
        if body.get("errors") and not body.get("data"):
            messages = ", ".join(e.get("message", "") for e in body["errors"])
            raise DataSourceError("x_api", f"X API returned errors: {messages}")
        return body

    def search_tweets(self, params: TweetSearchParams) -> list[Tweet]:
        # recent search accepts 10..100 results per page
        max_results = min(max(params.max_results, 10), 100)
        request_params = {
            "query": params.query,
            "tweet.fields": TWEET_FIELDS,
            "user.fields": USER_FIELDS,
            "expansions": "author_id",
            "max_results": str(max_results),
        }
        if params.start_time:
            request_params["start_time"] = _iso(params.start_time)
        if params.end_time:
            request_params["end_time"] = _iso(params.end_time)

        logger.info("Searching X: %s (max=%d)", params.query, max_results)
        body = self._get("/tweets/search/recent", request_params)
        data = body.get("data") or []
        if not data:
            return []

        users = {
            u["id"]: map_user(u)
            for u in (body.get("includes") or {}).get("users", [])
        }
        tweets = [map_tweet(t, users) for t in data]
        logger.info("X search returned %d tweets", len(tweets))
        return tweets[: params.max_results]

    def get_user_profile(self, username: str) -> UserProfile:
        body = self._get(f"/users/by/username/{username}", {"user.fields": USER_FIELDS})
        if not body.get("data"):
            raise DataSourceError("x_api", f"User not found: {username}")
        return map_user(body["data"])

    def get_user_by_id(self, user_id: str) -> UserProfile:
        body = self._get(f"/users/{user_id}", {"user.fields": USER_FIELDS})
        if not body.get("data"):
            raise DataSourceError("x_api", f"User not found: {user_id}")
        return map_user(body["data"])

    def get_user_tweets(self, username: str, max_results: int = 10) -> list[Tweet]:
        user = self.get_user_profile(username)
        body = self._get(
            f"/users/{user.id}/tweets",
            {"tweet.fields": TWEET_FIELDS, "max_results": str(min(max(max_results, 5), 100))},
        )
        data = body.get("data") or []
        return [map_tweet({**t, "author_id": user.id}, {user.id: user}) for t in data]
