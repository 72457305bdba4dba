"""Tests for pricepath.data_sources.social_media -- X API v2 mention search."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from pricepath.config import Keys
from pricepath.data_sources.social_media import XClient, map_tweet, map_user
from pricepath.errors import ConfigurationError, DataSourceError
from pricepath.models import TweetSearchParams
from pricepath.utils.rate_limiter import RateLimiter

USER = {
    "id": "42",
    "username": "chart_queen",
    "name": "Chart Queen",
    "verified": True,
    "created_at": "2015-03-01T00:00:00.000Z",
    "public_metrics": {"followers_count": 350000, "following_count": 120, "tweet_count": 9000},
}

TWEET = {
    "id": "1",
    "text": "$TSLA breakout, buying calls",
    "author_id": "42",
    "created_at": "2024-06-03T14:30:00.000Z",
    "lang": "en",
    "public_metrics": {"like_count": 120, "retweet_count": 30, "reply_count": 5, "quote_count": 2},
    "entities": {
        "cashtags": [{"tag": "TSLA"}],
        "hashtags": [{"tag": "stocks"}],
        "mentions": [{"username": "elonmusk"}],
    },
}

RETWEET = {
    **TWEET,
    "id": "2",
    "referenced_tweets": [{"type": "retweeted", "id": "1"}],
}


def _response(body, ok=True, status=200):
    resp = MagicMock()
    resp.ok = ok
    resp.status_code = status
    resp.reason = "OK" if ok else "Too Many Requests"
    resp.text = "" if ok else "rate limit"
    resp.json.return_value = body
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return XClient(
        bearer_token="token",
        base_url="https://api.example.com/2",
        session=session,
        rate_limiter=RateLimiter(max_calls=1000, window_seconds=1),
    )


class TestMapping:

    def test_map_user(self):
        user = map_user(USER)
        assert user.username == "chart_queen"
        assert user.display_name == "Chart Queen"
        assert user.verified is True
        assert user.follower_count == 350000
        assert user.created_at == datetime(2015, 3, 1, tzinfo=timezone.utc)

    def test_map_tweet(self):
        tweet = map_tweet(TWEET, {"42": map_user(USER)})
        assert tweet.author.username == "chart_queen"
        assert tweet.engagement.likes == 120
        assert tweet.engagement.retweets == 30
        assert tweet.engagement.total == 157
        assert tweet.cashtags == ["TSLA"]
        assert tweet.hashtags == ["stocks"]
        assert tweet.mentions == ["elonmusk"]
        assert tweet.created_at == datetime(2024, 6, 3, 14, 30, tzinfo=timezone.utc)
        assert tweet.is_retweet is False

    def test_map_retweet(self):
        tweet = map_tweet(RETWEET, {"42": map_user(USER)})
        assert tweet.is_retweet is True
        assert tweet.retweeted_tweet_id == "1"

    def test_missing_author(self):
        with pytest.raises(DataSourceError):
            map_tweet(TWEET, {})


class TestXClient:

    def test_requires_token(self, monkeypatch):
        monkeypatch.setattr(Keys, "X_BEARER_TOKEN", "")
        with pytest.raises(ConfigurationError):
            XClient()

    def test_sets_auth_header(self, session, client):
        session.headers.update.assert_called_once_with({"Authorization": "Bearer token"})

    def test_search(self, session, client):
        session.get.return_value = _response(
            {"data": [TWEET], "includes": {"users": [USER]}, "meta": {"result_count": 1}}
        )
        start = datetime(2024, 6, 1, tzinfo=timezone.utc)
        tweets = client.search_tweets(
            TweetSearchParams(query="($TSLA OR TSLA) -is:retweet", max_results=100, start_time=start)
        )
        assert len(tweets) == 1
        assert tweets[0].cashtags == ["TSLA"]

        url = session.get.call_args.args[0]
        params = session.get.call_args.kwargs["params"]
        assert url == "https://api.example.com/2/tweets/search/recent"
        assert params["query"] == "($TSLA OR TSLA) -is:retweet"
        assert params["max_results"] == "100"
        assert params["expansions"] == "author_id"
        assert params["start_time"] == "2024-06-01T00:00:00Z"

    @pytest.mark.parametrize("requested, sent", [(5, "10"), (50, "50"), (500, "100")])
    def test_search_clamps_page_size(self, session, client, requested, sent):
        session.get.return_value = _response({"meta": {"result_count": 0}})
        client.search_tweets(TweetSearchParams(query="TSLA", max_results=requested))
        assert session.get.call_args.kwargs["params"]["max_results"] == sent

    def test_search_empty(self, session, client):
        session.get.return_value = _response({"meta": {"result_count": 0}})
        assert client.search_tweets(TweetSearchParams(query="TSLA")) == []

    def test_http_error(self, session, client):
        session.get.return_value = _response({}, ok=False, status=429)
        with pytest.raises(DataSourceError, match="429"):
            client.search_tweets(TweetSearchParams(query="TSLA"))

    def test_api_errors_without_data(self, session, client):
        session.get.return_value = _response({"errors": [{"message": "Invalid query"}]})
        with pytest.raises(DataSourceError, match="Invalid query"):
            client.search_tweets(TweetSearchParams(query="((("))

    def test_network_error(self, session, client):
        session.get.side_effect = requests.ConnectionError("unreachable")
        with pytest.raises(DataSourceError):
            client.search_tweets(TweetSearchParams(query="TSLA"))

    def test_user_profile(self, session, client):
        session.get.return_value = _response({"data": USER})
        user = client.get_user_profile("chart_queen")
        assert user.id == "42"
        assert session.get.call_args.args[0].endswith("/users/by/username/chart_queen")

    def test_user_not_found(self, session, client):
        session.get.return_value = _response({})
        with pytest.raises(DataSourceError, match="User not found"):
            client.get_user_by_id("999")

    def test_user_tweets(self, session, client):
        timeline = {k: v for k, v in TWEET.items() if k != "author_id"}
        session.get.side_effect = [_response({"data": USER}), _response({"data": [timeline]})]
        tweets = client.get_user_tweets("chart_queen", max_results=5)
        assert len(tweets) == 1
        assert tweets[0].author.username == "chart_queen"
        assert session.get.call_args.args[0].endswith("/users/42/tweets")
