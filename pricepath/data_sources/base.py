"""Interfaces every collaborator (price, mention, classifier source) implements."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pricepath.models import (
    PriceBar,
    SignalClassification,
    Tweet,
    TweetSearchParams,
    UserProfile,
)


class PriceSource(ABC):
    """Historical and current prices for a ticker."""

    @abstractmethod
    def get_historical_prices(self, ticker: str, days: int) -> list[PriceBar]:
        """Daily bars covering the last ``days`` calendar days, ascending."""
        ...

    @abstractmethod
    def get_current_price(self, ticker: str) -> float:
        ...

    @abstractmethod
    def get_latest_price(self, ticker: str) -> PriceBar:
        ...


class TweetSource(ABC):
    """Social mention search."""

    @abstractmethod
    def search_tweets(self, params: TweetSearchParams) -> list[Tweet]:
        ...

    @abstractmethod
    def get_user_profile(self, username: str) -> UserProfile:
        ...

    @abstractmethod
    def get_user_by_id(self, user_id: str) -> UserProfile:
        ...

    @abstractmethod
    def get_user_tweets(self, username: str, max_results: int = 10) -> list[Tweet]:
        ...


class SignalClassifier(ABC):
    """External sentiment / signal classification service."""

    @abstractmethod
    def analyze_sentiment(self, text: str) -> dict:
        """Return ``{score, label, confidence, reasoning, keywords}``."""
        ...

    @abstractmethod
    def classify_signal(
        self, tweets: list[Tweet], signal_type: str
    ) -> SignalClassification:
        ...
