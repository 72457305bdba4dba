"""Collaborator implementations: price history, social mentions, signal classification."""

from .base import PriceSource, TweetSource, SignalClassifier
from .mock_data import MockPriceSource, MockTweetSource, MockClassifier
from .factory import Sources, create_sources
