"""Sentiment analysis."""

from .analyzer import SentimentAnalyzer
from .lexicon import EMOTION_LEXICON

__all__ = ["EMOTION_LEXICON", "SentimentAnalyzer"]
