"""Tests for lexicon-based sentiment."""

import pytest

from novel_graph_analyzer.sentiment import SentimentAnalyzer
from novel_graph_analyzer.sentiment.lexicon import EMOTION_LEXICON


@pytest.fixture
def analyzer():
    return SentimentAnalyzer()


class TestSentimentAnalyzer:
    def test_positive(self, analyzer):
        result = analyzer.analyze("李明非常高兴，心中充满希望。")
        assert result.sentiment == "positive"
        assert result.emotions == {"joy": 1, "hope": 1}
        assert result.keywords == ["高兴", "希望"]
        assert result.intensity == pytest.approx(0.02)

    def test_negative(self, analyzer):
        result = analyzer.analyze("王强感到愤怒又害怕。")
        assert result.sentiment == "negative"
        assert result.emotions == {"anger": 1, "fear": 1}

    def test_tie_is_neutral(self, analyzer):
        assert analyzer.analyze("高兴又难过").sentiment == "neutral"

    def test_no_keywords(self, analyzer):
        result = analyzer.analyze("李明走进了客栈。")
        assert result.sentiment == "neutral"
        assert result.intensity == 0.0
        assert result.emotions == {}
        assert result.keywords == []

    def test_repeated_keywords_counted(self, analyzer):
        result = analyzer.analyze("高兴" * 3)
        assert result.emotions["joy"] == 3
        assert result.keywords == ["高兴"]

    def test_intensity_saturates(self, analyzer):
        assert analyzer.analyze("高兴" * 150).intensity == 1.0


class TestLexicon:
    def test_ten_words_per_emotion(self):
        for categories in EMOTION_LEXICON.values():
            for words in categories.values():
                assert len(words) == 10
                assert len(set(words)) == 10

    def test_read_only(self):
        with pytest.raises(TypeError):
            EMOTION_LEXICON["positive"] = {}
