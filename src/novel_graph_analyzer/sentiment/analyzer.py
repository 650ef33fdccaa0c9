"""Lexicon-based sentiment scoring."""

from ..models.timeline import SentimentResult
from .lexicon import EMOTION_LEXICON


class SentimentAnalyzer:
    """Scores text by counting emotion keywords."""

    def analyze(self, text: str) -> SentimentResult:
        """Score a piece of text.

        The sentiment is the polarity tier with the strictly highest keyword
        count; ties and texts without keywords are neutral. Intensity grows
        with the total hit count and saturates at 100 hits.
        """
        emotions: dict[str, int] = {}
        keywords: list[str] = []
        tier_totals: dict[str, int] = {}

        for tier, categories in EMOTION_LEXICON.items():
            tier_total = 0
            for emotion, words in categories.items():
                count = 0
                for word in words:
                    hits = text.count(word)
                    if hits:
                        count += hits
                        if word not in keywords:
                            keywords.append(word)
                if count:
                    emotions[emotion] = count
                tier_total += count
            tier_totals[tier] = tier_total

        total = sum(tier_totals.values())
        return SentimentResult(
            sentiment=_dominant(tier_totals),
            intensity=min(max(total / 100, 0.0), 1.0),
            emotions=emotions,
            keywords=keywords,
        )


def _dominant(tier_totals: dict[str, int]) -> str:
    best = max(tier_totals.values())
    leaders = [tier for tier, total in tier_totals.items() if total == best]
    if best == 0 or len(leaders) > 1:
        return "neutral"
    return leaders[0]
