"""Pronoun resolution by speaker tracking and mention recency."""

import logging
import re

from ..config import get_settings
from ..ingest.splitter import split_sentences
from ..models.entities import Entity, EntityType, PronounReference
from .mentions import Mention, build_mention_index, mentions_between
from .patterns import PRONOUNS, SPEECH_PATTERN

logger = logging.getLogger(__name__)

PRONOUN_PATTERNS: dict[str, re.Pattern] = {
    category: re.compile("|".join(re.escape(p) for p in words))
    for category, words in PRONOUNS.items()
}

# Categories that refer to people rather than things
PERSONAL_CATEGORIES = {"first", "third", "reflexive"}


class CoreferenceResolver:
    """Resolves pronouns sentence by sentence.

    Keeps the current speaker (set by "X说/道/问道..." sentences) and a
    short most-recent-first list of mentioned entities. Second-person
    pronouns are never resolved.
    """

    def __init__(self, max_tracked: int | None = None):
        settings = get_settings()
        self.max_tracked = max_tracked if max_tracked is not None else settings.max_tracked_mentions

    def resolve(self, text: str, entities: list[Entity]) -> list[PronounReference]:
        """Resolve the pronouns in ``text`` to ``entities``.

        Returns:
            One reference per resolvable pronoun, in document order.
            ``position`` is the pronoun's offset in the text.
        """
        index = build_mention_index(text, entities)
        references: list[PronounReference] = []

        speaker: Entity | None = None
        recent: list[Entity] = []

        for sentence in split_sentences(text):
            mentions = mentions_between(index, sentence.start, sentence.end)

            new_speaker = self._find_speaker(sentence.text, sentence.start, mentions)
            if new_speaker is not None:
                speaker = new_speaker
                recent = [speaker]

            # Walk mentions and pronouns in order so a pronoun only sees
            # entities mentioned before it
            tokens: list[tuple[int, Mention | tuple[str, str]]] = [(m.start, m) for m in mentions]
            tokens.extend(
                (sentence.start + offset, hit)
                for offset, hit in self._find_pronouns(sentence.text, sentence.start, mentions)
            )
            tokens.sort(key=lambda t: (t[0], isinstance(t[1], tuple)))

            for position, token in tokens:
                if isinstance(token, Mention):
                    self._remember(recent, token.entity)
                    continue
                category, pronoun = token
                resolution = self._resolve_one(category, speaker, recent)
                if resolution is None:
                    continue
                referent, confidence = resolution
                references.append(
                    PronounReference(
                        pronoun=pronoun,
                        referent=referent.key,
                        position=position,
                        confidence=confidence,
                        category=category,
                    )
                )

        logger.debug("Resolved %d pronoun references", len(references))
        return references

    def _find_speaker(self, sentence: str, offset: int, mentions: list[Mention]) -> Entity | None:
        match = SPEECH_PATTERN.search(sentence)
        if not match:
            return None
        span_start = offset + match.start(1)
        span_end = offset + match.end(1)
        inside = [m for m in mentions if m.start >= span_start and m.end <= span_end]
        # The name closest to the speech verb is the speaker
        return inside[-1].entity if inside else None

    def _find_pronouns(
        self, sentence: str, offset: int, mentions: list[Mention]
    ) -> list[tuple[int, tuple[str, str]]]:
        """Pronoun hits as ``(offset_in_sentence, (category, pronoun))``.

        Hits inside an entity name are ignored, and where two categories
        match at the same offset the longer pronoun wins.
        """
        best: dict[int, tuple[str, str]] = {}
        for category, pattern in PRONOUN_PATTERNS.items():
            for match in pattern.finditer(sentence):
                absolute = offset + match.start()
                if any(m.start <= absolute < m.end for m in mentions):
                    continue
                current = best.get(match.start())
                if current is None or len(match.group()) > len(current[1]):
                    best[match.start()] = (category, match.group())
        return sorted(best.items())

    def _remember(self, recent: list[Entity], entity: Entity) -> None:
        if entity in recent:
            recent.remove(entity)
        recent.insert(0, entity)
        del recent[self.max_tracked:]

    def _resolve_one(
        self, category: str, speaker: Entity | None, recent: list[Entity]
    ) -> tuple[Entity, float] | None:
        candidates = recent
        if category in PERSONAL_CATEGORIES:
            people = [e for e in recent if e.type == EntityType.CHARACTER]
            candidates = people or recent

        if category in ("first", "reflexive"):
            if speaker is not None:
                return speaker, 0.9
            return (candidates[0], 0.7) if candidates else None
        if category == "third":
            return (candidates[0], 0.7) if candidates else None
        if category == "near":
            return (candidates[0], 0.8) if candidates else None
        if category == "far":
            return (candidates[1], 0.7) if len(candidates) >= 2 else None
        return None
