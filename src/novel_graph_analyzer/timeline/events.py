"""Event extraction and timeline ordering.

A sentence becomes an event when it uses event vocabulary (action,
interaction, change or movement) and mentions at least one known entity.
"""

import logging
import re

from ..extract.mentions import build_mention_index, mentions_between
from ..ingest.splitter import Sentence, split_sentences
from ..models.entities import Entity, EntityType
from ..models.timeline import Event, TimeExpression
from .patterns import EVENT_INDICATORS
from .temporal import time_sort_key

logger = logging.getLogger(__name__)

INDICATOR_PATTERN = re.compile(
    "|".join(word for words in EVENT_INDICATORS.values() for word in words)
)


class EventExtractor:
    """Turns indicator sentences into events."""

    def extract(
        self,
        text: str,
        entities: list[Entity],
        time_expressions: list[TimeExpression] | None = None,
    ) -> list[Event]:
        """Extract events in document order.

        Args:
            text: Document text
            entities: Known entities; participants are their names
            time_expressions: Candidates for each event's time anchor

        Returns:
            Events whose ``order`` is the sentence index
        """
        time_expressions = time_expressions or []
        index = build_mention_index(text, entities)
        events: list[Event] = []

        for sentence in split_sentences(text):
            if not INDICATOR_PATTERN.search(sentence.text):
                continue

            mentions = mentions_between(index, sentence.start, sentence.end)
            participants: list[str] = []
            location: str | None = None
            for mention in mentions:
                if mention.name not in participants:
                    participants.append(mention.name)
                if location is None and mention.entity.type == EntityType.LOCATION:
                    location = mention.name

            if not participants:
                continue

            events.append(
                Event(
                    description=sentence.text,
                    participants=participants,
                    time_info=nearest_time_expression(sentence, time_expressions),
                    location=location,
                    order=sentence.index,
                    confidence=0.8 if len(participants) > 1 else 0.6,
                    start=sentence.start,
                    end=sentence.end,
                )
            )

        logger.debug("Extracted %d events", len(events))
        return events


def nearest_time_expression(
    sentence: Sentence, time_expressions: list[TimeExpression]
) -> TimeExpression | None:
    """The expression closest to the sentence span; the first found wins ties.

    Expressions inside the sentence have distance zero.
    """
    best: TimeExpression | None = None
    best_distance: int | None = None
    for expression in time_expressions:
        if sentence.contains(expression.position):
            distance = 0
        elif expression.position < sentence.start:
            distance = sentence.start - expression.position
        else:
            distance = expression.position - sentence.end
        if best_distance is None or distance < best_distance:
            best, best_distance = expression, distance
    return best


def sort_timeline(events: list[Event]) -> list[Event]:
    """
    Order events for the timeline.

    Events anchored by an absolute time come first, ordered by their
    normalized time where one exists, then everything else; ``order``
    breaks ties.
    """

    def key(event: Event) -> tuple:
        if event.has_absolute_time:
            return (0, time_sort_key(event.time_info), event.order)
        return (1, (), event.order)

    return sorted(events, key=key)
