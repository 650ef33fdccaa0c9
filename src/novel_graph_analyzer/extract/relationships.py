"""Relation extraction from text.

Extracts relations between recognized entities using:
1. Explicit templates (mentorship, kinship, faction, location, skill, item)
2. Proximity of mentions for pairs no template connected
"""

import logging
import re
from itertools import combinations

from ..config import get_settings
from ..models.entities import Entity, EntityType
from ..models.relationships import Relation, RelationAttributes
from .mentions import find_mentions
from .patterns import (
    CONTEXT_SNIPPET,
    COOCCURRENCE_SPAN,
    COOCCURRENCE_TYPES,
    DEFAULT_COOCCURRENCE,
    RELATION_RULES,
)

logger = logging.getLogger(__name__)


def min_distance(first: list[int], second: list[int]) -> tuple[int, int, int] | None:
    """Closest pair between two sorted offset lists.

    Returns:
        ``(distance, first_offset, second_offset)`` or None if either is empty
    """
    if not first or not second:
        return None
    i = j = 0
    best: tuple[int, int, int] | None = None
    while i < len(first) and j < len(second):
        a, b = first[i], second[j]
        distance = abs(a - b)
        if best is None or distance < best[0]:
            best = (distance, a, b)
        if a < b:
            i += 1
        else:
            j += 1
    return best


class RelationExtractor:
    """Extracts typed, confidence-scored relations between entities."""

    def __init__(
        self,
        window: int | None = None,
        min_confidence: float | None = None,
        explicit_confidence: float | None = None,
        max_confidence: float | None = None,
    ):
        """Initialize the extractor.

        Args:
            window: Maximum mention distance for the co-occurrence pass
            min_confidence: Relations at or below this are dropped
            explicit_confidence: Confidence of template matches
            max_confidence: Cap for co-occurrence confidence
        """
        settings = get_settings()
        self.window = window if window is not None else settings.cooccurrence_window
        self.min_confidence = (
            min_confidence if min_confidence is not None else settings.min_relation_confidence
        )
        self.explicit_confidence = (
            explicit_confidence
            if explicit_confidence is not None
            else settings.explicit_relation_confidence
        )
        self.max_confidence = (
            max_confidence if max_confidence is not None else settings.max_relation_confidence
        )

    def extract(self, entities: list[Entity], text: str) -> list[Relation]:
        """Extract relations between ``entities`` in ``text``.

        Returns:
            Relations sorted by descending confidence, one per unordered
            pair, all above ``min_confidence``, with endpoints rewritten to
            disambiguated identifiers.
        """
        by_name: dict[str, list[Entity]] = {}
        for entity in entities:
            by_name.setdefault(entity.name, []).append(entity)

        explicit = self.extract_explicit(text, list(by_name))
        inferred = self.extract_cooccurrence(text, by_name, {r.pair for r in explicit})

        relations = self._deduplicate(explicit + inferred)
        relations.sort(key=lambda r: r.confidence, reverse=True)
        relations = [r for r in relations if r.confidence > self.min_confidence]

        for relation in relations:
            relation.source = self._referent_key(by_name[relation.source], relation.position)
            relation.target = self._referent_key(by_name[relation.target], relation.position)

        logger.debug(
            "Extracted %d relations (%d explicit, %d co-occurrence)",
            len(relations),
            len(explicit),
            len(inferred),
        )
        return relations

    def extract_explicit(self, text: str, names: list[str]) -> list[Relation]:
        """Apply the relation templates.

        A template's capture groups are bound to the longest known entity
        name they contain.
        """
        relations: list[Relation] = []
        for relation_rule in RELATION_RULES:
            for match in relation_rule.rule.scan(text):
                source = self._bind(match.groups.get("source"), names)
                target = self._bind(match.groups.get("target"), names)
                if not source or not target or source == target:
                    continue
                relations.append(
                    Relation(
                        source=source,
                        target=target,
                        type=relation_rule.type,
                        attributes=RelationAttributes(
                            confidence=self.explicit_confidence,
                            context=_snippet(text, match.start, match.end),
                            pattern=relation_rule.rule.name,
                            source_name=source,
                            target_name=target,
                        ),
                        position=match.start,
                    )
                )
        return relations

    def extract_cooccurrence(
        self,
        text: str,
        by_name: dict[str, list[Entity]],
        related: set[frozenset[str]] | None = None,
    ) -> list[Relation]:
        """Relate entity pairs whose nearest mentions fall within the window.

        Distance is the minimum over all occurrence pairs of both names.
        """
        related = related or set()
        mentions = {name: find_mentions(text, name) for name in by_name}
        types = {name: group[0].type for name, group in by_name.items()}

        relations: list[Relation] = []
        for first, second in combinations(by_name, 2):
            if frozenset((first, second)) in related:
                continue
            closest = min_distance(mentions[first], mentions[second])
            if closest is None:
                continue
            distance, first_pos, second_pos = closest
            if distance > self.window:
                continue

            source, target = first, second
            if types[second] == EntityType.CHARACTER and types[first] != EntityType.CHARACTER:
                source, target = second, first
            relation_type, base = COOCCURRENCE_TYPES.get(
                (types[source], types[target]), DEFAULT_COOCCURRENCE
            )
            confidence = min(base * (1 - distance / self.window), self.max_confidence)

            start = min(first_pos, second_pos)
            end = max(first_pos + len(first), second_pos + len(second))
            relations.append(
                Relation(
                    source=source,
                    target=target,
                    type=relation_type,
                    attributes=RelationAttributes(
                        confidence=round(confidence, 4),
                        context=_snippet(text, start, end),
                        source_name=source,
                        target_name=target,
                        distance=distance,
                        source_type=types[source].value,
                        target_type=types[target].value,
                        source_frequency=len(mentions[source]),
                        target_frequency=len(mentions[target]),
                        co_occurrence_count=_count_cooccurrences(text, source, target),
                    ),
                    position=start,
                )
            )
        return relations

    def _bind(self, span: str | None, names: list[str]) -> str | None:
        if not span:
            return None
        contained = [name for name in names if name in span]
        if not contained:
            return None
        return max(contained, key=len)

    def _deduplicate(self, relations: list[Relation]) -> list[Relation]:
        """Keep the first relation found for each unordered pair."""
        seen: set[frozenset[str]] = set()
        unique: list[Relation] = []
        for relation in relations:
            if relation.pair in seen:
                continue
            seen.add(relation.pair)
            unique.append(relation)
        return unique

    def _referent_key(self, group: list[Entity], position: int) -> str:
        """Identifier of the same-name referent whose mention is nearest ``position``."""
        if len(group) == 1:
            return group[0].key

        def distance(entity: Entity) -> float:
            if not entity.mentions:
                return float("inf")
            return min(abs(m - position) for m in entity.mentions)

        return min(group, key=distance).key


def _snippet(text: str, start: int, end: int) -> str:
    return text[max(0, start - CONTEXT_SNIPPET): end + CONTEXT_SNIPPET]


def _count_cooccurrences(text: str, first: str, second: str) -> int:
    a, b = re.escape(first), re.escape(second)
    pattern = rf"{a}[\s\S]{{0,{COOCCURRENCE_SPAN}}}?{b}|{b}[\s\S]{{0,{COOCCURRENCE_SPAN}}}?{a}"
    return len(re.findall(pattern, text))
