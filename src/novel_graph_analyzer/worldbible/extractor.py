"""World-building extraction from events and the concept network.

Surfaces:
1. Core beliefs - value statements in events, value-laden important concepts
2. Social structures - named groups from organizational events
3. Cultural elements - five fixed categories, rated by event coverage
"""

import logging
import re
from itertools import combinations

from ..models.semantic import (
    ConceptNode,
    CulturalElement,
    SocialRelationship,
    SocialStructure,
    WorldBuildingElements,
)
from ..models.timeline import Event
from .categories import (
    CULTURAL_KEYWORDS,
    DEFAULT_SIGNIFICANCE,
    SIGNIFICANCE_LEVELS,
    SOCIAL_MARKERS,
    UNNAMED_GROUP,
    VALUE_KEYWORDS,
)

logger = logging.getLogger(__name__)

CORE_VALUE_IMPORTANCE = 0.5

ORGANIZATION_PATTERN = re.compile(
    rf"[^，。]*(?:{'|'.join(SOCIAL_MARKERS['organization'])})[^，。]*"
)


class WorldBuildingExtractor:
    """Extracts beliefs, social structures and cultural elements."""

    def extract(self, events: list[Event], network: list[ConceptNode]) -> WorldBuildingElements:
        return WorldBuildingElements(
            core_beliefs=self.extract_core_beliefs(events, network),
            social_structures=self.extract_social_structures(events),
            cultural_elements=self.extract_cultural_elements(events, network),
        )

    def extract_core_beliefs(self, events: list[Event], network: list[ConceptNode]) -> list[str]:
        beliefs: list[str] = []
        for event in events:
            if _contains_any(event.description, VALUE_KEYWORDS) and event.description not in beliefs:
                beliefs.append(event.description)

        for node in network:
            if node.global_importance <= CORE_VALUE_IMPORTANCE:
                continue
            value_related = [
                r.concept for r in node.related_concepts if _contains_any(r.concept, VALUE_KEYWORDS)
            ]
            if value_related:
                beliefs.append(f"{node.concept}作为核心价值观与{'、'.join(value_related)}相关")

        return beliefs

    def extract_social_structures(self, events: list[Event]) -> list[SocialStructure]:
        """Group participants of organizational events under the group's name."""
        groups: dict[str, list[str]] = {}
        for event in events:
            if len(event.participants) < 2:
                continue
            if not _contains_any(event.description, SOCIAL_MARKERS["organization"]):
                continue
            match = ORGANIZATION_PATTERN.search(event.description)
            name = match.group().strip() if match else ""
            members = groups.setdefault(name or UNNAMED_GROUP, [])
            members.extend(p for p in event.participants if p not in members)

        structures: list[SocialStructure] = []
        for name, members in groups.items():
            relationships = [
                SocialRelationship(source=a, target=b, type=self._relationship_type(a, b, events))
                for a, b in combinations(members, 2)
            ]
            structures.append(SocialStructure(name=name, members=members, relationships=relationships))

        logger.debug("Found %d social structures", len(structures))
        return structures

    def extract_cultural_elements(
        self, events: list[Event], network: list[ConceptNode]
    ) -> list[CulturalElement]:
        elements: list[CulturalElement] = []
        for category, keywords in CULTURAL_KEYWORDS.items():
            pattern = re.compile(rf"[^，。]*(?:{'|'.join(keywords)})[^，。]*")

            found: list[str] = []
            for event in events:
                for match in pattern.finditer(event.description):
                    phrase = match.group().strip()
                    if phrase and phrase not in found:
                        found.append(phrase)
            for node in network:
                if _contains_any(node.concept, keywords) and node.concept not in found:
                    found.append(node.concept)

            if not found:
                continue

            covered = sum(1 for e in events if _contains_any(e.description, keywords))
            ratio = covered / len(events) if events else 0.0
            elements.append(
                CulturalElement(
                    category=category.value,
                    elements=found,
                    significance=_significance(ratio),
                )
            )
        return elements

    def _relationship_type(self, first: str, second: str, events: list[Event]) -> str:
        """The first marker category found in events both members share."""
        shared = [e for e in events if first in e.participants and second in e.participants]
        for relationship_type, markers in SOCIAL_MARKERS.items():
            if any(_contains_any(e.description, markers) for e in shared):
                return relationship_type
        return "unknown"


def _contains_any(text: str, words: tuple[str, ...]) -> bool:
    return any(word in text for word in words)


def _significance(ratio: float) -> str:
    for threshold, label in SIGNIFICANCE_LEVELS:
        if ratio > threshold:
            return label
    return DEFAULT_SIGNIFICANCE
