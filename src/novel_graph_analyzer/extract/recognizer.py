"""Rule-based entity recognition for Chinese narrative text.

Each entity type has an ordered list of surface rules in ``patterns``.
Types are scanned in precedence order and a name claimed by one type is
never offered to a later one. Every accepted name then gets attributes
from the text around each of its occurrences.
"""

import logging

from ..config import get_settings
from ..models.entities import Entity, EntityAttributes, EntityType
from .mentions import find_mentions
from .patterns import (
    ATTRIBUTE_RULES,
    CHARACTER_PREFIX_NOISE,
    ENTITY_RULES,
    MAX_NAME_LENGTH,
    MAX_QUICK_NAME_LENGTH,
    MIN_NAME_LENGTH,
    PLACE_PREFIX_NOISE,
    QUICK_RULES,
    SurfaceRule,
)

logger = logging.getLogger(__name__)

TYPE_LABELS: dict[EntityType, str] = {
    EntityType.CHARACTER: "人物",
    EntityType.LOCATION: "地点",
    EntityType.ORGANIZATION: "组织",
    EntityType.ITEM: "物品",
    EntityType.SKILL: "技能",
    EntityType.RACE: "种族",
    EntityType.TITLE: "称号",
}


def clean_name(raw: str, entity_type: EntityType) -> str:
    """Trim the function words greedy rules drag in front of a name."""
    name = raw.strip()
    if entity_type in (EntityType.CHARACTER, EntityType.TITLE):
        return CHARACTER_PREFIX_NOISE.sub("", name)
    return PLACE_PREFIX_NOISE.sub("", name)


class EntityRecognizer:
    """Recognizes characters, places, organizations, items, skills, races and titles."""

    def __init__(self, context_window: int | None = None, quick_limit: int | None = None):
        """Initialize the recognizer.

        Args:
            context_window: Characters either side of a mention scanned for attributes
            quick_limit: Maximum entities returned by ``quick_extract``
        """
        settings = get_settings()
        self.context_window = context_window if context_window is not None else settings.context_window
        self.quick_limit = quick_limit if quick_limit is not None else settings.quick_entity_limit

    def recognize(self, text: str) -> list[Entity]:
        """Run every type's rules over the full text.

        Args:
            text: Document text

        Returns:
            Candidate entities in type-precedence order, unbounded
        """
        claimed: set[str] = set()
        entities: list[Entity] = []

        for entity_type, rules in ENTITY_RULES.items():
            candidates = self._candidates(text, entity_type, rules, MAX_NAME_LENGTH)
            for name, rule_name in candidates.items():
                if name in claimed:
                    continue
                claimed.add(name)
                entities.append(self._build(entity_type, name, rule_name, text))

        logger.debug("Recognized %d entities", len(entities))
        return entities

    def quick_extract(self, text: str) -> list[Entity]:
        """Lightweight recognition with the generic fallback rules.

        Only characters and locations are found, names are 2-10 characters
        and at most ``quick_limit`` entities are returned.
        """
        claimed: set[str] = set()
        entities: list[Entity] = []

        for entity_type, rules in QUICK_RULES.items():
            candidates = self._candidates(text, entity_type, rules, MAX_QUICK_NAME_LENGTH)
            for name, rule_name in candidates.items():
                if len(entities) >= self.quick_limit:
                    return entities
                if name in claimed:
                    continue
                claimed.add(name)
                entities.append(self._build(entity_type, name, rule_name, text))

        return entities

    def extract_attributes(self, entity_type: EntityType, name: str, text: str) -> EntityAttributes:
        """Gather attributes from the context window around every occurrence.

        Args:
            entity_type: Selects which attribute rules apply
            name: Surface name to look for
            text: Document text

        Returns:
            Attributes with ``frequency`` and ``first_appearance`` always set
        """
        positions = find_mentions(text, name)
        attributes = EntityAttributes(
            frequency=len(positions),
            first_appearance=positions[0] if positions else -1,
        )

        windows = [
            text[max(0, pos - self.context_window): pos + len(name) + self.context_window]
            for pos in positions
        ]

        for attribute_rule in ATTRIBUTE_RULES.get(entity_type, []):
            values: list[str] = []
            for window in windows:
                for match in attribute_rule.pattern.finditer(window):
                    value = (match.group(attribute_rule.group) or "").strip()
                    if value and value not in values:
                        values.append(value)
                if values and not attribute_rule.collect:
                    break

            if not values:
                continue

            current = getattr(attributes, attribute_rule.field)
            if attribute_rule.collect:
                merged = list(current or [])
                merged.extend(v for v in values if v not in merged)
                setattr(attributes, attribute_rule.field, merged)
            elif current is None:
                setattr(attributes, attribute_rule.field, values[0])

        return attributes

    def _candidates(
        self,
        text: str,
        entity_type: EntityType,
        rules: list[SurfaceRule],
        max_length: int,
    ) -> dict[str, str]:
        """Map each acceptable candidate name to the first rule that found it."""
        found: dict[str, str] = {}
        for surface_rule in rules:
            for match in surface_rule.scan(text):
                name = clean_name(match.groups.get("name") or match.text, entity_type)
                if MIN_NAME_LENGTH <= len(name) <= max_length and name not in found:
                    found[name] = surface_rule.name
        return found

    def _build(self, entity_type: EntityType, name: str, rule_name: str, text: str) -> Entity:
        return Entity(
            type=entity_type,
            name=name,
            description=f"通过{rule_name}规则识别的{TYPE_LABELS.get(entity_type, '实体')}",
            attributes=self.extract_attributes(entity_type, name, text),
        )
