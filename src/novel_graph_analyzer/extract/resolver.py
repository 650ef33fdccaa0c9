"""Alias inference and disambiguation of same-name entities.

Occurrences of a name are inspected for a distinguishing marker: an
apposition phrase after the name (李明，又称剑圣) or a kinship, nickname or
status marker in front of it (老小明, 师父李明). A name whose occurrences
carry two or more different markers refers to several referents and is
split; otherwise all occurrences collapse into one entity and the markers
become aliases.
"""

import logging
from dataclasses import dataclass, field

from ..models.entities import Entity
from .mentions import find_mentions
from .patterns import APPOSITION_PATTERN, PREFIX_MARKER_ORDER, PREFIX_MARKERS

logger = logging.getLogger(__name__)

MAX_FEATURE_LENGTH = 10


@dataclass
class Occurrence:
    """One occurrence of a name and the marker found around it."""

    position: int
    label: str | None = None  # Canonical marker label
    surface: str | None = None  # Alias form as written (老小明, 剑圣)


@dataclass
class Referent:
    """Occurrences believed to denote the same thing."""

    label: str | None
    occurrences: list[Occurrence] = field(default_factory=list)

    @property
    def positions(self) -> list[int]:
        return [o.position for o in self.occurrences]


class EntityResolver:
    """Resolves aliases and splits entities that share a surface name."""

    def resolve(self, entities: list[Entity], text: str) -> list[Entity]:
        """Resolve recognized entities against the text.

        Args:
            entities: Candidates from the recognizer
            text: Document text

        Returns:
            Resolved entities, most frequent first. Every entity of a name
            that denotes more than one referent has a distinct
            ``disambiguated_id``; all other entities have none.
        """
        groups: dict[str, list[Entity]] = {}
        for entity in entities:
            groups.setdefault(entity.name, []).append(entity)

        # 老小明 is 小明 behind a marker; its occurrences are 小明's occurrences
        for name in [n for n in groups if marked_base(n, groups)]:
            logger.debug("Folding %s into %s", name, marked_base(name, groups))
            del groups[name]

        resolved: list[Entity] = []
        for name, members in groups.items():
            if len(members) > 1:
                resolved.extend(self._number_members(name, members, text))
                continue

            occurrences = [self._inspect(text, name, pos) for pos in find_mentions(text, name)]
            labels = _distinct(o.label for o in occurrences if o.label)

            if len(labels) >= 2:
                resolved.extend(self._split(members[0], occurrences))
            else:
                resolved.append(self._collapse(members[0], occurrences))

        resolved.sort(key=lambda e: e.attributes.frequency, reverse=True)
        return resolved

    def find_aliases(self, text: str, name: str) -> list[str]:
        """Alias forms written around the occurrences of ``name``."""
        occurrences = [self._inspect(text, name, pos) for pos in find_mentions(text, name)]
        return _distinct(o.surface for o in occurrences if o.surface)

    def _inspect(self, text: str, name: str, position: int) -> Occurrence:
        """Look for an apposition phrase after, or a marker before, one occurrence."""
        tail = text[position + len(name):]
        apposition = APPOSITION_PATTERN.match(tail)
        if apposition:
            phrase = apposition.group(1).strip()[:MAX_FEATURE_LENGTH]
            if phrase and phrase != name:
                return Occurrence(position=position, label=phrase, surface=phrase)

        head = text[:position]
        for marker in PREFIX_MARKER_ORDER:
            if head.endswith(marker):
                return Occurrence(
                    position=position,
                    label=PREFIX_MARKERS[marker],
                    surface=f"{marker}{name}",
                )

        return Occurrence(position=position)

    def _collapse(self, entity: Entity, occurrences: list[Occurrence]) -> Entity:
        resolved = entity.model_copy(deep=True)
        resolved.mentions = [o.position for o in occurrences]
        for occurrence in occurrences:
            if occurrence.surface:
                resolved.add_alias(occurrence.surface)
        return resolved

    def _split(self, entity: Entity, occurrences: list[Occurrence]) -> list[Entity]:
        """
        One entity per distinct marker label.

        An unmarked occurrence belongs to the most recent marked referent.
        Unmarked occurrences before the first marker form a referent of
        their own, identified by its ordinal.
        """
        referents: list[Referent] = []
        by_label: dict[str, Referent] = {}
        current: Referent | None = None

        for occurrence in occurrences:
            if occurrence.label:
                if occurrence.label not in by_label:
                    by_label[occurrence.label] = Referent(label=occurrence.label)
                    referents.append(by_label[occurrence.label])
                current = by_label[occurrence.label]
            elif current is None:
                current = Referent(label=None)
                referents.append(current)
            current.occurrences.append(occurrence)

        name = entity.name
        occurrence_index = {o.position: i for i, o in enumerate(occurrences)}
        results: list[Entity] = []

        for ordinal, referent in enumerate(referents, start=1):
            resolved = entity.model_copy(deep=True)
            positions = referent.positions
            resolved.mentions = positions
            resolved.attributes.frequency = len(positions)
            resolved.attributes.first_appearance = positions[0]

            if referent.label:
                resolved.disambiguated_id = f"{name}_{referent.label}"
                resolved.description = f"{name}（{referent.label}）"
            else:
                first = occurrence_index[positions[0]] + 1
                resolved.disambiguated_id = f"{name}_{ordinal}"
                resolved.description = f"{name}（第{first}处出现）"

            for occurrence in referent.occurrences:
                if occurrence.surface:
                    resolved.add_alias(occurrence.surface)
            results.append(resolved)

        logger.debug("Split %s into %d referents", name, len(results))
        return results

    def _number_members(self, name: str, members: list[Entity], text: str) -> list[Entity]:
        """Distinct input entities that share a name are numbered in input order."""
        results = []
        for ordinal, member in enumerate(members, start=1):
            resolved = member.model_copy(deep=True)
            resolved.disambiguated_id = f"{name}_{ordinal}"
            resolved.description = f"{name}（同名实体{ordinal}）"
            if not resolved.mentions:
                resolved.mentions = find_mentions(text, name)
            for alias in self.find_aliases(text, name):
                resolved.add_alias(alias)
            results.append(resolved)
        return results


def marked_base(name: str, names) -> str | None:
    """The known name ``name`` consists of, behind a prefix marker, if any."""
    for marker in PREFIX_MARKER_ORDER:
        if name.startswith(marker) and name[len(marker):] in names:
            return name[len(marker):]
    return None


def _distinct(values) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen
