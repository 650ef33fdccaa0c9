"""Locate entity mentions in text."""

from dataclasses import dataclass

from ..models.entities import Entity


@dataclass
class Mention:
    """A span of text referring to an entity."""

    start: int
    end: int
    entity: Entity

    @property
    def name(self) -> str:
        return self.entity.name


def find_mentions(text: str, name: str) -> list[int]:
    """Return the start offset of every non-overlapping occurrence of name."""
    positions: list[int] = []
    if not name:
        return positions
    start = text.find(name)
    while start != -1:
        positions.append(start)
        start = text.find(name, start + len(name))
    return positions


def build_mention_index(text: str, entities: list[Entity]) -> list[Mention]:
    """
    Index every entity mention in document order.

    Entities that already own mention offsets (after resolution) use them;
    others are located by searching for their name. When names overlap
    (长安 inside 长安城) only the longest span is kept.
    """
    candidates: list[Mention] = []
    for entity in entities:
        positions = entity.mentions or find_mentions(text, entity.name)
        for start in positions:
            candidates.append(Mention(start=start, end=start + len(entity.name), entity=entity))

    candidates.sort(key=lambda m: (m.start, -(m.end - m.start)))

    index: list[Mention] = []
    covered_until = -1
    for mention in candidates:
        if mention.start < covered_until:
            continue
        index.append(mention)
        covered_until = mention.end
    return index


def mentions_between(index: list[Mention], start: int, end: int) -> list[Mention]:
    """Mentions lying inside ``[start, end)``."""
    return [m for m in index if m.start >= start and m.end <= end]
