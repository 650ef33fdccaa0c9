"""Entity models for the knowledge graph."""

from enum import Enum

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from .base import AnalysisModel


class EntityType(str, Enum):
    """Kinds of named things recognized in a narrative."""

    CHARACTER = "CHARACTER"
    LOCATION = "LOCATION"
    ORGANIZATION = "ORGANIZATION"
    ITEM = "ITEM"
    SKILL = "SKILL"
    RACE = "RACE"
    TITLE = "TITLE"
    EVENT = "EVENT"
    CONCEPT = "CONCEPT"
    FACTION = "FACTION"
    RELATIONSHIP = "RELATIONSHIP"


class EntityAttributes(AnalysisModel):
    """Attributes gathered for an entity.

    The declared fields are the ones the attribute rules know how to fill.
    Anything else passed in is kept as an extra key.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    # Always present
    frequency: int = 0
    first_appearance: int = -1

    # CHARACTER
    personality: list[str] | None = None
    age: str | None = None
    generation: str | None = None
    status: str | None = None

    # ITEM
    quality: str | None = None
    rarity: str | None = None
    power: str | None = None  # also SKILL
    material: str | None = None
    origin: str | None = None

    # SKILL
    level: str | None = None
    skill_type: str | None = None
    element: str | None = None
    difficulty: str | None = None

    # LOCATION
    size: str | None = None
    environment: str | None = None
    climate: str | None = None
    significance: str | None = None
    resources: str | None = None

    # ORGANIZATION
    scale: str | None = None
    influence: str | None = None
    nature: str | None = None
    history: str | None = None
    territory: str | None = None

    # Timeline back-propagation
    first_appearance_event: str | None = None
    last_appearance_event: str | None = None
    event_count: int | None = None


class EmotionalArc(AnalysisModel):
    """One step of an entity's emotional trajectory."""

    event: str
    emotion: str
    intensity: float
    timestamp: str | None = None


class Entity(AnalysisModel):
    """A recognized named thing in the narrative."""

    type: EntityType
    name: str
    description: str = ""
    attributes: EntityAttributes = Field(default_factory=EntityAttributes)
    aliases: list[str] = Field(default_factory=list)
    disambiguated_id: str | None = None
    emotional_arcs: list[EmotionalArc] = Field(default_factory=list)

    # Character offsets of the mentions this entity owns; not serialized
    mentions: list[int] = Field(default_factory=list, exclude=True)

    @property
    def key(self) -> str:
        """Identifier used by relations and storage."""
        return self.disambiguated_id or self.name

    def add_alias(self, alias: str) -> None:
        alias = alias.strip()
        if alias and alias != self.name and alias not in self.aliases:
            self.aliases.append(alias)


class PronounReference(AnalysisModel):
    """A pronoun resolved to the entity it most likely refers to."""

    pronoun: str
    referent: str
    position: int
    confidence: float
    category: str | None = None
