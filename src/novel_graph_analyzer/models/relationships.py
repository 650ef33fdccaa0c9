"""Relationship models for the knowledge graph."""

from enum import Enum

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from .base import AnalysisModel


class RelationType(str, Enum):
    """Types of relations between entities."""

    # Explicit templates
    MASTER_APPRENTICE = "MASTER_APPRENTICE"
    FAMILY = "FAMILY"
    FACTION = "FACTION"
    LOCATION = "LOCATION"
    SKILL = "SKILL"
    ITEM = "ITEM"

    # Inferred from co-occurrence
    CHARACTER_RELATION = "CHARACTER_RELATION"
    BELONGS_TO = "BELONGS_TO"
    APPEARS_IN = "APPEARS_IN"
    POSSESSES = "POSSESSES"
    OWNS = "OWNS"
    RELATED_TO = "RELATED_TO"


class RelationAttributes(AnalysisModel):
    """Evidence attached to a relation. Unknown keys are kept as extras."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    confidence: float
    context: str = ""
    pattern: str | None = None

    # Surface names of the endpoints before identifier rewriting
    source_name: str | None = None
    target_name: str | None = None

    # Co-occurrence statistics
    distance: int | None = None
    source_type: str | None = None
    target_type: str | None = None
    source_frequency: int | None = None
    target_frequency: int | None = None
    co_occurrence_count: int | None = None

    # Timeline back-propagation
    first_interaction_event: str | None = None
    last_interaction_event: str | None = None
    interaction_count: int | None = None


class EmotionalDynamic(AnalysisModel):
    """Sentiment of one interaction between two related entities."""

    timestamp: str
    sentiment: str
    intensity: float
    context: str


class Relation(AnalysisModel):
    """A directed, typed, confidence-scored edge between two entities."""

    source: str
    target: str
    type: RelationType
    attributes: RelationAttributes
    emotional_dynamics: list[EmotionalDynamic] = Field(default_factory=list)

    # Character offset of the evidence; used to pick between same-name referents
    position: int = Field(default=0, exclude=True)

    @property
    def confidence(self) -> float:
        return self.attributes.confidence

    @property
    def pair(self) -> frozenset[str]:
        """Unordered endpoint pair used for symmetric deduplication."""
        return frozenset((self.source, self.target))
