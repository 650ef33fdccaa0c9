"""Semantic analysis models: concept network, themes and world-building."""

from pydantic import Field

from .base import AnalysisModel
from .timeline import Event


class RelatedConcept(AnalysisModel):
    concept: str
    strength: float
    basis: list[str] = Field(default_factory=list)


class ConceptNode(AnalysisModel):
    """A concept with its weighted neighbours."""

    concept: str
    related_concepts: list[RelatedConcept] = Field(default_factory=list)
    global_importance: float = 0.0


class ThematicCluster(AnalysisModel):
    theme: str
    concepts: list[str] = Field(default_factory=list)
    entities: list[str] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)
    significance: float = 0.0


class SocialRelationship(AnalysisModel):
    source: str
    target: str
    type: str


class SocialStructure(AnalysisModel):
    """A named group whose members share organizational events."""

    name: str
    members: list[str] = Field(default_factory=list)
    relationships: list[SocialRelationship] = Field(default_factory=list)


class CulturalElement(AnalysisModel):
    category: str
    elements: list[str] = Field(default_factory=list)
    significance: str


class WorldBuildingElements(AnalysisModel):
    core_beliefs: list[str] = Field(default_factory=list)
    social_structures: list[SocialStructure] = Field(default_factory=list)
    cultural_elements: list[CulturalElement] = Field(default_factory=list)


class SemanticAnalysis(AnalysisModel):
    concept_network: list[ConceptNode] = Field(default_factory=list)
    thematic_clusters: list[ThematicCluster] = Field(default_factory=list)
    world_building_elements: WorldBuildingElements = Field(default_factory=WorldBuildingElements)
