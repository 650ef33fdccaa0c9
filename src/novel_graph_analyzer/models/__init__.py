"""Data models for entities, relations, timeline and semantic analysis."""

from novel_graph_analyzer.models.analysis import AnalysisResult, Chapter, KnowledgeGraph
from novel_graph_analyzer.models.entities import (
    EmotionalArc,
    Entity,
    EntityAttributes,
    EntityType,
    PronounReference,
)
from novel_graph_analyzer.models.relationships import (
    EmotionalDynamic,
    Relation,
    RelationAttributes,
    RelationType,
)
from novel_graph_analyzer.models.semantic import (
    ConceptNode,
    CulturalElement,
    RelatedConcept,
    SemanticAnalysis,
    SocialRelationship,
    SocialStructure,
    ThematicCluster,
    WorldBuildingElements,
)
from novel_graph_analyzer.models.timeline import (
    CausalRelation,
    ChainEvent,
    Event,
    EventChain,
    EventImpact,
    SentimentResult,
    TimeExpression,
    Timeline,
)

__all__ = [
    "AnalysisResult",
    "CausalRelation",
    "ChainEvent",
    "Chapter",
    "ConceptNode",
    "CulturalElement",
    "EmotionalArc",
    "EmotionalDynamic",
    "Entity",
    "EntityAttributes",
    "EntityType",
    "Event",
    "EventChain",
    "EventImpact",
    "KnowledgeGraph",
    "PronounReference",
    "RelatedConcept",
    "Relation",
    "RelationAttributes",
    "RelationType",
    "SemanticAnalysis",
    "SentimentResult",
    "SocialRelationship",
    "SocialStructure",
    "ThematicCluster",
    "TimeExpression",
    "Timeline",
    "WorldBuildingElements",
]
