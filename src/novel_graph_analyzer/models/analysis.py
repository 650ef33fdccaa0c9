"""The aggregate result of one pipeline run."""

from pydantic import Field

from .base import AnalysisModel
from .entities import Entity, PronounReference
from .relationships import Relation
from .semantic import SemanticAnalysis
from .timeline import Timeline


class Chapter(AnalysisModel):
    title: str
    content: str
    order: int


class KnowledgeGraph(AnalysisModel):
    entities: list[Entity] = Field(default_factory=list)
    relations: list[Relation] = Field(default_factory=list)
    references: list[PronounReference] = Field(default_factory=list)


class AnalysisResult(AnalysisModel):
    """Everything derived from a single document."""

    total_words: int
    estimated_chapters: int
    chapters: list[Chapter] = Field(default_factory=list)
    summary: str = ""
    knowledge_graph: KnowledgeGraph = Field(default_factory=KnowledgeGraph)
    timeline: Timeline = Field(default_factory=Timeline)
    semantic_analysis: SemanticAnalysis = Field(default_factory=SemanticAnalysis)
