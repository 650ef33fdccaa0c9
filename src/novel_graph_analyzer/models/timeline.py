"""Timeline models: time expressions, events and causal structure."""

from typing import Literal

from pydantic import Field

from .base import AnalysisModel


class TimeExpression(AnalysisModel):
    """A time expression found in the text.

    ``type`` is ``<category>_<subtype>``, e.g. ``absolute_date``.
    ``position`` is a character offset into the analyzed text.
    """

    expression: str
    type: str
    normalized: str | None = None
    position: int

    @property
    def is_absolute(self) -> bool:
        return self.type.startswith("absolute_")


class SentimentResult(AnalysisModel):
    """Lexicon-based sentiment of a piece of text."""

    sentiment: Literal["positive", "negative", "neutral"] = "neutral"
    intensity: float = 0.0
    emotions: dict[str, int] = Field(default_factory=dict)
    keywords: list[str] = Field(default_factory=list)


class EventImpact(AnalysisModel):
    scope: Literal["individual", "group", "global"]
    severity: float
    consequences: list[str] = Field(default_factory=list)


class Event(AnalysisModel):
    """A sentence-level narrative occurrence."""

    description: str
    participants: list[str] = Field(default_factory=list)
    time_info: TimeExpression | None = None
    location: str | None = None
    order: int
    confidence: float
    sentiment: SentimentResult | None = None
    impact: EventImpact | None = None

    # Character span of the sentence; used to tell same-name referents apart
    start: int = Field(default=-1, exclude=True)
    end: int = Field(default=-1, exclude=True)

    def covers(self, position: int) -> bool:
        return self.start <= position < self.end

    @property
    def has_absolute_time(self) -> bool:
        return self.time_info is not None and self.time_info.is_absolute

    @property
    def label(self) -> str:
        """Short label used when other records point at this event."""
        return self.description[:50]


class CausalRelation(AnalysisModel):
    cause: Event
    effect: Event
    confidence: float
    basis: list[str] = Field(default_factory=list)


class ChainEvent(AnalysisModel):
    event: Event
    role: Literal["cause", "effect", "neutral"]
    importance: float


class EventChain(AnalysisModel):
    """Ordered events sharing one participant."""

    events: list[ChainEvent] = Field(default_factory=list)
    theme: str
    significance: float


class Timeline(AnalysisModel):
    events: list[Event] = Field(default_factory=list)
    time_expressions: list[TimeExpression] = Field(default_factory=list)
    event_chains: list[EventChain] = Field(default_factory=list)
    causal_relations: list[CausalRelation] = Field(default_factory=list)
