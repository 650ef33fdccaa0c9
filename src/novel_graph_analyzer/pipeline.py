"""Analysis pipeline orchestration.

Runs every stage once over a document, in dependency order:

    segment -> recognize -> resolve -> coreference -> relations
            -> time expressions -> events -> sentiment -> causal chains
            -> semantic analysis

then copies timeline information back onto entities (emotional arcs) and
relations (emotional dynamics). A failing stage is logged and replaced by
its empty result; only problems with the document itself reach the caller
as ``ContentError``. Anything else unexpected is wrapped in
``InternalAnalysisError``.
"""

import logging
from typing import Callable, TypeVar

from .config import Settings, get_settings
from .errors import ContentError, InternalAnalysisError
from .extract import CoreferenceResolver, EntityRecognizer, EntityResolver, RelationExtractor
from .ingest.splitter import count_words, generate_summary, split_into_chapters
from .models.analysis import AnalysisResult, KnowledgeGraph
from .models.entities import EmotionalArc, Entity, EntityType
from .models.relationships import EmotionalDynamic, Relation
from .models.semantic import SemanticAnalysis
from .models.timeline import Event, Timeline
from .sentiment import SentimentAnalyzer
from .timeline import (
    ChainAnalysis,
    EventChainAnalyzer,
    EventExtractor,
    TimeExpressionExtractor,
    assess_impact,
    sort_timeline,
)
from .worldbible import SemanticClusterer

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[str, int, int], None]

STAGES = (
    "segment",
    "recognize",
    "resolve",
    "coreference",
    "relations",
    "time_expressions",
    "events",
    "sentiment",
    "causality",
    "semantic",
)


class NovelAnalyzer:
    """Turns a manuscript into an ``AnalysisResult``.

    Usage:
        analyzer = NovelAnalyzer()
        result = analyzer.analyze(text)
        print(result.to_dict()["knowledgeGraph"]["entities"])
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        s = self.settings
        self.recognizer = EntityRecognizer(context_window=s.context_window, quick_limit=s.quick_entity_limit)
        self.resolver = EntityResolver()
        self.coreference = CoreferenceResolver(max_tracked=s.max_tracked_mentions)
        self.relation_extractor = RelationExtractor(
            window=s.cooccurrence_window,
            min_confidence=s.min_relation_confidence,
            explicit_confidence=s.explicit_relation_confidence,
            max_confidence=s.max_relation_confidence,
        )
        self.time_extractor = TimeExpressionExtractor()
        self.event_extractor = EventExtractor()
        self.sentiment = SentimentAnalyzer()
        self.chain_analyzer = EventChainAnalyzer()
        self.clusterer = SemanticClusterer()

    def analyze(
        self,
        content: str,
        concepts: list[Entity] | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> AnalysisResult:
        """Analyze a document.

        Args:
            content: Full manuscript text
            concepts: Optional CONCEPT entities for the semantic analysis
            progress_callback: Called as ``(stage, index, total)`` before each stage

        Returns:
            The aggregate analysis result

        Raises:
            ContentError: The content is empty or not analyzable text
            InternalAnalysisError: An unexpected fault outside the stages
        """
        validate_content(content)
        try:
            return self._run(content, concepts or [], progress_callback)
        except Exception as e:
            error = InternalAnalysisError.wrap(e)
            if error is e:
                raise
            logger.exception("Analysis failed")
            raise error from e

    def _run(
        self,
        content: str,
        concepts: list[Entity],
        progress_callback: ProgressCallback | None,
    ) -> AnalysisResult:
        s = self.settings

        def step(stage: str) -> None:
            logger.debug("Stage %s", stage)
            if progress_callback:
                progress_callback(stage, STAGES.index(stage) + 1, len(STAGES))

        step("segment")
        total_words = count_words(content)
        chapters = split_into_chapters(
            content,
            total_words=total_words,
            words_per_chapter=s.words_per_chapter,
            single_chapter_threshold=s.single_chapter_word_threshold,
            min_paragraphs=s.min_paragraphs_for_split,
        )
        summary = generate_summary(content, s.summary_max_length)

        step("recognize")
        candidates = self._recognize(content)

        step("resolve")
        entities = self._stage("resolve", lambda: self.resolver.resolve(candidates, content), lambda: candidates)

        step("coreference")
        references = self._stage("coreference", lambda: self.coreference.resolve(content, entities), list)

        step("relations")
        relations = self._stage("relations", lambda: self.relation_extractor.extract(entities, content), list)

        step("time_expressions")
        time_expressions = self._stage("time_expressions", lambda: self.time_extractor.extract(content), list)

        step("events")
        events = self._stage(
            "events", lambda: self.event_extractor.extract(content, entities, time_expressions), list
        )

        step("sentiment")
        self._stage("sentiment", lambda: self._attach_sentiment(events), lambda: None)

        step("causality")
        chains = self._stage("causality", lambda: self.chain_analyzer.analyze(events), ChainAnalysis)
        for event in events:
            event.impact = assess_impact(event, chains.causal_relations)

        propagate_emotional_arcs(entities, events)
        propagate_emotional_dynamics(relations, events, entities)

        step("semantic")
        entity_names = list(dict.fromkeys(e.name for e in entities))
        concept_entities = concepts + [e for e in entities if e.type == EntityType.CONCEPT]
        semantic = self._stage(
            "semantic",
            lambda: self.clusterer.analyze(entity_names, events, concept_entities),
            SemanticAnalysis,
        )

        return AnalysisResult(
            total_words=total_words,
            estimated_chapters=len(chapters),
            chapters=chapters,
            summary=summary,
            knowledge_graph=KnowledgeGraph(entities=entities, relations=relations, references=references),
            timeline=Timeline(
                events=sort_timeline(events),
                time_expressions=time_expressions,
                event_chains=chains.chains,
                causal_relations=chains.causal_relations,
            ),
            semantic_analysis=semantic,
        )

    def _recognize(self, content: str) -> list[Entity]:
        """Primary recognizer, falling back to the lightweight rules."""
        try:
            return self.recognizer.recognize(content)
        except Exception:
            logger.warning("Entity recognition failed, using quick extraction", exc_info=True)
        return self._stage("quick_recognize", lambda: self.recognizer.quick_extract(content), list)

    def _attach_sentiment(self, events: list[Event]) -> None:
        for event in events:
            event.sentiment = self.sentiment.analyze(event.description)

    def _stage(self, name: str, run: Callable[[], T], empty: Callable[[], T]) -> T:
        try:
            return run()
        except Exception:
            logger.warning("Stage %s failed, continuing with an empty result", name, exc_info=True)
            return empty()


def validate_content(content: object) -> None:
    """Reject input that cannot be analyzed."""
    if not isinstance(content, str):
        raise ContentError("无法解析的内容: 需要文本输入")
    if not content.strip():
        raise ContentError("无法分析空内容")
    if "\x00" in content:
        raise ContentError("无法解析的内容: 包含二进制数据")


def takes_part(entity: Entity, event: Event) -> bool:
    """Whether an entity participates in an event.

    A split referent (小明_老) only takes part in events whose sentence holds
    one of its own mentions; other entities match by name.
    """
    if entity.name not in event.participants:
        return False
    if entity.disambiguated_id and entity.mentions and event.start >= 0:
        return any(event.covers(position) for position in entity.mentions)
    return True


def propagate_emotional_arcs(entities: list[Entity], events: list[Event]) -> None:
    """Attach each entity's emotional arc and event statistics."""
    ordered = sorted(events, key=lambda e: e.order)
    for entity in entities:
        participating = [e for e in ordered if takes_part(entity, e)]
        entity.emotional_arcs = [
            EmotionalArc(
                event=event.label,
                emotion=event.sentiment.sentiment if event.sentiment else "neutral",
                intensity=event.sentiment.intensity if event.sentiment else 0.0,
                timestamp=event.time_info.expression if event.time_info else None,
            )
            for event in participating
        ]
        entity.attributes.event_count = len(participating)
        if participating:
            entity.attributes.first_appearance_event = participating[0].label
            entity.attributes.last_appearance_event = participating[-1].label


def propagate_emotional_dynamics(
    relations: list[Relation], events: list[Event], entities: list[Entity] | None = None
) -> None:
    """Attach the sentiment of every event both endpoints take part in."""
    by_key = {entity.key: entity for entity in entities or []}
    ordered = sorted(events, key=lambda e: e.order)

    def involved(key: str, name: str, event: Event) -> bool:
        entity = by_key.get(key)
        if entity is not None:
            return takes_part(entity, event)
        return name in event.participants

    for relation in relations:
        source = relation.attributes.source_name or relation.source
        target = relation.attributes.target_name or relation.target
        shared = [
            e for e in ordered
            if involved(relation.source, source, e) and involved(relation.target, target, e)
        ]
        relation.emotional_dynamics = [
            EmotionalDynamic(
                timestamp=event.time_info.expression if event.time_info else f"事件{event.order}",
                sentiment=event.sentiment.sentiment if event.sentiment else "neutral",
                intensity=event.sentiment.intensity if event.sentiment else 0.0,
                context=event.description,
            )
            for event in shared
        ]
        relation.attributes.interaction_count = len(shared)
        if shared:
            relation.attributes.first_interaction_event = shared[0].label
            relation.attributes.last_interaction_event = shared[-1].label


def analyze_novel_content(content: str, concepts: list[Entity] | None = None) -> AnalysisResult:
    """Analyze a document with default settings."""
    return NovelAnalyzer().analyze(content, concepts=concepts)
