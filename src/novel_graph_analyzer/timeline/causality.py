"""Causal links between events and per-participant event chains."""

import logging
from dataclasses import dataclass, field

from ..models.timeline import CausalRelation, ChainEvent, Event, EventChain, EventImpact
from .patterns import CAUSAL_MARKERS

logger = logging.getLogger(__name__)

ALL_MARKERS: tuple[str, ...] = tuple(m for markers in CAUSAL_MARKERS.values() for m in markers)

BASE_CONFIDENCE = 0.1
TEMPORAL_BONUS = 0.2
PARTICIPANT_BONUS = 0.2
MARKER_BONUS = 0.3
CAUSAL_THRESHOLD = 0.4


@dataclass
class ChainAnalysis:
    """Output of the event chain analyzer."""

    chains: list[EventChain] = field(default_factory=list)
    causal_relations: list[CausalRelation] = field(default_factory=list)


class EventChainAnalyzer:
    """Infers causality between neighbouring events and builds event chains."""

    def analyze(self, events: list[Event]) -> ChainAnalysis:
        """Analyze events given in document order."""
        causal_relations = self.infer_causality(events)
        chains = self.build_chains(events, causal_relations)
        logger.debug("Built %d chains, %d causal links", len(chains), len(causal_relations))
        return ChainAnalysis(chains=chains, causal_relations=causal_relations)

    def infer_causality(self, events: list[Event]) -> list[CausalRelation]:
        """Score each consecutive pair and keep those above the threshold."""
        relations: list[CausalRelation] = []
        for cause, effect in zip(events, events[1:]):
            confidence = BASE_CONFIDENCE
            basis: list[str] = []

            if cause.has_absolute_time and effect.has_absolute_time:
                confidence += TEMPORAL_BONUS
                basis.append("时间顺序明确")

            shared = [p for p in cause.participants if p in effect.participants]
            if shared:
                confidence += PARTICIPANT_BONUS
                basis.append(f"共同参与者: {', '.join(shared)}")

            for marker in ALL_MARKERS:
                if marker in cause.description or marker in effect.description:
                    confidence += MARKER_BONUS
                    basis.append(f"因果标记: {marker}")

            if confidence > CAUSAL_THRESHOLD:
                relations.append(
                    CausalRelation(
                        cause=cause,
                        effect=effect,
                        confidence=round(min(confidence, 1.0), 4),
                        basis=basis,
                    )
                )
        return relations

    def build_chains(
        self, events: list[Event], causal_relations: list[CausalRelation]
    ) -> list[EventChain]:
        """One chain per participant with at least two events, most significant first."""
        as_cause: dict[int, int] = {}
        as_effect: dict[int, int] = {}
        for relation in causal_relations:
            as_cause[relation.cause.order] = as_cause.get(relation.cause.order, 0) + 1
            as_effect[relation.effect.order] = as_effect.get(relation.effect.order, 0) + 1

        by_participant: dict[str, list[Event]] = {}
        for event in events:
            for participant in event.participants:
                by_participant.setdefault(participant, []).append(event)

        chains: list[EventChain] = []
        for participant, participant_events in by_participant.items():
            if len(participant_events) < 2:
                continue

            chain_events: list[ChainEvent] = []
            for event in sorted(participant_events, key=lambda e: e.order):
                causes = as_cause.get(event.order, 0)
                effects = as_effect.get(event.order, 0)
                importance = (
                    0.5
                    + 0.1 * (causes + effects)
                    + 0.05 * len(event.participants)
                    + (0.1 if event.has_absolute_time else 0.0)
                )
                if causes > effects:
                    role = "cause"
                elif effects > causes:
                    role = "effect"
                else:
                    role = "neutral"
                chain_events.append(ChainEvent(event=event, role=role, importance=round(importance, 4)))

            significance = sum(c.importance for c in chain_events) / len(chain_events)
            chains.append(
                EventChain(
                    events=chain_events,
                    theme=f"关于{participant}的事件链",
                    significance=round(significance, 4),
                )
            )

        chains.sort(key=lambda c: c.significance, reverse=True)
        return chains


def assess_impact(event: Event, causal_relations: list[CausalRelation]) -> EventImpact:
    """Scope from participant count, severity from sentiment, consequences from causal links."""
    count = len(event.participants)
    if count > 3:
        scope = "global"
    elif count > 1:
        scope = "group"
    else:
        scope = "individual"

    return EventImpact(
        scope=scope,
        severity=event.sentiment.intensity if event.sentiment else 0.0,
        consequences=[r.effect.description for r in causal_relations if r.cause.order == event.order],
    )
