"""Concept co-occurrence network and thematic clustering."""

import logging
import re
from itertools import permutations

import networkx as nx

from ..models.entities import Entity
from ..models.semantic import ConceptNode, RelatedConcept, ThematicCluster
from ..models.timeline import Event

logger = logging.getLogger(__name__)

SHARED_DESCRIPTION_WEIGHT = 0.3
SHARED_PARTICIPATION_WEIGHT = 0.4
DIRECT_REFERENCE_WEIGHT = 0.2
MIN_EDGE_STRENGTH = 0.2

CLUSTER_SEED_IMPORTANCE = 0.3
CLUSTER_EDGE_STRENGTH = 0.3

WORD_SPLIT = re.compile(r"[，。；？！,.;?!\s]+")


def event_terms(events: list[Event]) -> list[str]:
    """Clauses of event descriptions, two characters or longer."""
    terms: list[str] = []
    for event in events:
        for term in WORD_SPLIT.split(event.description):
            if len(term) >= 2 and term not in terms:
                terms.append(term)
    return terms


class ConceptNetworkBuilder:
    """Builds a weighted, directed concept relatedness graph.

    Nodes are entity names, concept names and event clauses. An edge
    ``a -> b`` carries ``strength`` and the ``basis`` strings explaining it.
    """

    def build(
        self,
        entity_names: list[str],
        events: list[Event],
        concepts: list[Entity] | None = None,
    ) -> nx.DiGraph:
        concepts = concepts or []
        all_concepts: list[str] = []
        for name in [*entity_names, *(c.name for c in concepts), *event_terms(events)]:
            if name and name not in all_concepts:
                all_concepts.append(name)

        strength: dict[tuple[str, str], float] = {}
        basis: dict[tuple[str, str], list[str]] = {}

        def add(a: str, b: str, weight: float, reason: str) -> None:
            strength[(a, b)] = strength.get((a, b), 0.0) + weight
            basis.setdefault((a, b), []).append(reason)

        known = set(all_concepts)
        for event in events:
            present = [c for c in all_concepts if c in event.description]
            for a, b in permutations(present, 2):
                add(a, b, SHARED_DESCRIPTION_WEIGHT, f"在事件中共现: {event.description[:20]}...")

            participants = list(dict.fromkeys(p for p in event.participants if p in known))
            for a, b in permutations(participants, 2):
                add(a, b, SHARED_PARTICIPATION_WEIGHT, "作为事件共同参与者")

        for concept in concepts:
            for other in all_concepts:
                if other != concept.name and other in concept.description:
                    add(concept.name, other, DIRECT_REFERENCE_WEIGHT, "概念直接引用")

        graph = nx.DiGraph()
        graph.add_nodes_from(all_concepts)
        for (a, b), value in strength.items():
            if value > MIN_EDGE_STRENGTH:
                graph.add_edge(a, b, strength=round(min(value, 1.0), 4), basis=basis[(a, b)])

        logger.debug(
            "Concept network: %d nodes, %d edges",
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )
        return graph

    def to_nodes(self, graph: nx.DiGraph) -> list[ConceptNode]:
        """Concept nodes sorted by descending global importance."""
        total = graph.number_of_nodes()
        nodes: list[ConceptNode] = []
        for concept in graph.nodes:
            related = sorted(
                (
                    RelatedConcept(concept=other, strength=data["strength"], basis=data["basis"])
                    for _, other, data in graph.out_edges(concept, data=True)
                ),
                key=lambda r: r.strength,
                reverse=True,
            )
            importance = graph.out_degree(concept, weight="strength") / total if total else 0.0
            nodes.append(
                ConceptNode(
                    concept=concept,
                    related_concepts=related,
                    global_importance=round(importance, 4),
                )
            )
        nodes.sort(key=lambda n: n.global_importance, reverse=True)
        return nodes


def cluster_themes(
    network: list[ConceptNode],
    entity_names: list[str],
    events: list[Event],
) -> list[ThematicCluster]:
    """Seed one cluster per important concept, most significant first."""
    clusters: list[ThematicCluster] = []
    for node in network:
        if node.global_importance <= CLUSTER_SEED_IMPORTANCE:
            continue

        related = [r.concept for r in node.related_concepts if r.strength > CLUSTER_EDGE_STRENGTH]
        members = [node.concept, *related]

        entities: list[str] = []
        for name in entity_names:
            for event in events:
                if name not in event.participants:
                    continue
                if any(c in event.description or c in event.participants for c in related):
                    entities.append(name)
                    break

        cluster_events = [
            event
            for event in events
            if node.concept in event.description or any(p in members for p in event.participants)
        ]

        event_ratio = len(cluster_events) / len(events) if events else 0.0
        entity_ratio = len(entities) / len(entity_names) if entity_names else 0.0
        significance = (node.global_importance + event_ratio + entity_ratio) / 3

        clusters.append(
            ThematicCluster(
                theme=node.concept,
                concepts=members,
                entities=entities,
                events=cluster_events,
                significance=round(significance, 4),
            )
        )

    clusters.sort(key=lambda c: c.significance, reverse=True)
    return clusters
