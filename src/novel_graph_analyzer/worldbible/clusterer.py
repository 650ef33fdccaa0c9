"""Semantic analysis: concept network, themes and world-building."""

import logging

from ..models.entities import Entity
from ..models.semantic import SemanticAnalysis
from ..models.timeline import Event
from .concepts import ConceptNetworkBuilder, cluster_themes
from .extractor import WorldBuildingExtractor

logger = logging.getLogger(__name__)


class SemanticClusterer:
    """Runs the concept network, clustering and world-building extraction."""

    def __init__(self):
        self.network_builder = ConceptNetworkBuilder()
        self.world_extractor = WorldBuildingExtractor()

    def analyze(
        self,
        entity_names: list[str],
        events: list[Event],
        concepts: list[Entity] | None = None,
    ) -> SemanticAnalysis:
        """Analyze entities and events.

        Args:
            entity_names: Names of the resolved entities
            events: Extracted events
            concepts: Optional CONCEPT entities whose descriptions may
                reference other concepts

        Returns:
            Concept network, thematic clusters and world-building elements
        """
        graph = self.network_builder.build(entity_names, events, concepts)
        network = self.network_builder.to_nodes(graph)
        clusters = cluster_themes(network, entity_names, events)
        world = self.world_extractor.extract(events, network)

        logger.debug("Semantic analysis: %d concepts, %d clusters", len(network), len(clusters))
        return SemanticAnalysis(
            concept_network=network,
            thematic_clusters=clusters,
            world_building_elements=world,
        )
