"""
World-building and Thematic Analysis

Builds a concept relatedness network over entities, concepts and events,
clusters it into themes and surfaces:
- Core beliefs and values
- Social structures and their members
- Cultural elements (customs, beliefs, values, arts, knowledge)
"""

from .categories import CulturalCategory
from .clusterer import SemanticClusterer
from .concepts import ConceptNetworkBuilder, cluster_themes
from .extractor import WorldBuildingExtractor

__all__ = [
    "ConceptNetworkBuilder",
    "CulturalCategory",
    "SemanticClusterer",
    "WorldBuildingExtractor",
    "cluster_themes",
]
