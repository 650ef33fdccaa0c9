"""Entity, coreference and relation extraction for Novel Graph Analyzer."""

from .coreference import CoreferenceResolver
from .recognizer import EntityRecognizer
from .relationships import RelationExtractor
from .resolver import EntityResolver

__all__ = [
    "CoreferenceResolver",
    "EntityRecognizer",
    "EntityResolver",
    "RelationExtractor",
]
