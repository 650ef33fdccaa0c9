"""Graph database persistence."""

from .connection import check_neo4j_connection, get_driver, init_schema
from .writer import GraphWriter, StoredEdge, StoredNode

__all__ = [
    "GraphWriter",
    "StoredEdge",
    "StoredNode",
    "check_neo4j_connection",
    "get_driver",
    "init_schema",
]
