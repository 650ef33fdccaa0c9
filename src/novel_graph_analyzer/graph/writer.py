"""Write analysis results to Neo4j."""

import json
import logging
from dataclasses import dataclass

from neo4j import Driver

from ..models.analysis import AnalysisResult
from ..models.entities import Entity
from ..models.relationships import Relation
from .connection import get_driver, init_schema

logger = logging.getLogger(__name__)

PRIMITIVES = (str, int, float, bool)


@dataclass
class StoredNode:
    """An entity as stored in the graph."""

    id: str
    key: str
    name: str
    type: str


@dataclass
class StoredEdge:
    """A relation as stored in the graph."""

    id: str
    source: str
    target: str
    type: str


def entity_key(entity: Entity) -> str:
    """Durable lookup key: the disambiguated id, else ``TYPE:name``."""
    return entity.disambiguated_id or f"{entity.type.value}:{entity.name}"


def flatten_properties(values: dict) -> dict:
    """Make an open attribute map storable as Neo4j properties.

    Primitives and lists of primitives are kept; anything else is stored
    as a JSON string. None values are dropped.
    """
    properties = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, PRIMITIVES):
            properties[key] = value
        elif isinstance(value, list) and all(isinstance(v, PRIMITIVES) for v in value):
            properties[key] = value
        else:
            properties[key] = json.dumps(value, ensure_ascii=False)
    return properties


class GraphWriter:
    """Writes resolved entities and relations to Neo4j."""

    def __init__(self, driver: Driver | None = None):
        """Initialize the graph writer.

        Args:
            driver: Optional Neo4j driver (created if not provided)
        """
        self._driver = driver
        self._initialized = False
        self._keys: dict[str, str] = {}  # entity identifier -> node key

    @property
    def driver(self) -> Driver:
        """Get the Neo4j driver, creating if needed."""
        if self._driver is None:
            self._driver = get_driver()
            if self._driver is None:
                raise ConnectionError("Cannot connect to Neo4j")
        return self._driver

    def initialize(self) -> None:
        """Initialize the graph schema."""
        if not self._initialized:
            init_schema(self.driver)
            self._initialized = True

    def create_node(self, entity: Entity) -> StoredNode:
        """Store one entity, merging on its durable key."""
        key = entity_key(entity)
        data = entity.to_dict()
        properties = flatten_properties(data.pop("attributes", {}))
        properties.update(
            flatten_properties(
                {
                    "description": data.get("description"),
                    "aliases": data.get("aliases", []),
                    "disambiguatedId": data.get("disambiguatedId"),
                    "emotionalArcs": data.get("emotionalArcs") or None,
                }
            )
        )

        query = """
        MERGE (e:Entity {key: $key})
        SET e += $properties, e.name = $name, e.type = $type
        RETURN elementId(e) AS id
        """
        with self.driver.session() as session:
            record = session.run(
                query,
                key=key,
                name=entity.name,
                type=entity.type.value,
                properties=properties,
            ).single()

        self._keys[entity.key] = key
        return StoredNode(id=record["id"], key=key, name=entity.name, type=entity.type.value)

    def create_relationship(self, relation: Relation) -> StoredEdge:
        """Store one relation between two previously written entities."""
        source_key = self._keys.get(relation.source, relation.source)
        target_key = self._keys.get(relation.target, relation.target)
        data = relation.to_dict()
        properties = flatten_properties(data.get("attributes", {}))
        if data.get("emotionalDynamics"):
            properties["emotionalDynamics"] = json.dumps(data["emotionalDynamics"], ensure_ascii=False)

        # Relationship types cannot be parameterized; they come from RelationType
        query = f"""
        MATCH (s:Entity {{key: $source}})
        MATCH (t:Entity {{key: $target}})
        MERGE (s)-[r:{relation.type.value}]->(t)
        SET r += $properties
        RETURN elementId(r) AS id
        """
        with self.driver.session() as session:
            record = session.run(
                query,
                source=source_key,
                target=target_key,
                properties=properties,
            ).single()

        if record is None:
            raise LookupError(f"Missing endpoint for relation {relation.source} -> {relation.target}")

        return StoredEdge(
            id=record["id"],
            source=source_key,
            target=target_key,
            type=relation.type.value,
        )

    def write_analysis(self, result: AnalysisResult) -> tuple[int, int]:
        """Write every entity, then every relation.

        Returns:
            (nodes written, edges written)
        """
        self.initialize()
        graph = result.knowledge_graph

        nodes = [self.create_node(entity) for entity in graph.entities]

        edges = 0
        for relation in graph.relations:
            try:
                self.create_relationship(relation)
                edges += 1
            except LookupError:
                logger.warning("Skipping relation with unknown endpoint: %s -> %s", relation.source, relation.target)

        logger.info("Wrote %d nodes and %d relationships", len(nodes), edges)
        return len(nodes), edges

    def clear(self) -> None:
        """Delete all analysis nodes and their relationships."""
        with self.driver.session() as session:
            session.run("MATCH (e:Entity) DETACH DELETE e")

    def close(self) -> None:
        if self._driver is not None:
            self._driver.close()
            self._driver = None
