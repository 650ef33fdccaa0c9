"""Tests for Neo4j persistence, using a mocked driver."""

from unittest.mock import MagicMock

import pytest

from novel_graph_analyzer.graph.writer import GraphWriter, entity_key, flatten_properties
from novel_graph_analyzer.models.analysis import AnalysisResult, KnowledgeGraph
from novel_graph_analyzer.models.entities import Entity, EntityAttributes, EntityType
from novel_graph_analyzer.models.relationships import Relation, RelationAttributes, RelationType


@pytest.fixture
def session():
    session = MagicMock()
    session.run.return_value.single.return_value = {"id": "4:abc:1"}
    return session


@pytest.fixture
def writer(session):
    driver = MagicMock()
    driver.session.return_value.__enter__.return_value = session
    return GraphWriter(driver=driver)


def make_entity(name: str, entity_type: EntityType = EntityType.CHARACTER, **kwargs) -> Entity:
    return Entity(
        type=entity_type,
        name=name,
        description="测试",
        attributes=EntityAttributes(frequency=2, personality=["勇敢"]),
        **kwargs,
    )


def make_relation(source: str, target: str) -> Relation:
    return Relation(
        source=source,
        target=target,
        type=RelationType.APPEARS_IN,
        attributes=RelationAttributes(confidence=0.5, context="李明住在长安城"),
    )


class TestGraphWriter:
    def test_create_node(self, writer, session):
        node = writer.create_node(make_entity("李明"))

        assert node.id == "4:abc:1"
        assert node.key == "CHARACTER:李明"
        assert node.type == "CHARACTER"

        kwargs = session.run.call_args.kwargs
        assert kwargs["key"] == "CHARACTER:李明"
        assert kwargs["properties"]["frequency"] == 2
        assert kwargs["properties"]["personality"] == ["勇敢"]

    def test_disambiguated_id_is_key(self, writer):
        node = writer.create_node(make_entity("小明", disambiguated_id="小明_老"))
        assert node.key == "小明_老"

    def test_create_relationship_uses_node_keys(self, writer, session):
        writer.create_node(make_entity("李明"))
        writer.create_node(make_entity("长安城", EntityType.LOCATION))

        edge = writer.create_relationship(make_relation("李明", "长安城"))

        assert edge.source == "CHARACTER:李明"
        assert edge.target == "LOCATION:长安城"
        assert edge.type == "APPEARS_IN"
        query = session.run.call_args.args[0]
        assert "APPEARS_IN" in query
        assert session.run.call_args.kwargs["properties"]["confidence"] == 0.5

    def test_missing_endpoint(self, writer, session):
        session.run.return_value.single.return_value = None
        with pytest.raises(LookupError):
            writer.create_relationship(make_relation("李明", "长安城"))

    def test_write_analysis(self, writer, session):
        result = AnalysisResult(
            total_words=10,
            estimated_chapters=1,
            knowledge_graph=KnowledgeGraph(
                entities=[make_entity("李明"), make_entity("长安城", EntityType.LOCATION)],
                relations=[make_relation("李明", "长安城")],
            ),
        )

        assert writer.write_analysis(result) == (2, 1)

    def test_clear(self, writer, session):
        writer.clear()
        assert "DETACH DELETE" in session.run.call_args.args[0]

    def test_no_driver(self, monkeypatch):
        monkeypatch.setattr("novel_graph_analyzer.graph.writer.get_driver", lambda: None)
        with pytest.raises(ConnectionError):
            GraphWriter().driver


class TestHelpers:
    def test_entity_key(self):
        assert entity_key(make_entity("李明")) == "CHARACTER:李明"

    def test_flatten_properties(self):
        properties = flatten_properties(
            {"a": 1, "b": ["x", "y"], "c": {"k": "值"}, "d": None, "e": [{"k": 1}]}
        )
        assert properties == {"a": 1, "b": ["x", "y"], "c": '{"k": "值"}', "e": '[{"k": 1}]'}
