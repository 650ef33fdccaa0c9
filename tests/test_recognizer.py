"""Tests for rule-based entity recognition."""

import pytest

from novel_graph_analyzer.extract.recognizer import EntityRecognizer, clean_name
from novel_graph_analyzer.models.entities import EntityType


@pytest.fixture
def recognizer():
    return EntityRecognizer(context_window=100, quick_limit=10)


def by_name(entities):
    return {e.name: e for e in entities}


class TestRecognize:
    def test_character_and_location(self, recognizer):
        entities = by_name(recognizer.recognize("李明是一位勇敢的侠客，他住在长安城。"))

        assert entities["李明"].type == EntityType.CHARACTER
        assert entities["长安城"].type == EntityType.LOCATION
        assert entities["李明"].description == "通过copula规则识别的人物"

    def test_character_attributes(self, recognizer):
        entities = by_name(recognizer.recognize("李明是一位勇敢的侠客，他住在长安城。"))
        attributes = entities["李明"].attributes

        assert attributes.frequency == 1
        assert attributes.first_appearance == 0
        assert attributes.personality == ["勇敢"]

    def test_name_claimed_by_one_type_only(self, recognizer):
        # 开封官府 matches both a government rule and a settlement rule
        entities = recognizer.recognize("他来到开封官府。开封官府戒备森严。")
        names = [e.name for e in entities]
        assert names.count("开封官府") == 1
        assert by_name(entities)["开封官府"].type == EntityType.ORGANIZATION

    def test_frequency_counts_every_occurrence(self, recognizer):
        entities = by_name(recognizer.recognize("王强说：走吧。王强笑了。众人看着王强。"))
        assert entities["王强"].attributes.frequency == 3

    def test_item_and_skill(self, recognizer):
        entities = by_name(recognizer.recognize("他获得了青冥宝剑，又学会了降龙掌。"))
        assert entities["青冥宝剑"].type == EntityType.ITEM
        assert entities["降龙掌"].type == EntityType.SKILL

    def test_empty_text(self, recognizer):
        assert recognizer.recognize("") == []

    def test_recognize_is_repeatable(self, recognizer):
        text = "李明是一位勇敢的侠客，他住在长安城。"
        first = [e.model_dump() for e in recognizer.recognize(text)]
        second = [e.model_dump() for e in recognizer.recognize(text)]
        assert first == second


class TestQuickExtract:
    def test_labelled_entities(self, recognizer):
        entities = by_name(recognizer.quick_extract("人物：张三\n地点：洛阳"))
        assert entities["张三"].type == EntityType.CHARACTER
        assert entities["洛阳"].type == EntityType.LOCATION

    def test_limit(self):
        recognizer = EntityRecognizer(quick_limit=2)
        text = "".join(f"人物：{name}\n" for name in ["张三", "李四", "王五", "赵六"])
        assert len(recognizer.quick_extract(text)) == 2


class TestCleanName:
    def test_character_prefix_noise(self):
        assert clean_name("看着李明", EntityType.CHARACTER) == "李明"

    def test_place_prefix_noise(self):
        assert clean_name("他住在长安城", EntityType.LOCATION) == "长安城"

    def test_clean_names_untouched(self):
        assert clean_name("长安城", EntityType.LOCATION) == "长安城"
