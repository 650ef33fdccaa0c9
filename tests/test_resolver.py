"""Tests for alias inference and disambiguation."""

import pytest

from novel_graph_analyzer.extract.resolver import EntityResolver, marked_base
from novel_graph_analyzer.models.entities import Entity, EntityAttributes, EntityType


@pytest.fixture
def resolver():
    return EntityResolver()


def character(name: str, frequency: int = 0) -> Entity:
    return Entity(
        type=EntityType.CHARACTER,
        name=name,
        description="测试人物",
        attributes=EntityAttributes(frequency=frequency),
    )


class TestDisambiguation:
    def test_markers_split_same_name(self, resolver):
        text = "老小明是村里的长者。前辈小明常常教导后人。小小明今年才七岁。"
        resolved = resolver.resolve([character("小明")], text)

        ids = {e.disambiguated_id for e in resolved}
        assert ids == {"小明_老", "小明_小"}
        assert all(e.name == "小明" for e in resolved)

    def test_shared_label_groups_occurrences(self, resolver):
        text = "老小明是村里的长者。前辈小明常常教导后人。小小明今年才七岁。"
        resolved = {e.disambiguated_id: e for e in resolver.resolve([character("小明")], text)}

        elder = resolved["小明_老"]
        assert elder.attributes.frequency == 2
        assert set(elder.aliases) == {"老小明", "前辈小明"}
        assert resolved["小明_小"].aliases == ["小小明"]
        assert resolved["小明_小"].attributes.first_appearance == text.index("小小明") + 1

    def test_unmarked_before_first_marker(self, resolver):
        text = "小明出门了。老小明在家。小小明在学堂。"
        resolved = {e.disambiguated_id: e for e in resolver.resolve([character("小明")], text)}

        assert set(resolved) == {"小明_1", "小明_老", "小明_小"}
        assert resolved["小明_1"].description == "小明（第1处出现）"

    def test_unmarked_joins_previous_referent(self, resolver):
        text = "老小明在家。小明睡了。小小明在学堂。"
        resolved = {e.disambiguated_id: e for e in resolver.resolve([character("小明")], text)}
        assert resolved["小明_老"].attributes.frequency == 2
        assert resolved["小明_小"].attributes.frequency == 1

    def test_single_marker_collapses(self, resolver):
        text = "师父李明来了。李明坐下。"
        resolved = resolver.resolve([character("李明")], text)

        assert len(resolved) == 1
        assert resolved[0].disambiguated_id is None
        assert resolved[0].aliases == ["师父李明"]

    def test_apposition_alias(self, resolver):
        text = "李明，又称剑圣，是当世第一高手。"
        resolved = resolver.resolve([character("李明")], text)
        assert resolved[0].aliases == ["剑圣"]
        assert resolved[0].disambiguated_id is None

    def test_duplicate_inputs_numbered(self, resolver):
        text = "李明来了。"
        resolved = resolver.resolve([character("李明"), character("李明")], text)
        assert [e.disambiguated_id for e in resolved] == ["李明_1", "李明_2"]

    def test_sorted_by_frequency(self, resolver):
        text = "王强。李明。李明。"
        resolved = resolver.resolve([character("王强", 1), character("李明", 2)], text)
        assert [e.name for e in resolved] == ["李明", "王强"]

    def test_marked_candidates_fold_into_base_name(self, resolver):
        text = "老小明说：我老了。前辈小明笑道：好。小小明说：我还小。"
        candidates = [character(n) for n in ("老小明", "前辈小明", "小小明", "小明")]

        resolved = {e.disambiguated_id: e for e in resolver.resolve(candidates, text)}

        assert set(resolved) == {"小明_老", "小明_小"}
        assert set(resolved["小明_老"].aliases) == {"老小明", "前辈小明"}
        assert resolved["小明_小"].aliases == ["小小明"]

    def test_marked_candidate_without_base_kept(self, resolver):
        resolved = resolver.resolve([character("小李")], "小李来了。")
        assert [e.name for e in resolved] == ["小李"]

    def test_marked_base(self):
        assert marked_base("前辈小明", {"小明"}) == "小明"
        assert marked_base("小小明", {"小明"}) == "小明"
        assert marked_base("李明", {"明"}) is None
        assert marked_base("老小明", set()) is None

    def test_inputs_not_modified(self, resolver):
        entity = character("小明")
        resolver.resolve([entity], "老小明来了。小小明走了。")
        assert entity.disambiguated_id is None
        assert entity.aliases == []


class TestFindAliases:
    def test_prefix_forms(self, resolver):
        text = "父亲李明很严厉。哥哥李明很温和。"
        assert resolver.find_aliases(text, "李明") == ["父亲李明", "哥哥李明"]

    def test_no_aliases(self, resolver):
        assert resolver.find_aliases("李明来了。", "李明") == []
