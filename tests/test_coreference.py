"""Tests for pronoun resolution."""

import pytest

from novel_graph_analyzer.extract.coreference import CoreferenceResolver
from novel_graph_analyzer.models.entities import Entity, EntityType


@pytest.fixture
def resolver():
    return CoreferenceResolver(max_tracked=5)


def entity(name: str, entity_type: EntityType = EntityType.CHARACTER) -> Entity:
    return Entity(type=entity_type, name=name, description="")


class TestCoreferenceResolver:
    def test_third_person_resolves_to_recent_character(self, resolver):
        text = "李明是一位勇敢的侠客，他住在长安城。"
        references = resolver.resolve(text, [entity("李明"), entity("长安城", EntityType.LOCATION)])

        assert len(references) == 1
        reference = references[0]
        assert reference.pronoun == "他"
        assert reference.referent == "李明"
        assert reference.position == text.index("他")
        assert reference.confidence == 0.7

    def test_first_person_resolves_to_speaker(self, resolver):
        text = "李明说：我要去长安城。"
        references = resolver.resolve(text, [entity("李明"), entity("长安城", EntityType.LOCATION)])

        first = [r for r in references if r.pronoun == "我"]
        assert len(first) == 1
        assert first[0].referent == "李明"
        assert first[0].confidence == 0.9

    def test_second_person_never_resolved(self, resolver):
        text = "李明说：你来了。"
        references = resolver.resolve(text, [entity("李明")])
        assert all(r.pronoun != "你" for r in references)

    def test_pronoun_before_any_mention_unresolved(self, resolver):
        references = resolver.resolve("他走了。李明来了。", [entity("李明")])
        assert references == []

    def test_prefers_characters_for_personal_pronouns(self, resolver):
        text = "李明来到长安城，他很高兴。"
        references = resolver.resolve(text, [entity("李明"), entity("长安城", EntityType.LOCATION)])
        assert [r.referent for r in references] == ["李明"]

    def test_near_demonstrative_takes_most_recent(self, resolver):
        text = "李明拔出青冥剑，这把剑寒光四射。"
        references = resolver.resolve(
            text, [entity("李明"), entity("青冥剑", EntityType.ITEM)]
        )
        near = [r for r in references if r.pronoun == "这"]
        assert near[0].referent == "青冥剑"
        assert near[0].confidence == 0.8

    def test_far_demonstrative_takes_second_most_recent(self, resolver):
        text = "李明看见王强，又看见张三，那个人笑了。"
        references = resolver.resolve(text, [entity("李明"), entity("王强"), entity("张三")])
        far = [r for r in references if r.pronoun == "那个"]
        assert far[0].referent == "王强"
        assert far[0].confidence == 0.7

    def test_longest_pronoun_wins(self, resolver):
        # 这人 (third person) and 这 (demonstrative) start at the same offset
        references = resolver.resolve("李明来了，这人很高兴。", [entity("李明")])
        assert [r.pronoun for r in references] == ["这人"]
        assert references[0].category == "third"

    def test_pronoun_inside_name_ignored(self, resolver):
        text = "此间乐来了，他很高兴。"
        references = resolver.resolve(text, [entity("此间乐")])
        assert [r.pronoun for r in references] == ["他"]

    def test_uses_disambiguated_key(self, resolver):
        named = entity("小明")
        named.disambiguated_id = "小明_老"
        references = resolver.resolve("小明来了，他很累。", [named])
        assert references[0].referent == "小明_老"

    def test_speaker_carries_across_sentences(self, resolver):
        text = "王强说：走吧。我们出发。"
        references = resolver.resolve(text, [entity("王强")])
        assert references[0].referent == "王强"
        assert references[0].confidence == 0.9
