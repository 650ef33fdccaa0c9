"""Tests for the analysis pipeline."""

import pytest

from novel_graph_analyzer.errors import ContentError, InternalAnalysisError
from novel_graph_analyzer.models.entities import EntityType
from novel_graph_analyzer.models.relationships import RelationType
from novel_graph_analyzer.pipeline import STAGES, NovelAnalyzer, analyze_novel_content

SIMPLE_TEXT = "李明是一位勇敢的侠客，他住在长安城。"

MEETING_TEXT = "李明说：王强，我们走吧。王强说：好。李明与王强在长安城相遇，二人非常高兴。"

SAME_NAME_TEXT = "老小明说：我老了。前辈小明笑道：好。小小明说：我还小。"

CAUSAL_TEXT = "李明说：走吧。王强说：好。因为李明击败了王强，王强离开了长安城。王强前往洛阳城。"

SPLIT_EVENTS_TEXT = "老小明说：我老了。小小明说：我还小。老小明离开了长安城，非常伤心。小小明前往洛阳城，非常高兴。"


@pytest.fixture
def analyzer():
    return NovelAnalyzer()


class TestAnalyze:
    def test_simple_text(self):
        result = analyze_novel_content(SIMPLE_TEXT)
        graph = result.knowledge_graph

        types = {e.name: e.type for e in graph.entities}
        assert types == {"李明": EntityType.CHARACTER, "长安城": EntityType.LOCATION}

        assert len(graph.relations) == 1
        assert graph.relations[0].type == RelationType.APPEARS_IN
        assert 0 < graph.relations[0].confidence <= 1

        assert [(r.pronoun, r.referent) for r in graph.references] == [("他", "李明")]

    def test_short_text_single_chapter(self):
        result = analyze_novel_content(SIMPLE_TEXT)

        assert result.estimated_chapters == 1
        assert result.chapters[0].title == "第一章"
        assert result.total_words == 16
        assert result.summary == SIMPLE_TEXT

    def test_output_uses_camel_case(self):
        data = analyze_novel_content(SIMPLE_TEXT).to_dict()

        assert {"totalWords", "estimatedChapters", "knowledgeGraph", "timeline", "semanticAnalysis"} <= set(data)
        assert "timeExpressions" in data["timeline"]
        entity = data["knowledgeGraph"]["entities"][0]
        assert "mentions" not in entity
        assert "firstAppearance" in entity["attributes"]

    def test_repeatable(self, analyzer):
        assert analyzer.analyze(SIMPLE_TEXT).to_dict() == analyzer.analyze(SIMPLE_TEXT).to_dict()

    def test_timeline_back_propagation(self, analyzer):
        result = analyzer.analyze(MEETING_TEXT)
        entities = {e.name: e for e in result.knowledge_graph.entities}

        assert set(entities) == {"李明", "王强", "长安城"}

        events = result.timeline.events
        assert len(events) == 1
        assert events[0].participants == ["李明", "王强", "长安城"]
        assert events[0].sentiment.sentiment == "positive"
        assert events[0].impact.scope == "group"

        li = entities["李明"]
        assert li.attributes.event_count == 1
        assert [arc.emotion for arc in li.emotional_arcs] == ["positive"]
        assert li.attributes.first_appearance_event == events[0].label

        pair = next(
            r for r in result.knowledge_graph.relations
            if {r.source, r.target} == {"李明", "王强"}
        )
        assert pair.type == RelationType.CHARACTER_RELATION
        assert pair.attributes.interaction_count == 1
        assert [d.sentiment for d in pair.emotional_dynamics] == ["positive"]

    def test_speaker_reference(self, analyzer):
        references = analyzer.analyze(MEETING_TEXT).knowledge_graph.references
        first_person = [r for r in references if r.pronoun == "我"]
        assert first_person[0].referent == "李明"
        assert first_person[0].confidence == 0.9

    def test_progress_callback(self, analyzer):
        calls = []
        analyzer.analyze(SIMPLE_TEXT, progress_callback=lambda *args: calls.append(args))

        assert [c[0] for c in calls] == list(STAGES)
        assert calls[-1] == ("semantic", len(STAGES), len(STAGES))


class TestSameNameCharacters:
    def test_marked_names_resolve_to_two_referents(self, analyzer):
        entities = analyzer.analyze(SAME_NAME_TEXT).knowledge_graph.entities

        assert [e.name for e in entities] == ["小明", "小明"]
        by_id = {e.disambiguated_id: e for e in entities}
        assert set(by_id) == {"小明_老", "小明_小"}
        assert set(by_id["小明_老"].aliases) == {"老小明", "前辈小明"}
        assert by_id["小明_小"].aliases == ["小小明"]

    def test_referents_keep_their_own_arcs(self, analyzer):
        result = analyzer.analyze(SPLIT_EVENTS_TEXT)
        by_id = {e.disambiguated_id: e for e in result.knowledge_graph.entities if e.name == "小明"}

        assert set(by_id) == {"小明_老", "小明_小"}
        assert [arc.emotion for arc in by_id["小明_老"].emotional_arcs] == ["negative"]
        assert [arc.emotion for arc in by_id["小明_小"].emotional_arcs] == ["positive"]
        assert by_id["小明_老"].attributes.event_count == 1
        assert by_id["小明_小"].attributes.last_appearance_event == "小小明前往洛阳城，非常高兴"


class TestCausality:
    def test_causal_marker_links_events(self, analyzer):
        result = analyzer.analyze(CAUSAL_TEXT)

        causal = result.timeline.causal_relations
        assert len(causal) == 1
        assert causal[0].cause.description == "因为李明击败了王强，王强离开了长安城"
        assert causal[0].effect.description == "王强前往洛阳城"
        assert causal[0].confidence > 0.4
        assert "因果标记: 因为" in causal[0].basis

    def test_cause_lists_consequence(self, analyzer):
        events = analyzer.analyze(CAUSAL_TEXT).timeline.events
        assert events[0].impact.consequences == ["王强前往洛阳城"]

    def test_event_spans_not_serialized(self, analyzer):
        data = analyzer.analyze(CAUSAL_TEXT).to_dict()
        event = data["timeline"]["events"][0]
        assert "start" not in event
        assert "end" not in event


class TestInvalidContent:
    @pytest.mark.parametrize("content", ["", "   \n\t "])
    def test_empty_content(self, analyzer, content):
        with pytest.raises(ContentError) as exc_info:
            analyzer.analyze(content)
        assert exc_info.value.message == "无法分析空内容"
        assert exc_info.value.status_code == 400

    def test_non_text(self, analyzer):
        with pytest.raises(ContentError):
            analyzer.analyze(None)

    def test_binary_content(self, analyzer):
        with pytest.raises(ContentError):
            analyzer.analyze("李明\x00长安")


class TestDegradation:
    def test_failed_stage_yields_empty_result(self, analyzer, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("relation extraction broke")

        monkeypatch.setattr(analyzer.relation_extractor, "extract", boom)

        result = analyzer.analyze(SIMPLE_TEXT)

        assert result.knowledge_graph.relations == []
        assert len(result.knowledge_graph.entities) == 2

    def test_recognizer_falls_back_to_quick_extract(self, analyzer, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("recognizer broke")

        monkeypatch.setattr(analyzer.recognizer, "recognize", boom)

        result = analyzer.analyze(SIMPLE_TEXT)

        assert [e.name for e in result.knowledge_graph.entities] == ["长安城"]

    def test_unexpected_fault_wrapped(self, analyzer, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("segmenter broke")

        monkeypatch.setattr("novel_graph_analyzer.pipeline.split_into_chapters", boom)

        with pytest.raises(InternalAnalysisError) as exc_info:
            analyzer.analyze(SIMPLE_TEXT)
        assert exc_info.value.message == "内容分析失败"
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_domain_error_passes_through(self, analyzer, monkeypatch):
        error = ContentError("无法解析的内容")

        def boom(*args, **kwargs):
            raise error

        monkeypatch.setattr("novel_graph_analyzer.pipeline.split_into_chapters", boom)

        with pytest.raises(ContentError) as exc_info:
            analyzer.analyze(SIMPLE_TEXT)
        assert exc_info.value is error
