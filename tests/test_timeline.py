"""Tests for time expressions, events and timeline ordering."""

import pytest

from novel_graph_analyzer.ingest.splitter import split_sentences
from novel_graph_analyzer.models.entities import Entity, EntityType
from novel_graph_analyzer.models.timeline import Event, TimeExpression
from novel_graph_analyzer.timeline.events import EventExtractor, nearest_time_expression, sort_timeline
from novel_graph_analyzer.timeline.temporal import TimeExpressionExtractor, normalize, time_sort_key


@pytest.fixture
def time_extractor():
    return TimeExpressionExtractor()


@pytest.fixture
def event_extractor():
    return EventExtractor()


def entity(name: str, entity_type: EntityType = EntityType.CHARACTER) -> Entity:
    return Entity(type=entity_type, name=name, description="")


class TestTimeExpressions:
    def test_absolute_date_normalized(self, time_extractor):
        expressions = time_extractor.extract("2023年3月15日，李明出发了。")
        dates = [e for e in expressions if e.type == "absolute_date"]

        assert len(dates) == 1
        assert dates[0].expression == "2023年3月15日"
        assert dates[0].normalized == "2023-03-15"
        assert dates[0].position == 0
        assert dates[0].is_absolute

    def test_chinese_numeral_date(self, time_extractor):
        expressions = time_extractor.extract("二〇二三年十二月")
        dates = [e for e in expressions if e.type == "absolute_date"]
        assert dates[0].normalized == "2023-12-XX"

    def test_absolute_time(self, time_extractor):
        expressions = time_extractor.extract("三时十五分")
        times = [e for e in expressions if e.type == "absolute_time"]
        assert times[0].normalized == "03:15:00"

    def test_relative_and_period(self, time_extractor):
        types = {e.type for e in time_extractor.extract("然后，上古的传说流传至今。")}
        assert "relative_sequence" in types
        assert "period_age" in types

    def test_sorted_by_position(self, time_extractor):
        expressions = time_extractor.extract("春天来了，三月的一个清晨。")
        positions = [e.position for e in expressions]
        assert positions == sorted(positions)

    def test_no_expressions(self, time_extractor):
        assert time_extractor.extract("李四") == []

    def test_normalize_other_types(self):
        assert normalize("relative_past", {}) is None

    def test_sort_key(self):
        date = TimeExpression(expression="", type="absolute_date", normalized="2023-XX-XX", position=0)
        assert time_sort_key(date) == (2023, 0, 0, 0, 0, 0)
        unnormalized = TimeExpression(expression="春天", type="absolute_season", position=0)
        assert time_sort_key(unnormalized) == ()


class TestEventExtractor:
    def test_indicator_sentence_with_entities(self, event_extractor):
        text = "李明与王强在长安城相遇。天色很晚。"
        entities = [entity("李明"), entity("王强"), entity("长安城", EntityType.LOCATION)]

        events = event_extractor.extract(text, entities)

        assert len(events) == 1
        event = events[0]
        assert event.description == "李明与王强在长安城相遇"
        assert event.participants == ["李明", "王强", "长安城"]
        assert event.location == "长安城"
        assert event.order == 0
        assert event.confidence == 0.8

    def test_single_participant_confidence(self, event_extractor):
        events = event_extractor.extract("李明离开了。", [entity("李明")])
        assert events[0].confidence == 0.6

    def test_sentence_without_entities_skipped(self, event_extractor):
        assert event_extractor.extract("战斗开始了。", [entity("李明")]) == []

    def test_sentence_without_indicator_skipped(self, event_extractor):
        assert event_extractor.extract("李明很高兴。", [entity("李明")]) == []

    def test_order_is_sentence_index(self, event_extractor):
        text = "天亮了。李明出发了。王强也出发了。"
        events = event_extractor.extract(text, [entity("李明"), entity("王强")])
        assert [e.order for e in events] == [1, 2]

    def test_time_expression_attached(self, event_extractor, time_extractor):
        text = "2023年3月15日，李明离开了长安城。"
        entities = [entity("李明"), entity("长安城", EntityType.LOCATION)]

        events = event_extractor.extract(text, entities, time_extractor.extract(text))

        assert events[0].time_info is not None
        assert events[0].time_info.expression == "2023年3月15日"
        assert events[0].has_absolute_time


class TestNearestTimeExpression:
    def make_expression(self, position: int, text: str = "昨") -> TimeExpression:
        return TimeExpression(expression=text, type="relative_past", position=position)

    def test_inside_sentence_wins(self):
        sentence = split_sentences("甲乙丙。丁戊己庚。")[1]
        outside = self.make_expression(3)
        inside = self.make_expression(6)
        assert nearest_time_expression(sentence, [outside, inside]) is inside

    def test_nearest_boundary(self):
        sentence = split_sentences("甲乙丙。丁戊己庚。子丑寅卯辰巳")[1]
        before = self.make_expression(1)
        after = self.make_expression(10)
        assert nearest_time_expression(sentence, [before, after]) is after

    def test_none(self):
        sentence = split_sentences("甲乙丙。")[0]
        assert nearest_time_expression(sentence, []) is None


class TestSortTimeline:
    def make_event(self, order: int, time_info: TimeExpression | None = None) -> Event:
        return Event(description=f"事件{order}", participants=["李明"], order=order, confidence=0.6, time_info=time_info)

    def test_absolute_events_first(self):
        dated = TimeExpression(expression="2023年", type="absolute_date", normalized="2023-XX-XX", position=0)
        relative = TimeExpression(expression="后", type="relative_future", position=0)
        events = [self.make_event(0, relative), self.make_event(1), self.make_event(2, dated)]

        assert [e.order for e in sort_timeline(events)] == [2, 0, 1]

    def test_absolute_events_by_date(self):
        later = TimeExpression(expression="", type="absolute_date", normalized="2024-01-01", position=0)
        earlier = TimeExpression(expression="", type="absolute_date", normalized="2023-05-01", position=0)
        events = [self.make_event(0, later), self.make_event(1, earlier)]

        assert [e.order for e in sort_timeline(events)] == [1, 0]
