"""Tests for the temporal resolver."""
from __future__ import annotations

from datetime import datetime

from core.entities import DATE, DATETIME, DURATION, TIME, Entity
from core.temporal import DateStatus, describe_when, resolve_date_time, resolve_duration


class TestResolveDateTime:
    def test_combined_entity_last_value_wins(self):
        combined = Entity(DATETIME, "friday at 9", ("2024-03-01 09:00:00", "2024-03-08 09:00:00"))
        resolved = resolve_date_time(combined, None, None)
        assert resolved.ok
        assert resolved.point == datetime(2024, 3, 8, 9, 0)

    def test_combined_entity_ignores_separate_entities(self):
        combined = Entity(DATETIME, "friday at 9", ("2024-03-08 09:00:00",))
        date = Entity(DATE, "monday", ("2024-03-04",))
        time = Entity(TIME, "noon", ("12:00:00",))
        assert resolve_date_time(combined, date, time).point == datetime(2024, 3, 8, 9, 0)

    def test_date_and_time_are_joined(self):
        date = Entity(DATE, "march first", ("2024-03-01",))
        time = Entity(TIME, "2pm", ("14:00",))
        assert resolve_date_time(None, date, time).point == datetime(2024, 3, 1, 14, 0)

    def test_date_only(self):
        date = Entity(DATE, "march first", ("2023-12-25", "2024-03-01"))
        assert resolve_date_time(None, date, None).point == datetime(2024, 3, 1)

    def test_no_entities_is_absent(self):
        resolved = resolve_date_time(None, None, None)
        assert resolved.status is DateStatus.ABSENT
        assert resolved.point is None
        assert not resolved.ok

    def test_unparseable_is_invalid_not_absent(self):
        date = Entity(DATE, "someday", ("blorp",))
        resolved = resolve_date_time(None, date, None)
        assert resolved.status is DateStatus.INVALID
        assert resolved.point is None

    def test_entity_without_values_is_invalid(self):
        resolved = resolve_date_time(Entity(DATETIME, "soon"), None, None)
        assert resolved.status is DateStatus.INVALID


class TestResolveDuration:
    def test_seconds_to_minutes_from_last_value(self):
        duration = Entity(DURATION, "an hour and a half", ("60", "5400"))
        assert resolve_duration(duration, default=60) == 90

    def test_default_when_missing(self):
        assert resolve_duration(None, default=60) == 60
        assert resolve_duration(None) is None

    def test_default_when_unparseable(self):
        assert resolve_duration(Entity(DURATION, "a while", ("PT?",)), default=60) == 60


class TestDescribeWhen:
    def test_combined_phrase(self):
        assert describe_when(Entity(DATETIME, "tomorrow at 5"), None, None) == " tomorrow at 5"

    def test_date_and_time_phrases(self):
        date = Entity(DATE, "next Friday")
        time = Entity(TIME, "2pm")
        assert describe_when(None, date, time) == " next Friday at 2pm"
        assert describe_when(None, date, time, date_prefix="on ") == " on next Friday at 2pm"
