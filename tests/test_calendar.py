"""Tests for the calendar providers."""
from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
import requests

from core.errors import NotSupportedError, ProviderError
from tools.calendar import GoogleCalendar, MemoryCalendar, MemoryEvent, overlaps, resolve_email
from util.config import Settings


class TestOverlaps:
    def test_slot_inside_event(self):
        assert overlaps(datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 11),
                        datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 10, 30))

    def test_back_to_back_is_free(self):
        assert not overlaps(datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10),
                            datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 11))

    def test_zero_length_slot(self):
        start, end = datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10)
        assert overlaps(start, end, datetime(2024, 1, 1, 9, 30), datetime(2024, 1, 1, 9, 30))
        assert not overlaps(start, end, end, end)


class TestResolveEmail:
    def test_names_become_addresses(self):
        assert resolve_email("Amy Lee", "example.com") == "amy.lee@example.com"
        assert resolve_email("Bo", "example.com") == "bo@example.com"
        assert resolve_email("  ", "example.com") is None


class TestMemoryCalendar:
    @pytest.fixture
    def cal(self):
        return MemoryCalendar(
            events=[MemoryEvent(datetime(2024, 3, 8, 14), datetime(2024, 3, 8, 15), "Standup")],
            now=datetime(2024, 3, 1, 8),
        )

    def test_past_slot_is_not_available(self, cal):
        assert cal.is_available(datetime(2024, 2, 1, 9), 30) is False

    def test_availability_respects_events(self, cal):
        assert cal.is_available(datetime(2024, 3, 8, 14, 30)) is False
        assert cal.is_available(datetime(2024, 3, 8, 13), 60) is True
        assert cal.is_available(datetime(2024, 3, 8, 13), 90) is False

    def test_delete_by_title_or_start(self, cal):
        assert cal.delete_event("standup") is True
        assert cal.events == []

        cal.create_event(datetime(2024, 3, 9, 9), 30, "Review")
        cal.delete_event(datetime(2024, 3, 9, 9))
        assert cal.events == []

    def test_delete_missing_is_noop(self, cal):
        assert cal.delete_event("Lunch") is False
        assert len(cal.events) == 1

    def test_update_changes_length(self, cal):
        cal.update_event("Standup", duration_minutes=30, location="Room 4")
        event = cal.events[0]
        assert event.end == datetime(2024, 3, 8, 14, 30)
        assert event.location == "Room 4"

    def test_update_missing_event(self, cal):
        with pytest.raises(ProviderError):
            cal.update_event("Lunch", new_start=datetime(2024, 3, 9, 12))

    def test_aware_points_use_the_calendar_zone(self):
        cal = MemoryCalendar(now=datetime(2024, 3, 1, 8), time_zone="America/Los_Angeles")
        cal.create_event(datetime(2024, 3, 8, 22, tzinfo=timezone.utc), 60, "Dinner")

        assert cal.events[0].start == datetime(2024, 3, 8, 14)
        assert cal.is_available(datetime(2024, 3, 8, 22, 30, tzinfo=timezone.utc)) is False
        assert cal.is_available(datetime(2024, 3, 9, 1, tzinfo=timezone.utc), 30) is True
        assert cal.delete_event(datetime(2024, 3, 8, 22, tzinfo=timezone.utc)) is True

    def test_aware_points_without_zone_use_local_time(self, cal):
        assert cal.is_available(datetime(2030, 1, 1, 9, tzinfo=timezone.utc), 30) is True


class TestGoogleCalendar:
    @pytest.fixture
    def cal(self):
        return GoogleCalendar(Settings(google_calendar_token="tok", time_zone="UTC", attendee_email_domain="corp.test"))

    def test_create_event_posts_body(self, cal):
        with patch("tools.calendar.send_json") as send:
            cal.create_event(datetime(2024, 3, 8, 14), 45, "Standup", None, ["Amy Lee"])

        method, url = send.call_args.args
        body = send.call_args.kwargs["json"]
        assert method == "POST"
        assert url.endswith("/calendars/primary/events")
        assert body["summary"] == "Standup"
        assert body["location"] == "TBD"
        assert body["start"]["dateTime"] == "2024-03-08T14:00:00+00:00"
        assert body["end"]["dateTime"] == "2024-03-08T14:45:00+00:00"
        assert body["attendees"] == [{"email": "amy.lee@corp.test"}]
        assert send.call_args.kwargs["headers"]["Authorization"] == "Bearer tok"

    def test_network_error_becomes_provider_error(self, cal):
        with patch("tools.calendar.send_json", side_effect=requests.ConnectionError("boom")):
            with pytest.raises(ProviderError):
                cal.create_event(datetime(2024, 3, 8, 14), 30, "Standup")

    def test_is_available_checks_window(self, cal):
        busy = {"items": [{
            "start": {"dateTime": "2099-03-08T13:00:00Z"},
            "end": {"dateTime": "2099-03-08T15:00:00Z"},
        }]}
        with patch("tools.calendar.get_json", return_value=busy) as get:
            assert cal.is_available(datetime(2099, 3, 8, 14), 30) is False
            assert cal.is_available(datetime(2099, 3, 8, 16), 30) is True
        assert get.call_args.kwargs["params"]["timeMin"] == "2099-03-08T08:00:00+00:00"

    def test_past_slot_skips_request(self, cal):
        with patch("tools.calendar.get_json") as get:
            assert cal.is_available(datetime(2000, 1, 1, 9)) is False
        get.assert_not_called()

    def test_delete_by_title(self, cal):
        listing = {"items": [
            {"id": "e1", "summary": "Lunch", "start": {"dateTime": "2099-01-01T12:00:00Z"}, "end": {"dateTime": "2099-01-01T13:00:00Z"}},
            {"id": "e2", "summary": "Standup", "start": {"dateTime": "2099-01-02T09:00:00Z"}, "end": {"dateTime": "2099-01-02T09:15:00Z"}},
        ]}
        with patch("tools.calendar.get_json", return_value=listing), patch("tools.calendar.send_json") as send:
            assert cal.delete_event("standup") is True
        send.assert_called_once()
        assert send.call_args.args[0] == "DELETE"
        assert send.call_args.args[1].endswith("/events/e2")

    def test_update_is_not_supported(self, cal):
        with pytest.raises(NotSupportedError):
            cal.update_event("Standup", new_start=datetime(2099, 1, 1, 9))
