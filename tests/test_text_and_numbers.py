"""Tests for attendee lists, titles and party-size disambiguation."""
from __future__ import annotations

from core.entities import APPOINTMENT, ATTENDEE, DATE, DATETIME, NUMBER, TIME, TITLE, Entity
from core.numbers import resolve_party_size
from core.text import build_attendee_list, build_title, join_names


def number(text, value):
    return Entity(NUMBER, text, ({"value": value},))


class TestAttendeeList:
    def test_join_names(self):
        assert join_names([]) == ""
        assert join_names(["Amy"]) == "Amy"
        assert join_names(["Amy", "Bo"]) == "Amy, and Bo"
        assert join_names(["Amy", "Bo", "Cy"]) == "Amy, Bo, and Cy"

    def test_from_entities(self):
        attendees = [Entity(ATTENDEE, "Amy"), Entity(ATTENDEE, "Bo"), Entity(ATTENDEE, "Cy")]
        assert build_attendee_list(attendees) == "Amy, Bo, and Cy"
        assert build_attendee_list([]) == ""


class TestTitle:
    def test_explicit_title_wins(self):
        title = Entity(TITLE, "Budget review")
        assert build_title(title, Entity(APPOINTMENT, "lunch"), "Amy") == "Budget review"

    def test_appointment_type_with_attendees(self):
        assert build_title(None, Entity(APPOINTMENT, "lunch"), "Amy, and Bo") == "lunch with Amy, and Bo"

    def test_type_without_attendees_falls_back(self):
        assert build_title(None, Entity(APPOINTMENT, "lunch"), "") == "Appointment with "

    def test_generic_label(self):
        assert build_title(None, None, "Amy") == "Appointment with Amy"


class TestPartySize:
    def test_drops_numbers_inside_the_date(self):
        date = Entity(DATE, "March 1, 1999")
        assert resolve_party_size([number("2", "2"), number("1999", "1999")], None, date, None) == 2

    def test_drops_arithmetic_fragments(self):
        date = Entity(DATE, "2/29/2020")
        numbers = [number("29/2020", "0.0144"), number("4", "4")]
        assert resolve_party_size(numbers, None, date, None) == 4

    def test_checks_datetime_and_time_text(self):
        combined = Entity(DATETIME, "tomorrow at 7")
        time = Entity(TIME, "8pm")
        numbers = [number("7", "7"), number("8", "8"), number("six", "6")]
        assert resolve_party_size(numbers, combined, None, time) == 6

    def test_first_candidate_wins_after_dedupe(self):
        numbers = [number("3", "3"), number("three", "3"), number("5", "5")]
        assert resolve_party_size(numbers) == 3

    def test_no_candidates_is_zero(self):
        assert resolve_party_size([]) == 0
        assert resolve_party_size(None) == 0
        date = Entity(DATE, "June 5")
        assert resolve_party_size([number("5", "5")], None, date, None) == 0
