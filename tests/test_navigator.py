"""Tests for turning map entities into search queries."""
from __future__ import annotations

import pytest

from core.entities import (
    CITY, DESTINATION, DIMENSION, DURATION, GEOGRAPHY_POI, PLACE_NAME, PLACE_TYPE,
    POINT_OF_INTEREST, PRICE, PROXIMITY, Entity, IntentPayload,
)
from core.navigator import build_query, convert_to_meters


HOME = "33.078855,-96.826350"


def query_for(*entities, user_location=None):
    return build_query(IntentPayload("Map.Search", tuple(entities), user_location=user_location), HOME)


@pytest.mark.parametrize("text, meters", [
    ("5 miles", 8045),
    ("3 km", 3000),
    ("200 meters", 200),
    ("a few miles", 1000),
    ("", 1000),
])
def test_convert_to_meters(text, meters):
    assert convert_to_meters(text) == meters


class TestPointOfInterest:
    def test_place_type_beats_other_names(self):
        query = query_for(Entity(PLACE_NAME, "Blue Bottle"), Entity(POINT_OF_INTEREST, "cafe"), Entity(PLACE_TYPE, "coffee"))
        assert query.point_of_interest == "coffee"

    def test_falls_back_to_place_name(self):
        assert query_for(Entity(PLACE_NAME, "Blue Bottle")).point_of_interest == "Blue Bottle"


class TestRadius:
    def test_dimension(self):
        assert query_for(Entity(PLACE_TYPE, "gas"), Entity(DIMENSION, "2 miles")).radius_meters == 3218

    def test_nearby_and_default_are_local(self):
        assert query_for(Entity(PLACE_TYPE, "gas"), Entity(PROXIMITY, "nearby")).radius_meters == 8045
        assert query_for(Entity(PLACE_TYPE, "gas")).radius_meters == 8045

    def test_duration_goes_into_the_text(self):
        query = query_for(Entity(PLACE_TYPE, "pizza"), Entity(DURATION, "10 minutes"))
        assert query.radius_meters is None
        assert query.point_of_interest == "pizza within 10 minutes"


class TestArea:
    def test_destination_first(self):
        query = query_for(Entity(PLACE_TYPE, "tacos"), Entity(CITY, "Austin"), Entity(DESTINATION, "downtown"))
        assert query.point_of_interest == "tacos of downtown"
        assert query.coordinates is None

    def test_geography_uses_its_own_text(self):
        query = query_for(Entity(PLACE_TYPE, "hotels"), Entity(GEOGRAPHY_POI, "the airport"))
        assert query.point_of_interest == "hotels of the airport"

    def test_no_area_uses_client_location(self):
        assert query_for(Entity(PLACE_TYPE, "gas"), user_location="1.0,2.0").coordinates == "1.0,2.0"
        assert query_for(Entity(PLACE_TYPE, "gas")).coordinates == HOME


@pytest.mark.parametrize("tier, min_price, max_price", [
    ("cheap", None, 2),
    ("Cheapest", None, 1),
    ("expensive", 3, None),
    ("fancy", None, None),
])
def test_price_tiers(tier, min_price, max_price):
    query = query_for(Entity(PLACE_TYPE, "sushi"), Entity(PRICE, tier))
    assert (query.min_price, query.max_price) == (min_price, max_price)
