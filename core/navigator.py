"""
core/navigator.py

Map intent handlers: search, paging, selection and the static map.
- build_query: turns map entities into a SearchQuery through ordered rules
- convert_to_meters: '5 miles' -> 8045
- Navigator: drives the conversation's SearchSession and renders listings
"""

from __future__ import annotations

import logging
import re

from core import messages
from core.entities import (
    CITY, DESTINATION, DIMENSION, DURATION, GEOGRAPHY_POI, PLACE_NAME, PLACE_TYPE,
    POINT_OF_INTEREST, PRICE, PROXIMITY, IntentPayload,
)
from core.messages import Reply, listing_payload
from core.search import PageResult, PageStatus, Selector
from core.session import Session
from tools.base import SearchQuery


logger = logging.getLogger(__name__)

LOCAL = "5 miles"
NEARBY = {"nearby", "near by", "close by"}
CLOSEST = {"closest", "nearest"}
METERS_PER_MILE = 1609
METERS_PER_KM = 1000
DEFAULT_METERS = 1000
MAP_ZOOM = 18
MAP_SIZE = "600x600"


def convert_to_meters(distance: str) -> int:
    """Turn a distance phrase into meters; without a number it is 1 km."""
    magnitude = re.search(r"[0-9]+", distance or "")
    if not magnitude:
        return DEFAULT_METERS
    factor = 1
    if re.search(r"mile", distance, re.IGNORECASE):
        factor = METERS_PER_MILE
    elif re.search(r"km", distance, re.IGNORECASE):
        factor = METERS_PER_KM
    return int(magnitude.group(0)) * factor


def _first_match(rules):
    for applies, value in rules:
        if applies:
            return value()
    return None


def current_location(payload: IntentPayload, default: str) -> str:
    return payload.user_location or default


def build_query(payload: IntentPayload, default_coordinates: str) -> SearchQuery:
    place_type = payload.first(PLACE_TYPE)
    poi_entity = payload.first(POINT_OF_INTEREST)
    place_name = payload.first(PLACE_NAME)
    dimension = payload.first(DIMENSION)
    proximity = payload.first(PROXIMITY)
    duration = payload.first(DURATION)
    destination = payload.first(DESTINATION)
    city = payload.first(CITY)
    geography = payload.first(GEOGRAPHY_POI)
    price = payload.first(PRICE)

    poi = _first_match([
        (place_type is not None, lambda: place_type.text),
        (poi_entity is not None, lambda: poi_entity.text),
        (place_name is not None, lambda: place_name.text),
    ]) or ""

    near = proximity is not None and proximity.text.lower() in NEARBY
    # (radius, suffix for the point of interest)
    radius, within = _first_match([
        (dimension is not None, lambda: (convert_to_meters(dimension.text), "")),
        (near, lambda: (convert_to_meters(LOCAL), "")),
        (duration is not None, lambda: (None, f" within {duration.text}")),
        (True, lambda: (convert_to_meters(LOCAL), "")),
    ])
    poi += within

    area = _first_match([
        (destination is not None, lambda: destination.text),
        (city is not None, lambda: city.text),
        (geography is not None, lambda: geography.text),
    ])
    coordinates = None
    if area:
        poi += f" of {area}"
    else:
        coordinates = current_location(payload, default_coordinates)

    min_price = max_price = None
    if price is not None:
        tier = price.text.lower()
        if tier == "cheap":
            max_price = 2
        elif tier == "cheapest":
            max_price = 1
        elif tier == "expensive":
            min_price = 3

    return SearchQuery(
        point_of_interest=poi.strip() or None,
        radius_meters=radius,
        coordinates=coordinates,
        min_price=min_price,
        max_price=max_price,
    )


class Navigator:
    def __init__(self, map_api, settings):
        self.map_api = map_api
        self.settings = settings

    def _listing(self, result: PageResult) -> Reply:
        reply = Reply().say(messages.found_places(len(result.places), result.is_first_page))
        reply.listing = listing_payload(result.places, result.has_more)
        reply.say(messages.MORE_DETAILS)
        return reply

    def _page_reply(self, result: PageResult) -> Reply:
        if result.status is PageStatus.LOADED:
            return self._listing(result)
        fallback = {
            PageStatus.EMPTY: messages.NO_SEARCH,
            PageStatus.NO_MORE: messages.NO_MORE_RESULTS,
            PageStatus.FIRST_PAGE: messages.FIRST_PAGE,
            PageStatus.FAILED: messages.SEARCH_FAILED,
        }
        return Reply().say(fallback[result.status])

    def search(self, payload: IntentPayload, session: Session) -> Reply:
        query = build_query(payload, self.settings.default_coordinates)
        proximity = payload.first(PROXIMITY)
        closest_only = proximity is not None and proximity.text.lower() in CLOSEST
        logger.info("Searching for %r (radius=%s)", query.point_of_interest, query.radius_meters)

        # appends to the conversation's page cache
        result = session.search.search(self.map_api, query, closest_only=closest_only)
        if result.status is PageStatus.EMPTY:
            return Reply().say(messages.NOTHING_FOUND)
        if result.status is PageStatus.LOADED:
            session.place = None
        return self._page_reply(result)

    def next_page(self, payload: IntentPayload, session: Session) -> Reply:
        return self._page_reply(session.search.next_page(self.map_api))

    def previous_page(self, payload: IntentPayload, session: Session) -> Reply:
        return self._page_reply(session.search.previous_page())

    def restart_listing(self, payload: IntentPayload, session: Session) -> Reply:
        return self._page_reply(session.search.restart())

    def select_place(self, payload: IntentPayload, session: Session) -> Reply:
        place = session.search.select(Selector.from_payload(payload))
        if place is None:
            return Reply().say(messages.NOT_UNDERSTOOD)
        session.place = place
        return Reply().say(f"What can I tell you about {place.name}?")

    def show_map(self, payload: IntentPayload, session: Session) -> Reply:
        center = current_location(payload, self.settings.default_coordinates)
        reply = Reply().say("Here's where you are.")
        reply.map_url = self.map_api.render_static_map(center, MAP_ZOOM, MAP_SIZE)
        return reply

    def end(self, payload: IntentPayload, session: Session) -> Reply:
        """Leave place details first, then the search itself."""
        if session.place is not None:
            name = session.place.name
            session.place = None
            return Reply().say(f"Okay, done with {name}.")
        session.new_search()
        return Reply().say("Okay.")
