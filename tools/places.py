"""
tools/places.py

Google Maps implementation of SearchProvider.
- search: Places text search, then Place Details for hours/phone/reviews
- get_directions: route summaries from the Directions API
- render_static_map: Static Maps URL (no request is made)
Vendor statuses other than OK/ZERO_RESULTS and network errors become ProviderError.
"""

import logging
from urllib.parse import quote, urlencode

import requests

from core.errors import ProviderError
from tools.base import OpeningPeriod, Place, SearchPage, SearchProvider
from util.http import get_json


logger = logging.getLogger(__name__)

TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
PLACE_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"
STATIC_MAP_URL = "https://maps.googleapis.com/maps/api/staticmap"
DIRECTIONS_LINK = "https://www.google.com/maps/dir/{origin}/{destination}/"

OK_STATUSES = {"OK", "ZERO_RESULTS"}


def _check_status(data, what):
    status = (data or {}).get("status", "OK")
    if status not in OK_STATUSES:
        message = data.get("error_message") or status
        raise ProviderError(f"Google {what} failed: {message}")
    return status


def _hours(opening_hours):
    periods = []
    for period in (opening_hours or {}).get("periods") or []:
        opened = period.get("open") or {}
        closed = period.get("close")
        periods.append(OpeningPeriod(
            day=int(opened.get("day", 0)),
            open_time=opened.get("time", "0000"),
            close_time=closed.get("time") if closed else None,
        ))
    return tuple(periods)


class GoogleMaps(SearchProvider):
    def __init__(self, settings):
        self.settings = settings

    def _get(self, url, params, what):
        try:
            data = get_json(url, params=params)
        except requests.RequestException as exc:
            raise ProviderError(f"Google {what} request failed: {exc}") from exc
        _check_status(data, what)
        return data

    def search(self, query):
        params = {"key": self.settings.google_maps_api_key}
        if query.page_token:
            # Google ignores the other parameters when a page token is given
            params["pagetoken"] = query.page_token
        else:
            if query.point_of_interest:
                params["query"] = query.point_of_interest
            if query.radius_meters:
                params["radius"] = query.radius_meters
            if query.coordinates:
                params["location"] = query.coordinates
            if query.min_price:
                params["minprice"] = query.min_price
            if query.max_price:
                params["maxprice"] = query.max_price

        data = self._get(TEXT_SEARCH_URL, params, "place search")
        results = data.get("results") or []
        logger.info("Place search returned %d results (more=%s)", len(results), bool(data.get("next_page_token")))
        places = [self._to_place(result) for result in results]
        return SearchPage(places=places, next_page_token=data.get("next_page_token"))

    def _details(self, place_id):
        data = self._get(
            PLACE_DETAILS_URL,
            {"key": self.settings.google_places_api_key, "placeid": place_id},
            "place details",
        )
        return data.get("result") or {}

    def _to_place(self, result):
        place_id = result["place_id"]
        address = result.get("formatted_address")
        location = (result.get("geometry") or {}).get("location") or {}
        try:
            details = self._details(place_id)
        except ProviderError:
            # a stale place id only loses its details, the page still loads
            logger.warning("Place details unavailable for %s", place_id, exc_info=True)
            details = {}
        return Place(
            id=place_id,
            name=result.get("name", ""),
            address=address,
            latitude=location.get("lat"),
            longitude=location.get("lng"),
            rating=result.get("rating") or 0,
            price=result.get("price_level") or 0,
            is_open=(result.get("opening_hours") or {}).get("open_now"),
            hours=_hours(details.get("opening_hours")),
            phone_number=details.get("formatted_phone_number"),
            reviews=tuple(details.get("reviews") or ()),
            url=details.get("url"),
            directions_url=DIRECTIONS_LINK.format(
                origin=quote(self.settings.default_address),
                destination=quote(address or result.get("name", "")),
            ),
            icon=result.get("icon"),
            types=tuple(result.get("types") or ()),
        )

    def get_directions(self, origin, destination):
        data = self._get(
            DIRECTIONS_URL,
            {"key": self.settings.google_directions_api_key, "origin": origin, "destination": destination},
            "directions",
        )
        return [route.get("summary", "") for route in data.get("routes") or [] if route.get("summary")]

    def render_static_map(self, center, zoom=18, size="600x600"):
        params = {"key": self.settings.google_maps_api_key, "center": center, "zoom": zoom, "size": size}
        return f"{STATIC_MAP_URL}?{urlencode(params)}"
