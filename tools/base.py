"""
tools/base.py

Capability interfaces for the external services and the records they return.
- SearchProvider: place search, directions, static maps
- CalendarProvider: create/delete/update events, availability checks
- Place / SearchQuery / SearchPage: normalized search records
One implementation per vendor lives next to this module.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from datetime import datetime

from core.errors import NotSupportedError


@dataclass(frozen=True)
class OpeningPeriod:
    day: int  # 0 = Sunday
    open_time: str  # "0900"
    close_time: str | None = None  # None means open 24 hours


@dataclass(frozen=True)
class Place:
    id: str
    name: str
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    rating: float = 0
    price: int = 0  # tier 0..4
    is_open: bool | None = None
    hours: tuple[OpeningPeriod, ...] = ()
    phone_number: str | None = None
    reviews: tuple[dict, ...] = ()
    url: str | None = None
    directions_url: str | None = None
    icon: str | None = None
    types: tuple[str, ...] = ()

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "rating": self.rating,
            "price": self.price,
            "is_open": self.is_open,
            "phone_number": self.phone_number,
            "url": self.url,
            "directions_url": self.directions_url,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class SearchQuery:
    point_of_interest: str | None = None
    radius_meters: int | None = None
    coordinates: str | None = None  # "lat,lng"
    min_price: int | None = None  # 1..4
    max_price: int | None = None  # 1..4
    page_token: str | None = None


@dataclass(frozen=True)
class SearchPage:
    places: list[Place] = field(default_factory=list)
    next_page_token: str | None = None


class SearchProvider(abc.ABC):
    """Queries a places/maps service."""

    @abc.abstractmethod
    def search(self, query: SearchQuery) -> SearchPage:
        """Run one search request; raises ProviderError on failure."""

    @abc.abstractmethod
    def get_directions(self, origin: str, destination: str) -> list[str]:
        """Return route summaries from origin to destination."""

    @abc.abstractmethod
    def render_static_map(self, center: str, zoom: int, size: str) -> str:
        """Return the URL of a static map image."""


class CalendarProvider(abc.ABC):
    """Reads and changes the user's calendar."""

    @abc.abstractmethod
    def create_event(self, start: datetime, duration_minutes, title: str,
                     location: str | None = None, attendees=()) -> None:
        ...

    @abc.abstractmethod
    def delete_event(self, target: datetime | str) -> bool:
        """Delete the event starting at `target` (datetime) or titled `target` (str).

        Returns False when no event matches.
        """

    @abc.abstractmethod
    def is_available(self, start: datetime, duration_minutes=None) -> bool:
        ...

    def update_event(self, target: datetime | str, new_start: datetime | None = None,
                     duration_minutes=None, location: str | None = None) -> None:
        raise NotSupportedError(f"{type(self).__name__} cannot update events")
