"""
core/entities.py

Entity lookup over intent payloads.
- Entity / IntentPayload: immutable input to one resolution pass
- find_first / find_all: pick entities of one kind, insertion order preserved
- last_value: the single place where "last resolved value wins" lives
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping


# Recognizer entity kinds
DATETIME = "builtin.datetimeV2.datetime"
DATE = "builtin.datetimeV2.date"
TIME = "builtin.datetimeV2.time"
DURATION = "builtin.datetimeV2.duration"
NUMBER = "builtin.number"
ORDINAL = "builtin.ordinal"
DIMENSION = "builtin.dimension"
CITY = "builtin.geography.city"
GEOGRAPHY_POI = "builtin.geography.pointOfInterest"

APPOINTMENT = "Calendar.Appointment"
ATTENDEE = "Calendar.Attendee"
TITLE = "Calendar.Title"
LOCATION = "Calendar.Location"

POINT_OF_INTEREST = "Map.PointOfInterest"
DESTINATION = "Map.Destination"
ADJECTIVE = "Map.Adjective"
PROXIMITY = "Map.Proximity"

PLACE_NAME = "Place.Name"
PLACE_TYPE = "Place.Type"
PRICE = "Place.Price"
RATING = "Place.Rating"


@dataclass(frozen=True)
class Entity:
    kind: str
    text: str
    resolved_values: tuple[Any, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Entity":
        """Build an entity from either the simple or the recognizer shape.

        Simple:     {"kind", "text", "resolved_values": [...]}
        Recognizer: {"type", "entity", "resolution": {"values": [...]} | {"value": ...}}
        """
        kind = data.get("kind") or data.get("type") or ""
        text = data.get("text")
        if text is None:
            text = data.get("entity") or ""
        values = data.get("resolved_values")
        if values is None:
            resolution = data.get("resolution") or {}
            if "values" in resolution:
                values = resolution["values"]
            elif "value" in resolution:
                values = [resolution["value"]]
            else:
                values = []
        return cls(kind=str(kind), text=str(text), resolved_values=tuple(values))


@dataclass(frozen=True)
class IntentPayload:
    intent: str
    entities: tuple[Entity, ...] = field(default_factory=tuple)
    text: str = ""
    user_location: str | None = None  # "lat,lng" reported by the client

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IntentPayload":
        intent = data.get("intent") or data.get("intent_name") or ""
        entities = tuple(Entity.from_dict(e) for e in data.get("entities") or [])
        return cls(
            intent=str(intent),
            entities=entities,
            text=str(data.get("text") or data.get("query") or ""),
            user_location=data.get("user_location"),
        )

    def first(self, kind):
        return find_first(self.entities, kind)

    def all(self, kind):
        return find_all(self.entities, kind)


def find_first(entities: Iterable[Entity], kind: str) -> Entity | None:
    """Return the first entity of the given kind, or None."""
    for entity in entities or ():
        if entity.kind == kind:
            return entity
    return None


def find_all(entities: Iterable[Entity], kind: str) -> list[Entity]:
    """Return every entity of the given kind in payload order."""
    return [e for e in entities or () if e.kind == kind]


def unwrap(value: Any) -> Any:
    """Recognizer values are either scalars or {"value": ...} mappings."""
    if isinstance(value, Mapping):
        return value.get("value")
    return value


def last_value(entity: Entity | None) -> Any:
    """Return the most specific (last) resolved value of an entity.

    Recognizers emit several candidate resolutions per entity; the last one
    is the most resolved. Returns None when the entity is missing or carries
    no resolutions.
    """
    if entity is None or not entity.resolved_values:
        return None
    return unwrap(entity.resolved_values[-1])
