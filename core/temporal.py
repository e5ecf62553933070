"""
core/temporal.py

Temporal resolution: combine datetime/date/time/duration entities.
- resolve_date_time: one point in time, or an explicit ABSENT/INVALID outcome
- resolve_duration: minutes from the last duration resolution (seconds)
- describe_when: echo the user's own phrases back ("next Friday at 2pm")
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime

from core.entities import Entity, last_value
from util.dates import parse_point


logger = logging.getLogger(__name__)


class DateStatus(enum.Enum):
    RESOLVED = "resolved"
    ABSENT = "absent"
    INVALID = "invalid"


@dataclass(frozen=True)
class ResolvedDateTime:
    point: datetime | None
    status: DateStatus
    source: str = ""  # the text that was parsed, kept for diagnostics

    @property
    def ok(self) -> bool:
        return self.status is DateStatus.RESOLVED

    @classmethod
    def absent(cls) -> "ResolvedDateTime":
        return cls(point=None, status=DateStatus.ABSENT)


def _joined_date_and_time(date_entity, time_entity):
    parts = []
    if date_entity is not None:
        parts.append(str(last_value(date_entity) or ""))
    if time_entity is not None:
        parts.append(str(last_value(time_entity) or ""))
    return " ".join(parts).strip()


def _parse(text: str) -> ResolvedDateTime:
    try:
        point = parse_point(text)
    except (ValueError, OverflowError):
        logger.warning("Could not parse date/time value %r", text)
        return ResolvedDateTime(point=None, status=DateStatus.INVALID, source=text)
    return ResolvedDateTime(point=point, status=DateStatus.RESOLVED, source=text)


def resolve_date_time(datetime_entity: Entity | None,
                      date_entity: Entity | None,
                      time_entity: Entity | None) -> ResolvedDateTime:
    """Resolve a single point in time.

    A combined datetime entity is authoritative and the separate date/time
    entities are ignored. Otherwise the last date value and the last time
    value are joined with a space and parsed together. With none of the
    three, the outcome is ABSENT rather than an error.
    """
    rules = [
        (datetime_entity is not None, lambda: str(last_value(datetime_entity) or "")),
        (date_entity is not None or time_entity is not None,
         lambda: _joined_date_and_time(date_entity, time_entity)),
    ]
    for applies, text in rules:
        if applies:
            return _parse(text())
    logger.info("No date/time entities in payload")
    return ResolvedDateTime.absent()


def resolve_duration(duration_entity: Entity | None, default=None):
    """Return the duration in minutes, or `default` when there is none."""
    if duration_entity is None:
        return default
    seconds = last_value(duration_entity)
    try:
        return float(seconds) / 60
    except (TypeError, ValueError):
        logger.warning("Could not parse duration value %r; using %r", seconds, default)
        return default


def describe_when(datetime_entity, date_entity, time_entity, date_prefix=""):
    """Build ' next Friday at 2pm' style text from the entities' raw phrases."""
    if datetime_entity is not None:
        return f" {datetime_entity.text}"
    when = ""
    if date_entity is not None:
        when += f" {date_prefix}{date_entity.text}"
    if time_entity is not None:
        when += f" at {time_entity.text}"
    return when
