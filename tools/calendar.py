"""
tools/calendar.py

CalendarProvider implementations.
- GoogleCalendar: Calendar v3 REST API with a bearer token (token acquisition is external)
- MemoryCalendar: in-process calendar for the CLI, demos and tests
Both share the same availability rule: a slot is free when it starts in the
future and no event overlaps it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import requests

from core.errors import ProviderError
from tools.base import CalendarProvider
from util.dates import localize, parse_iso
from util.http import get_json, send_json


logger = logging.getLogger(__name__)

EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"
SEARCH_WINDOW = timedelta(hours=8)


def overlaps(event_start, event_end, start, end):
    """True if [event_start, event_end) collides with the slot [start, end).

    A slot without duration (start == end) collides with any event running
    at that instant.
    """
    if end <= start:
        return event_start <= start < event_end
    return event_start < end and event_end > start


def resolve_email(name, domain):
    """'Amy Lee' -> 'amy.lee@<domain>'"""
    tokens = name.strip().lower().split()
    if not tokens:
        return None
    return f"{'.'.join(tokens[:2])}@{domain}"


def _slot(start, duration_minutes):
    return start, start + timedelta(minutes=duration_minutes or 0)


class GoogleCalendar(CalendarProvider):
    def __init__(self, settings):
        self.settings = settings

    def _headers(self):
        return {
            "Authorization": f"Bearer {self.settings.google_calendar_token}",
            "Accept": "application/json",
        }

    def _call(self, method, url, what, params=None, body=None):
        try:
            return send_json(method, url, params=params, json=body, headers=self._headers())
        except requests.RequestException as exc:
            raise ProviderError(f"Calendar {what} failed: {exc}") from exc

    def _events(self, time_min, time_max=None):
        params = {
            "timeMin": time_min.isoformat(),
            "maxResults": 20,
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        if time_max is not None:
            params["timeMax"] = time_max.isoformat()
        try:
            data = get_json(EVENTS_URL, params=params, headers=self._headers())
        except requests.RequestException as exc:
            raise ProviderError(f"Calendar listing failed: {exc}") from exc
        return (data or {}).get("items") or []

    def _bounds(self, event):
        tz = self.settings.time_zone
        start = event["start"].get("dateTime") or event["start"].get("date")
        end = event["end"].get("dateTime") or event["end"].get("date")
        return parse_iso(start, tz), parse_iso(end, tz)

    def create_event(self, start, duration_minutes, title, location=None, attendees=()):
        tz = self.settings.time_zone
        begin, end = _slot(localize(start, tz), duration_minutes)
        emails = [resolve_email(name, self.settings.attendee_email_domain) for name in attendees or ()]
        body = {
            "summary": title,
            "location": location or "TBD",
            "description": title,
            "start": {"dateTime": begin.isoformat(), "timeZone": tz},
            "end": {"dateTime": end.isoformat(), "timeZone": tz},
            "attendees": [{"email": email} for email in emails if email],
        }
        self._call("POST", EVENTS_URL, "insert", body=body)
        logger.info("Created calendar event %r at %s", title, begin.isoformat())

    def _find(self, target):
        tz = self.settings.time_zone
        now = datetime.now(ZoneInfo(tz))
        for event in self._events(now):
            if isinstance(target, datetime):
                if self._bounds(event)[0] == localize(target, tz):
                    return event
            else:
                title = event.get("summary") or ""
                if title.lower() == str(target).lower():
                    return event
        return None

    def delete_event(self, target):
        event = self._find(target)
        if event is None:
            logger.info("No calendar event matches %r; nothing to delete", target)
            return False
        self._call("DELETE", f"{EVENTS_URL}/{event['id']}", "delete")
        logger.info("Deleted calendar event %s", event["id"])
        return True

    def is_available(self, start, duration_minutes=None):
        tz = self.settings.time_zone
        begin, end = _slot(localize(start, tz), duration_minutes)
        if begin < datetime.now(begin.tzinfo):
            return False
        for event in self._events(begin - SEARCH_WINDOW, begin + SEARCH_WINDOW):
            event_start, event_end = self._bounds(event)
            if overlaps(event_start, event_end, begin, end):
                return False
        return True


@dataclass
class MemoryEvent:
    start: datetime
    end: datetime
    title: str
    location: str | None = None
    attendees: list[str] = field(default_factory=list)


class MemoryCalendar(CalendarProvider):
    """Keeps naive wall-clock times in `time_zone`; aware inputs are converted on the way in."""

    def __init__(self, events=None, now=None, time_zone=None):
        self.events: list[MemoryEvent] = list(events or [])
        self._now = now  # fixed clock for tests
        self.time_zone = time_zone

    def now(self):
        if self._now is not None:
            return self._wall_clock(self._now)
        if self.time_zone:
            return datetime.now(ZoneInfo(self.time_zone)).replace(tzinfo=None)
        return datetime.now()

    def _wall_clock(self, dt):
        if dt is None or dt.tzinfo is None:
            return dt
        zone = ZoneInfo(self.time_zone) if self.time_zone else None
        return dt.astimezone(zone).replace(tzinfo=None)

    def _find(self, target):
        if isinstance(target, datetime):
            target = self._wall_clock(target)
        for event in self.events:
            if isinstance(target, datetime):
                if event.start == target:
                    return event
            elif event.title.lower() == str(target).lower():
                return event
        return None

    def create_event(self, start, duration_minutes, title, location=None, attendees=()):
        begin, end = _slot(self._wall_clock(start), duration_minutes)
        self.events.append(MemoryEvent(begin, end, title, location, list(attendees or ())))
        logger.info("Created event %r at %s", title, begin.isoformat())

    def delete_event(self, target):
        event = self._find(target)
        if event is None:
            logger.info("No event matches %r; nothing to delete", target)
            return False
        self.events.remove(event)
        logger.info("Deleted event %r", event.title)
        return True

    def is_available(self, start, duration_minutes=None):
        begin, end = _slot(self._wall_clock(start), duration_minutes)
        if begin < self.now():
            return False
        return not any(overlaps(e.start, e.end, begin, end) for e in self.events)

    def update_event(self, target, new_start=None, duration_minutes=None, location=None):
        event = self._find(target)
        if event is None:
            raise ProviderError(f"No event matches {target!r}")
        length = event.end - event.start
        if new_start is not None:
            event.start = self._wall_clock(new_start)
        if duration_minutes is not None:
            length = timedelta(minutes=duration_minutes)
        event.end = event.start + length
        if location:
            event.location = location
        logger.info("Updated event %r", event.title)
