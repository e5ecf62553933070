"""
core/calendar.py

Calendar intent handlers.
- check_availability / create_event / update_event: one provider call each
- confirm_deletion + answer_deletion: two-turn delete with a Yes/Nevermind question
Each handler resolves entities, calls the CalendarProvider at most once, and
turns the outcome (or the failure) into reply text.
"""

import logging

from core import messages
from core.entities import (
    APPOINTMENT, ATTENDEE, DATE, DATETIME, DURATION, LOCATION, TIME, TITLE,
    IntentPayload,
)
from core.errors import NotSupportedError, ProviderError
from core.messages import Reply
from core.session import PendingDeletion, Session
from core.temporal import DateStatus, describe_when, resolve_date_time, resolve_duration
from core.text import build_attendee_list, build_title
from util.dates import long_date, long_date_time


logger = logging.getLogger(__name__)

DEFAULT_EVENT_MINUTES = 60


def _when_entities(payload):
    return payload.first(DATETIME), payload.first(DATE), payload.first(TIME)


def _log_unresolved(resolved, action):
    if resolved.status is DateStatus.ABSENT:
        logger.info("%s: no date/time given", action)
    else:
        logger.warning("%s: unparseable date/time %r", action, resolved.source)


class CalendarActions:
    def __init__(self, calendar_api):
        self.calendar_api = calendar_api

    def check_availability(self, payload: IntentPayload, session: Session) -> Reply:
        dt_entity, date_entity, time_entity = _when_entities(payload)
        duration_entity = payload.first(DURATION)
        resolved = resolve_date_time(dt_entity, date_entity, time_entity)
        if not resolved.ok:
            _log_unresolved(resolved, "availability")
            return Reply().say(messages.DIDNT_CATCH_DATE)

        duration = resolve_duration(duration_entity, default=None)
        try:
            is_free = self.calendar_api.is_available(resolved.point, duration)
        except ProviderError:
            logger.exception("Availability check failed")
            return Reply().say(messages.CHECK_FAILED)

        when = describe_when(dt_entity, date_entity, time_entity)
        return Reply().say(messages.availability(
            is_free, when, duration_entity.text if duration_entity else None,
        ))

    def create_event(self, payload: IntentPayload, session: Session) -> Reply:
        dt_entity, date_entity, time_entity = _when_entities(payload)
        duration_entity = payload.first(DURATION)
        title_entity = payload.first(TITLE)
        location_entity = payload.first(LOCATION)
        attendee_entities = payload.all(ATTENDEE)

        resolved = resolve_date_time(dt_entity, date_entity, time_entity)
        if not resolved.ok:
            _log_unresolved(resolved, "create event")
            return Reply().say(messages.didnt_catch("create an appointment"))

        duration = resolve_duration(duration_entity, default=DEFAULT_EVENT_MINUTES)
        attendees = [e.text for e in attendee_entities]
        attendee_list = build_attendee_list(attendee_entities)
        title = build_title(title_entity, payload.first(APPOINTMENT), attendee_list)
        location = location_entity.text if location_entity else None

        try:
            self.calendar_api.create_event(resolved.point, duration, title, location, attendees)
        except ProviderError:
            logger.exception("Creating event %r failed", title)
            return Reply().say(messages.CREATE_FAILED)

        return Reply().say(messages.event_added(
            title,
            # generated titles already name the attendees
            attendee_list=attendee_list if title_entity else None,
            location=location,
            when=describe_when(dt_entity, date_entity, time_entity, date_prefix="on "),
            duration_text=duration_entity.text if duration_entity else None,
        ))

    def confirm_deletion(self, payload: IntentPayload, session: Session) -> Reply:
        """Ask before deleting; the answer arrives on the next turn."""
        dt_entity, date_entity, time_entity = _when_entities(payload)
        title_entity = payload.first(TITLE)
        attendee_entities = payload.all(ATTENDEE)

        title = None
        if title_entity is not None or attendee_entities:
            title = build_title(title_entity, payload.first(APPOINTMENT), build_attendee_list(attendee_entities))
        resolved = resolve_date_time(dt_entity, date_entity, time_entity)

        if title:
            question = f"Are you sure you want to remove {title}"
            question += describe_when(dt_entity, date_entity, time_entity, date_prefix="on ")
            question += " from your calendar?"
        elif resolved.ok:
            question = f"Are you sure you want to remove appointment scheduled on {long_date_time(resolved.point)}?"
        else:
            _log_unresolved(resolved, "delete event")
            return Reply().say(messages.didnt_catch("delete an appointment"))

        session.pending_deletion = PendingDeletion(title=title, point=resolved.point)
        reply = Reply().say(question)
        reply.choices = [messages.YES, messages.NEVERMIND]
        return reply

    def answer_deletion(self, payload: IntentPayload, session: Session) -> Reply:
        pending = session.pending_deletion
        session.pending_deletion = None
        if pending is None:
            return Reply().say(messages.NOT_UNDERSTOOD)
        if payload.text.strip().lower() != messages.YES.lower():
            return Reply().say(messages.DELETE_CANCELLED)

        target = pending.title or pending.point
        try:
            deleted = self.calendar_api.delete_event(target)
        except ProviderError:
            logger.exception("Deleting %r failed", target)
            return Reply().say(messages.DELETE_FAILED)

        if not deleted:
            if pending.title:
                return Reply().say(f"I couldn't find {pending.title} on your calendar.")
            return Reply().say(f"I couldn't find an appointment at {long_date_time(pending.point)} on your calendar.")
        if pending.title:
            return Reply().say(f"I've removed {pending.title} from your calendar.")
        return Reply().say(f"I've removed the appointment at {long_date(pending.point)} from your calendar.")

    def update_event(self, payload: IntentPayload, session: Session) -> Reply:
        dt_entity, date_entity, time_entity = _when_entities(payload)
        duration_entity = payload.first(DURATION)
        title_entity = payload.first(TITLE)
        location_entity = payload.first(LOCATION)

        resolved = resolve_date_time(dt_entity, date_entity, time_entity)
        if title_entity is None and not resolved.ok:
            _log_unresolved(resolved, "update event")
            return Reply().say(messages.didnt_catch("update an appointment"))

        # with a title the date/time is the new slot; without one it names the event
        target = title_entity.text if title_entity else resolved.point
        new_start = resolved.point if title_entity and resolved.ok else None
        duration = resolve_duration(duration_entity, default=None)
        location = location_entity.text if location_entity else None

        try:
            self.calendar_api.update_event(target, new_start, duration, location)
        except NotSupportedError:
            logger.info("Calendar provider cannot update events")
            return Reply().say(messages.UPDATE_UNSUPPORTED)
        except ProviderError:
            logger.exception("Updating %r failed", target)
            return Reply().say(messages.UPDATE_FAILED)

        name = title_entity.text if title_entity else "your appointment"
        reply = f"I've updated {name}"
        if location:
            reply += f" and moved it to {location}"
        elif duration_entity is not None:
            reply += f" and changed it to last {duration_entity.text}"
        elif new_start is not None:
            reply += " and rescheduled it to" + describe_when(dt_entity, date_entity, time_entity)
        return Reply().say(reply + ".")
