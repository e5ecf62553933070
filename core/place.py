"""
core/place.py

Handlers for questions about the selected place (address, hours, phone,
price, rating, directions) and for booking a table there.
A reservation without a date and time becomes a short dialog: the next turns
answer the time, the party size and the name, in that order.
"""

import logging

from core import messages
from core.entities import DATE, DATETIME, NUMBER, TIME, Entity, IntentPayload
from core.errors import ProviderError
from core.messages import Reply
from core.navigator import current_location
from core.numbers import resolve_party_size
from core.session import PendingReservation, Session
from core.temporal import DateStatus, resolve_date_time
from util.dates import DAY_NAMES, clock, long_date


logger = logging.getLogger(__name__)

RESERVATION_MINUTES = 90
CANCEL_ANSWERS = {"nevermind", "never mind", "cancel", "stop"}


def _follow_up(reply, place):
    return reply.say(messages.ANYTHING_ELSE.format(name=place.name))


class PlaceDetails:
    def __init__(self, map_api, calendar_api, settings):
        self.map_api = map_api
        self.calendar_api = calendar_api
        self.settings = settings

    def handle(self, action, payload: IntentPayload, session: Session) -> Reply:
        """Run `action` against the selected place, or ask which place is meant."""
        if session.place is None:
            return Reply().say(messages.WHICH_PLACE)
        reply = action(session.place, payload)
        return _follow_up(reply, session.place)

    def call(self, place, payload):
        # dialing is up to the client
        return Reply().say(f"Calling {place.phone_number}...")

    def address(self, place, payload):
        return Reply().say(f"The address is: {place.address}.")

    def directions(self, place, payload):
        origin = current_location(payload, self.settings.default_coordinates)
        try:
            routes = self.map_api.get_directions(origin, place.address or place.name)
        except ProviderError:
            logger.exception("Directions to %r failed", place.name)
            routes = []
        reply = Reply()
        if not routes:
            return reply.say(messages.NO_DIRECTIONS)
        for summary in routes:
            reply.say(summary)
        return reply

    def hours(self, place, payload):
        reply = Reply()
        if not place.hours:
            return reply.say(messages.NO_HOURS)
        for period in place.hours:
            day = DAY_NAMES[period.day % 7]
            if period.close_time:
                reply.say(f"{day}: {clock(period.open_time)}-{clock(period.close_time)}")
            else:
                reply.say(f"{day}: Open 24 hours")
        return reply

    def menu(self, place, payload):
        return Reply().say(messages.NO_MENU)

    def phone_number(self, place, payload):
        if not place.phone_number:
            return Reply().say(messages.NO_PHONE)
        return Reply().say(f"Their phone number is: {place.phone_number}.")

    def price_range(self, place, payload):
        if not place.price:
            return Reply().say(messages.NO_PRICE)
        return Reply().say(messages.price_range(place.price))

    def rating(self, place, payload):
        if not place.rating:
            return Reply().say(messages.NO_RATING)
        return Reply().say(f"They have a {place.rating}-star rating.")

    def _book(self, place, point, party_size, name=None):
        """Create the 90-minute event; returns the confirmation reply."""
        try:
            self.calendar_api.create_event(
                point, RESERVATION_MINUTES, f"Reservation at {place.name}",
                place.address or place.name,
            )
        except ProviderError:
            logger.exception("Reservation at %r failed", place.name)
            return Reply().say(messages.CREATE_FAILED)

        confirmation = f"I've created a reservation at {place.name} on {long_date(point)}"
        if party_size:
            confirmation += f" for {party_size}"
        if name:
            confirmation += f" under {name}"
        return Reply().say(confirmation + ".")

    def make_reservation(self, payload: IntentPayload, session: Session) -> Reply:
        """Book at the selected place, or start collecting the details over the next turns."""
        place = session.place
        if place is None:
            return Reply().say(messages.WHICH_PLACE)

        dt_entity = payload.first(DATETIME)
        date_entity = payload.first(DATE)
        time_entity = payload.first(TIME)
        if dt_entity is None and (date_entity is None or time_entity is None):
            session.pending_reservation = PendingReservation(place=place)
            return Reply().say(messages.ASK_RESERVATION_TIME)

        resolved = resolve_date_time(dt_entity, date_entity, time_entity)
        if not resolved.ok:
            logger.warning("Reservation: unparseable date/time %r", resolved.source)
            return _follow_up(Reply().say(messages.didnt_catch("make a reservation")), place)

        party_size = resolve_party_size(payload.all(NUMBER), dt_entity, date_entity, time_entity)
        return _follow_up(self._book(place, resolved.point, party_size), place)

    def continue_reservation(self, payload: IntentPayload, session: Session) -> Reply:
        """Take the next answer of a reservation dialog: time, party size, then name."""
        pending = session.pending_reservation
        answer = (payload.text or "").strip()
        if payload.intent == "Dialog.End" or answer.lower() in CANCEL_ANSWERS:
            session.pending_reservation = None
            return Reply().say(messages.RESERVATION_CANCELLED)

        if pending.point is None:
            resolved = _answered_time(payload, answer)
            if not resolved.ok:
                return Reply().say(messages.DIDNT_CATCH_DATE).say(messages.ASK_RESERVATION_TIME)
            pending.point = resolved.point
            return Reply().say(messages.ASK_PARTY_SIZE)

        if pending.party_size is None:
            party_size = _answered_party_size(payload, answer)
            if party_size <= 0:
                return Reply().say(messages.NOT_UNDERSTOOD).say(messages.ASK_PARTY_SIZE)
            pending.party_size = party_size
            return Reply().say(messages.ASK_RESERVATION_NAME)

        if not answer:
            return Reply().say(messages.ASK_RESERVATION_NAME)
        session.pending_reservation = None
        reply = self._book(pending.place, pending.point, pending.party_size, name=answer)
        if session.place == pending.place:
            session.place = None
        return reply


def _answered_time(payload, answer):
    """Date/time entities of the answer, else the raw answer text."""
    resolved = resolve_date_time(payload.first(DATETIME), payload.first(DATE), payload.first(TIME))
    if resolved.status is DateStatus.ABSENT and answer:
        resolved = resolve_date_time(Entity(DATETIME, answer, (answer,)), None, None)
    return resolved


def _answered_party_size(payload, answer):
    party_size = resolve_party_size(payload.all(NUMBER))
    if party_size:
        return party_size
    try:
        return int(answer)
    except ValueError:
        return 0
