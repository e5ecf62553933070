"""
core/router.py

Intent routing for one conversational turn.
- Assistant.handle_turn: dispatch the payload to its handler and return a Reply
- a pending delete confirmation or reservation dialog captures the next turn
- unexpected failures end in a generic apology; the conversation keeps going
"""

import logging

from core import messages
from core.calendar import CalendarActions
from core.entities import IntentPayload
from core.messages import Reply
from core.navigator import Navigator
from core.place import PlaceDetails
from core.session import Session


logger = logging.getLogger(__name__)


class Assistant:
    def __init__(self, map_api, calendar_api, settings):
        self.settings = settings
        self.calendar = CalendarActions(calendar_api)
        self.navigator = Navigator(map_api, settings)
        self.place = PlaceDetails(map_api, calendar_api, settings)

        place = self.place
        self.routes = {
            "Calendar.CreateEvent": self.calendar.create_event,
            "Calendar.DeleteEvent": self.calendar.confirm_deletion,
            "Calendar.IsAvailable": self.calendar.check_availability,
            "Calendar.UpdateEvent": self.calendar.update_event,
            "Map.Search": self.navigator.search,
            "Map.Show": self.navigator.show_map,
            "Map.NextPage": self.navigator.next_page,
            "Map.PreviousPage": self.navigator.previous_page,
            "Map.RestartListing": self.navigator.restart_listing,
            "Map.Selection": self.navigator.select_place,
            "Dialog.End": self.navigator.end,
            "Place.Call": lambda p, s: place.handle(place.call, p, s),
            "Place.GetAddress": lambda p, s: place.handle(place.address, p, s),
            "Place.GetDirections": lambda p, s: place.handle(place.directions, p, s),
            "Place.GetHours": lambda p, s: place.handle(place.hours, p, s),
            "Place.GetMenu": lambda p, s: place.handle(place.menu, p, s),
            "Place.GetPhoneNumber": lambda p, s: place.handle(place.phone_number, p, s),
            "Place.GetPriceRange": lambda p, s: place.handle(place.price_range, p, s),
            "Place.GetRating": lambda p, s: place.handle(place.rating, p, s),
            "Place.MakeReservation": place.make_reservation,
        }

    def route(self, payload: IntentPayload, session: Session):
        if session.pending_deletion is not None:
            return self.calendar.answer_deletion
        if session.pending_reservation is not None:
            return self.place.continue_reservation
        return self.routes.get(payload.intent)

    def handle_turn(self, payload: IntentPayload, session: Session) -> Reply:
        """Run one turn. Never raises; failures become an apology."""
        session.add("user", payload.text or payload.intent, limit=self.settings.history_turns)
        handler = self.route(payload, session)
        if handler is None:
            logger.info("No handler for intent %r", payload.intent)
            reply = Reply().say(messages.UNKNOWN_INTENT.format(text=payload.text or payload.intent))
        else:
            try:
                reply = handler(payload, session)
            except Exception:
                logger.exception("Turn failed for intent %r in %s", payload.intent, session.conversation_id)
                reply = Reply().say(messages.GENERIC_APOLOGY)
        session.add("assistant", " ".join(reply.messages), limit=self.settings.history_turns)
        return reply


def build_assistant(settings):
    """Wire the configured vendor providers into an Assistant."""
    from tools.calendar import GoogleCalendar, MemoryCalendar
    from tools.places import GoogleMaps

    if settings.calendar_provider == "google":
        calendar_api = GoogleCalendar(settings)
    else:
        calendar_api = MemoryCalendar(time_zone=settings.time_zone)
    logger.info("Using %s calendar", settings.calendar_provider)
    return Assistant(GoogleMaps(settings), calendar_api, settings)
