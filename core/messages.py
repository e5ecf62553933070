"""
core/messages.py

Reply templates.
- fixed replies for the error taxonomy (absent/invalid input, provider failure, ...)
- small builders for confirmations that echo the user's own phrases
"""

from dataclasses import dataclass, field


DIDNT_CATCH = "I think you're trying to {action} but I didn't catch the details. Can you try again?"
DIDNT_CATCH_DATE = "I'm sorry, but I didn't catch that date."
NOT_UNDERSTOOD = "I'm sorry, I didn't understand that. Can you try again?"
UNKNOWN_INTENT = 'I didn\'t understand "{text}".'
GENERIC_APOLOGY = "Sorry, something went wrong. Please try again."

CREATE_FAILED = "Something's wrong, I couldn't create the event in your calendar."
DELETE_FAILED = "Something's wrong, I couldn't remove the event in your calendar."
CHECK_FAILED = "Something's wrong, I couldn't check your calendar."
UPDATE_FAILED = "Something's wrong, I couldn't update the event in your calendar."
UPDATE_UNSUPPORTED = "Sorry, I can't update events in your calendar yet."
DELETE_CANCELLED = "Okay, I'll leave it on your calendar."

SEARCH_FAILED = "Sorry, I couldn't reach the map service. Please try again."
NOTHING_FOUND = "Sorry, I couldn't find anything."
NO_MORE_RESULTS = "There's no more results."
FIRST_PAGE = "You're on the first page of results."
NO_SEARCH = "You haven't searched for anything yet."
MORE_DETAILS = "Would you like additional details on any of them?"

WHICH_PLACE = "Which place would you like to know about?"
ANYTHING_ELSE = "Is there anything else I can tell you about {name}?"
NO_DIRECTIONS = "Sorry, but I'm struggling finding your destination."
NO_HOURS = "Sorry, but their hours aren't available."
NO_MENU = "Sorry, but retrieving menus hasn't been implemented yet."
NO_PHONE = "Sorry, their phone number isn't available."
NO_PRICE = "Sorry, their price range isn't available."
NO_RATING = "Sorry, but they aren't rated."
ASK_RESERVATION_TIME = "When would you like to make the reservation?"
ASK_PARTY_SIZE = "How many people are in your party?"
ASK_RESERVATION_NAME = "Whose name will this reservation be under?"
RESERVATION_CANCELLED = "Okay, I won't make the reservation."

YES = "Yes"
NEVERMIND = "Nevermind"

DOLLARS_PER_PRICE_TIER = 15


def didnt_catch(action):
    return DIDNT_CATCH.format(action=action)


def found_places(count, first_page):
    if first_page:
        return f"I found at least {count} places."
    return f"I found another {count} places."


def availability(is_free, when, duration_text=None):
    reply = "Yes, you're available" if is_free else "No, you're not available"
    reply += when
    if duration_text:
        reply += f" for {duration_text}"
    return reply + "."


def event_added(title, attendee_list=None, location=None, when="", duration_text=None):
    reply = f"I've added {title}"
    if attendee_list:
        reply += f" with {attendee_list}"
    if location:
        reply += f" at {location}"
    reply += when
    if duration_text:
        reply += f" for {duration_text}"
    return reply + " to your calendar."


def price_range(tier):
    return f"Their price range is approximately {tier * DOLLARS_PER_PRICE_TIER} dollars per meal."


@dataclass
class Reply:
    """What one turn produces for the presentation layer."""
    messages: list[str] = field(default_factory=list)
    listing: dict | None = None  # {"places": [...], "has_more": bool}
    choices: list[str] = field(default_factory=list)
    map_url: str | None = None

    def say(self, text):
        self.messages.append(text)
        return self

    def to_dict(self):
        return {
            "messages": list(self.messages),
            "listing": self.listing,
            "choices": list(self.choices),
            "map_url": self.map_url,
        }


def listing_payload(places, has_more):
    return {"places": [p.to_dict() for p in places], "has_more": has_more}
