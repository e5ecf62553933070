"""
util/dates.py

Date parsing and formatting helpers.
- parse_point: parse a recognizer value ("2024-03-01 14:00:00") into a datetime
- long_date / long_date_time: spoken-style renderings for confirmations
- localize: attach the assistant's time zone to naive datetimes
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from dateutil import parser


DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def parse_point(text):
    """Parse free text into a datetime.

    Raises ValueError (dateutil's ParserError) or OverflowError when the text
    does not describe a point in time.
    """
    if not text or not text.strip():
        raise ValueError("empty date/time text")
    return parser.parse(text.strip())


def localize(dt, tz_name):
    """Return dt in the given zone; naive values are taken as local to that zone."""
    zone = ZoneInfo(tz_name)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=zone)
    return dt.astimezone(zone)


def parse_iso(text, tz_name):
    """Parse an ISO date or datetime coming back from a calendar service."""
    return localize(parser.isoparse(text), tz_name)


def long_date(dt: datetime) -> str:
    """'Friday, March 1, 2024'"""
    return f"{dt.strftime('%A')}, {dt.strftime('%B')} {dt.day}, {dt.year}"


def long_date_time(dt: datetime) -> str:
    """'Friday, March 1, 2024, 02:00 PM'"""
    return f"{long_date(dt)}, {dt.strftime('%I:%M %p')}"


def clock(hhmm: str) -> str:
    """Render a '0930' opening-hours time as '09:30'."""
    if hhmm and len(hhmm) == 4 and hhmm.isdigit():
        return f"{hhmm[:2]}:{hhmm[2:]}"
    return hhmm or ""
