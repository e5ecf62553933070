"""
core/numbers.py

Party-size disambiguation.

The recognizer reports plain numbers that duplicate digits already consumed
by date/time entities (a date of 2/29/2020 also yields "29/2020", "March 1,
1999" also yields "1999"). resolve_party_size strips those out and keeps the
count the user actually meant. It is a best-effort heuristic that depends on
the recognizer's emission order, not a guaranteed parse.
"""

import logging
import re

from core.entities import last_value


logger = logging.getLogger(__name__)

ARITHMETIC = re.compile(r"[.\-+*/()\\]")


def _number_text(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_int(value):
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def resolve_party_size(number_entities, datetime_entity=None, date_entity=None, time_entity=None) -> int:
    """Return the party size, or 0 when none of the numbers survive."""
    candidates = list(number_entities or [])
    date_texts = [e.text for e in (datetime_entity, date_entity, time_entity) if e is not None]

    survivors = []
    for entity in candidates:
        value = last_value(entity)
        if ARITHMETIC.search(entity.text or ""):
            logger.debug("Dropping arithmetic-looking number %r", entity.text)
            continue
        if value is not None and any(_number_text(value) in text for text in date_texts):
            logger.debug("Dropping number %r already part of the date/time", entity.text)
            continue
        if _as_int(value) is None:
            logger.warning("Dropping unparseable number %r", entity.text)
            continue
        survivors.append(entity)

    if not survivors:
        return 0
    if len(survivors) == 1:
        return _as_int(last_value(survivors[0]))

    seen = set()
    unique = []
    for entity in survivors:
        key = _number_text(last_value(entity))
        if key not in seen:
            seen.add(key)
            unique.append(entity)
    return _as_int(last_value(unique[0]))
