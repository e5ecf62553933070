"""
core/text.py

Human-readable attendee lists and event titles.
"""

from core.entities import Entity


def join_names(names):
    """Join names as 'A', 'A, and B', 'A, B, and C'. Empty input gives ''."""
    names = [n for n in names if n]
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + f", and {names[-1]}"


def build_attendee_list(attendee_entities: list[Entity]) -> str:
    return join_names([e.text for e in attendee_entities or []])


def build_title(title_entity: Entity | None,
                appointment_entity: Entity | None,
                attendee_list: str) -> str:
    """Pick the event title: explicit title, '<type> with <attendees>', then a generic label."""
    rules = [
        (title_entity is not None, lambda: title_entity.text),
        (appointment_entity is not None and bool(attendee_list),
         lambda: f"{appointment_entity.text} with {attendee_list}"),
        (True, lambda: f"Appointment with {attendee_list}"),
    ]
    for applies, title in rules:
        if applies:
            return title()
