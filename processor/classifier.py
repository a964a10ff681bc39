"""Pure filters that partition an event sequence by form, field, session or type."""

from collections.abc import Iterable

from producers.schemas import Event, EventType


def by_form(events: Iterable[Event], form_id: str) -> list[Event]:
    return [e for e in events if e.form_id == form_id]


def by_field(events: Iterable[Event], field_id: str) -> list[Event]:
    return [e for e in events if e.field_id == field_id]


def by_session(events: Iterable[Event], session_id: str) -> list[Event]:
    return [e for e in events if e.session_id == session_id]


def by_type(events: Iterable[Event], event_type: EventType) -> list[Event]:
    """Events of a recognized type. Unrecognized types never match."""
    return [e for e in events if e.is_type(event_type)]


def distinct_field_ids(events: Iterable[Event]) -> list[str]:
    """Field ids in first-observed order."""
    return list(dict.fromkeys(e.field_id for e in events if e.field_id))


def distinct_form_ids(events: Iterable[Event]) -> list[str]:
    return list(dict.fromkeys(e.form_id for e in events if e.form_id))
