"""Capacity-bounded, append-only event store."""

import threading
from collections import deque
from collections.abc import Iterable, Mapping
from typing import Any

from producers.schemas import Event

DEFAULT_CAPACITY = 1000


def normalize_event(raw: Event | Mapping[str, Any]) -> Event:
    """Coerce an Event-shaped mapping into an Event, filling in the timestamp."""
    if isinstance(raw, Event):
        return raw
    return Event.model_validate(raw)


class EventStore:
    """
    Ordered, oldest-first sequence of events with tail-keep retention.

    After any append the store holds at most ``capacity`` events: the most
    recent ones. Appends are serialized by a lock so concurrent producers
    (HTTP workers, WebSocket handlers) never lose or duplicate an event.
    Readers get an immutable snapshot.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._events: deque[Event] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._events.maxlen  # type: ignore[return-value]

    def append(self, raw: Event | Mapping[str, Any]) -> Event:
        event = normalize_event(raw)
        with self._lock:
            self._events.append(event)
        return event

    def extend(self, raws: Iterable[Event | Mapping[str, Any]]) -> list[Event]:
        events = [normalize_event(raw) for raw in raws]
        with self._lock:
            self._events.extend(events)
        return events

    def all(self) -> tuple[Event, ...]:
        with self._lock:
            return tuple(self._events)

    def clear(self):
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
