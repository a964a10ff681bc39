"""Tests for the capacity-bounded event store."""

import threading

import pytest

from processor.store import EventStore
from producers.schemas import Event, EventType


def _event(i: int) -> Event:
    return Event(session_id=f"s{i}", form_id="f", event_type=EventType.MOUSE_MOVE)


class TestEventStore:
    def test_empty(self):
        store = EventStore()
        assert len(store) == 0
        assert store.all() == ()

    def test_insertion_order(self):
        store = EventStore()
        for i in range(5):
            store.append(_event(i))
        assert [e.session_id for e in store.all()] == ["s0", "s1", "s2", "s3", "s4"]

    def test_evicts_oldest_beyond_capacity(self):
        store = EventStore(capacity=1000)
        for i in range(1, 1201):
            store.append(_event(i))
        events = store.all()
        assert len(events) == 1000
        assert events[0].session_id == "s201"
        assert events[-1].session_id == "s1200"
        assert [e.session_id for e in events] == [f"s{i}" for i in range(201, 1201)]

    def test_extend_respects_capacity(self):
        store = EventStore(capacity=3)
        store.extend([_event(i) for i in range(5)])
        assert [e.session_id for e in store.all()] == ["s2", "s3", "s4"]

    def test_append_mapping_fills_timestamp(self):
        store = EventStore()
        stored = store.append({"sessionId": "s1", "eventType": "formSubmit"})
        assert isinstance(stored, Event)
        assert stored.timestamp is not None
        assert store.all() == (stored,)

    def test_unknown_type_is_stored(self):
        store = EventStore()
        store.append({"sessionId": "s1", "eventType": "somethingNew"})
        assert len(store) == 1

    def test_snapshot_is_immutable(self):
        store = EventStore()
        store.append(_event(0))
        snapshot = store.all()
        store.append(_event(1))
        assert len(snapshot) == 1

    def test_clear(self):
        store = EventStore()
        store.append(_event(0))
        store.clear()
        assert len(store) == 0

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            EventStore(capacity=0)

    def test_concurrent_appends_lose_nothing(self):
        store = EventStore(capacity=10_000)

        def worker(offset: int):
            for i in range(500):
                store.append(_event(offset + i))

        threads = [threading.Thread(target=worker, args=(n * 500,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        ids = [e.session_id for e in store.all()]
        assert len(ids) == 4000
        assert len(set(ids)) == 4000
