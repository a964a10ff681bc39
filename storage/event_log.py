"""Redis-backed event log mirroring the in-memory store.

Each event is stored as its camelCase JSON in a Redis list trimmed to the
store capacity, so a restarted API can replay the same window of events.
"""

import json

from pydantic import ValidationError

from config import configure_logging
from producers.schemas import Event
from storage.redis_client import RedisClient


class RedisEventLog:
    def __init__(
        self,
        client: RedisClient,
        key: str = "formwizard:events",
        capacity: int = 1000,
        log_level: str | None = None,
    ):
        self._client = client
        self._key = key
        self._capacity = capacity
        self.log = configure_logging("event-log", log_level)

    def append(self, event: Event):
        payload = json.dumps(event.to_json_dict())

        def _op(r):
            pipe = r.pipeline()
            pipe.rpush(self._key, payload)
            pipe.ltrim(self._key, -self._capacity, -1)
            pipe.execute()

        self._client.execute(_op)

    def load(self) -> list[Event]:
        """All logged events, oldest first. Unreadable entries are skipped."""
        raw = self._client.execute(lambda r: r.lrange(self._key, 0, -1))
        events = []
        for item in raw:
            try:
                events.append(Event.model_validate_json(item))
            except ValidationError as e:
                self.log.warning("event_log_entry_skipped", error=str(e))
        return events

    def clear(self):
        self._client.execute(lambda r: r.delete(self._key))
