"""Synthetic form sessions for demos and dashboard smoke tests."""

import random
import uuid
from datetime import datetime, timedelta

from config import Settings, configure_logging
from producers.schemas import CursorPosition, Event, EventMetadata, EventType, utcnow

DEFAULT_FIELDS = [
    ("name", "text"),
    ("email", "email"),
    ("phone", "tel"),
    ("address", "text"),
    ("password", "password"),
]

# Mean hesitation per field type in ms; password fields are the slow ones.
HESITATION_MEAN_MS = {
    "text": 1800.0,
    "email": 2500.0,
    "tel": 3200.0,
    "password": 6500.0,
}


class SampleDataGenerator:
    """
    Builds complete sessions against one form.

    Each session walks the fields in order (focus, a few changes, blur with a
    hesitation duration, pointer samples). A ``submit_ratio`` share of
    sessions ends with formSubmit; the rest drop out at a random field and
    emit formAbandon plus pageExit.
    """

    def __init__(
        self,
        form_id: str,
        fields: list[tuple[str, str]] | None = None,
        submit_ratio: float = 0.6,
        seed: int | None = None,
    ):
        self.form_id = form_id
        self.fields = fields or DEFAULT_FIELDS
        self.submit_ratio = submit_ratio
        self._rng = random.Random(seed)

    def _session(self, start: datetime) -> list[Event]:
        session_id = f"session_{uuid.UUID(int=self._rng.getrandbits(128)).hex[:9]}"
        submits = self._rng.random() < self.submit_ratio
        stop_at = len(self.fields) if submits else self._rng.randint(1, len(self.fields))

        events: list[Event] = []
        clock = start
        seq = 0

        def emit(event_type: EventType, field_id: str | None = None, **meta):
            nonlocal seq
            seq += 1
            events.append(
                Event(
                    session_id=session_id,
                    form_id=self.form_id,
                    field_id=field_id,
                    event_type=event_type,
                    timestamp=clock,
                    metadata=EventMetadata(interaction_sequence=seq, **meta),
                )
            )

        for field_id, field_type in self.fields[:stop_at]:
            cursor = CursorPosition(
                x=self._rng.uniform(40, 600), y=self._rng.uniform(80, 900)
            )
            emit(EventType.FIELD_FOCUS, field_id, field_type=field_type, cursor_position=cursor)

            changes = self._rng.randint(0, 4)
            for i in range(changes):
                clock += timedelta(milliseconds=self._rng.randint(150, 900))
                emit(EventType.FIELD_CHANGED, field_id, field_type=field_type, change_count=i + 1)

            for _ in range(self._rng.randint(1, 3)):
                emit(
                    EventType.MOUSE_MOVE,
                    cursor_position=CursorPosition(
                        x=cursor.x + self._rng.gauss(0, 12), y=cursor.y + self._rng.gauss(0, 6)
                    ),
                )

            hesitation = max(50.0, self._rng.gauss(HESITATION_MEAN_MS.get(field_type, 2000.0), 600.0))
            clock += timedelta(milliseconds=hesitation)
            emit(
                EventType.FIELD_BLUR,
                field_id,
                field_type=field_type,
                hesitation_duration=round(hesitation),
                is_empty=changes == 0,
            )

        if submits:
            emit(EventType.FORM_SUBMIT)
        else:
            emit(EventType.FORM_ABANDON)
            events.append(
                Event(session_id=session_id, event_type=EventType.PAGE_EXIT, timestamp=clock)
            )
        return events

    def generate(self, sessions: int, now: datetime | None = None) -> list[Event]:
        """Events for ``sessions`` sessions spread over the past hour, oldest first."""
        now = now or utcnow()
        events: list[Event] = []
        for _ in range(sessions):
            start = now - timedelta(minutes=self._rng.uniform(5, 60))
            events.extend(self._session(start))
        events.sort(key=lambda e: e.timestamp)
        return events


if __name__ == "__main__":
    import json

    settings = Settings()
    log = configure_logging("sample-data", settings.log_level)
    generator = SampleDataGenerator("testForm", submit_ratio=settings.sample_submit_ratio)
    sample = generator.generate(settings.sample_sessions)
    log.info("sample_data_generated", events=len(sample), sessions=settings.sample_sessions)
    print(json.dumps([e.to_json_dict() for e in sample], indent=2))
