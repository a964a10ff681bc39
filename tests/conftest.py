"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from config import Settings
from processor.engine import AnalyticsEngine
from producers.schemas import Event, EventMetadata

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    """Test settings: in-memory store only."""
    return Settings(persist_events=False, redis_url="redis://localhost:6379/1", log_level="WARNING")


@pytest.fixture
def engine(settings):
    return AnalyticsEngine(settings)


@pytest.fixture
def make_event():
    """Factory for events with sensible defaults; metadata given as snake_case kwargs."""

    def _make(event_type, session_id="s1", form_id="signup", field_id=None, age=None, **metadata):
        timestamp = NOW - age if isinstance(age, timedelta) else NOW
        return Event(
            session_id=session_id,
            form_id=form_id,
            field_id=field_id,
            event_type=event_type,
            timestamp=timestamp,
            metadata=EventMetadata(**metadata),
        )

    return _make


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def now():
    """The instant fixture events are dated relative to."""
    return NOW
