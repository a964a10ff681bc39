"""Tests for the analytics engine operations."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
import redis

from processor.engine import AnalyticsEngine
from producers.schemas import EventType, utcnow


def _session(engine, make_event, session_id, field_id, submit, hesitation=None):
    engine.ingest(make_event(EventType.FIELD_FOCUS, session_id=session_id, field_id=field_id))
    engine.ingest(
        make_event(
            EventType.FIELD_BLUR,
            session_id=session_id,
            field_id=field_id,
            hesitation_duration=hesitation,
        )
    )
    if submit:
        engine.ingest(make_event(EventType.FORM_SUBMIT, session_id=session_id))


class TestIngest:
    def test_ingest_mapping(self, engine):
        event = engine.ingest({"sessionId": "s1", "formId": "f", "eventType": "fieldFocus"})
        assert engine.get_events() == (event,)

    def test_unrecognized_type_stored(self, engine):
        engine.ingest({"sessionId": "s1", "formId": "f", "eventType": "copyPaste", "fieldId": "x"})
        assert len(engine.get_events()) == 1

    def test_capacity_from_settings(self, settings, make_event):
        engine = AnalyticsEngine(settings.model_copy(update={"store_capacity": 5}))
        for i in range(8):
            engine.ingest(make_event(EventType.MOUSE_MOVE, session_id=f"s{i}"))
        assert [e.session_id for e in engine.get_events()] == ["s3", "s4", "s5", "s6", "s7"]

    def test_clear_events(self, engine, make_event):
        engine.ingest(make_event(EventType.FIELD_FOCUS, field_id="email"))
        engine.clear_events()
        assert engine.get_events() == ()

    def test_list_forms(self, engine, make_event):
        engine.ingest(make_event(EventType.FIELD_FOCUS, form_id="a"))
        engine.ingest(make_event(EventType.FIELD_FOCUS, form_id="b"))
        engine.ingest(make_event(EventType.PAGE_EXIT, form_id=None))
        assert engine.list_forms() == ["a", "b"]


class TestQueries:
    @pytest.mark.asyncio
    async def test_form_analytics(self, engine, make_event):
        _session(engine, make_event, "S1", "email", submit=True, hesitation=1000)
        _session(engine, make_event, "S2", "email", submit=False, hesitation=3000)
        metrics = await engine.get_form_analytics("signup")
        assert len(metrics) == 1
        assert metrics[0].total_interactions == 2
        assert metrics[0].abandonment_rate == 50
        assert metrics[0].avg_hesitation == 2000

    @pytest.mark.asyncio
    async def test_unknown_form_is_empty(self, engine):
        assert await engine.get_form_analytics("nope") == []
        assert await engine.identify_problematic_fields("nope") == []

    @pytest.mark.asyncio
    async def test_problematic_fields(self, engine, make_event):
        _session(engine, make_event, "S1", "email", submit=False)
        _session(engine, make_event, "S2", "name", submit=True, hesitation=7000)
        _session(engine, make_event, "S3", "phone", submit=True, hesitation=100)
        reports = {r.field_id: r for r in await engine.identify_problematic_fields("signup")}
        assert set(reports) == {"email", "name"}
        assert reports["email"].issues.high_abandonment
        assert reports["name"].issues.long_hesitation

    @pytest.mark.asyncio
    async def test_thresholds_from_settings(self, settings, make_event):
        engine = AnalyticsEngine(settings.model_copy(update={"hesitation_threshold_ms": 50}))
        _session(engine, make_event, "S1", "phone", submit=True, hesitation=100)
        reports = await engine.identify_problematic_fields("signup")
        assert [r.field_id for r in reports] == ["phone"]

    def test_heatmap_scoped_to_form_and_window(self, engine):
        now = utcnow()
        for form_id, age, x in [("signup", 1, 10.5), ("signup", 1, 10.1), ("other", 1, 10.5), ("signup", 24 * 9, 50)]:
            engine.ingest({
                "sessionId": "s1",
                "formId": form_id,
                "eventType": "mouseMove",
                "timestamp": (now - timedelta(hours=age)).isoformat(),
                "metadata": {"cursorPosition": {"x": x, "y": 3.3}},
            })
        points = engine.generate_heatmap("signup", "7d")
        assert [(p.x, p.y, p.value) for p in points] == [(10, 3, 2)]
        assert len(engine.generate_heatmap("signup", "30d")) == 2
        assert engine.generate_heatmap("signup", "bogus") == engine.generate_heatmap("signup", "24h")


class TestEventLogMirror:
    def test_ingest_is_mirrored(self, settings, make_event):
        event_log = MagicMock()
        engine = AnalyticsEngine(settings, event_log=event_log)
        event = engine.ingest(make_event(EventType.FIELD_FOCUS, field_id="email"))
        event_log.append.assert_called_once_with(event)

    def test_mirror_failure_keeps_event(self, settings, make_event):
        event_log = MagicMock()
        event_log.append.side_effect = redis.ConnectionError("down")
        engine = AnalyticsEngine(settings, event_log=event_log)
        engine.ingest(make_event(EventType.FIELD_FOCUS, field_id="email"))
        assert len(engine.get_events()) == 1

    def test_restore(self, settings, make_event):
        event_log = MagicMock()
        event_log.load.return_value = [make_event(EventType.FIELD_FOCUS, field_id="email")]
        engine = AnalyticsEngine(settings, event_log=event_log)
        assert engine.restore() == 1
        assert len(engine.get_events()) == 1

    def test_restore_without_log(self, engine):
        assert engine.restore() == 0

    def test_clear_clears_log(self, settings):
        event_log = MagicMock()
        engine = AnalyticsEngine(settings, event_log=event_log)
        engine.clear_events()
        event_log.clear.assert_called_once()
