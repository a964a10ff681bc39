"""Tests for the synthetic session generator."""

from processor.aggregator import compute_field_metrics
from producers.sample_data import DEFAULT_FIELDS, SampleDataGenerator
from producers.schemas import EventType


class TestSampleDataGenerator:
    def test_deterministic_with_seed(self, now):
        a = SampleDataGenerator("signup", seed=42).generate(5, now=now)
        b = SampleDataGenerator("signup", seed=42).generate(5, now=now)
        assert [e.to_json_dict() for e in a] == [e.to_json_dict() for e in b]

    def test_sessions_end_in_submit_or_abandon(self, now):
        events = SampleDataGenerator("signup", seed=1).generate(20, now=now)
        sessions = {e.session_id for e in events}
        assert len(sessions) == 20
        for session_id in sessions:
            kinds = {e.event_type for e in events if e.session_id == session_id}
            assert (EventType.FORM_SUBMIT in kinds) != (EventType.FORM_ABANDON in kinds)

    def test_submit_ratio_extremes(self, now):
        all_submit = SampleDataGenerator("signup", submit_ratio=1.0, seed=3).generate(10, now=now)
        assert sum(e.is_type(EventType.FORM_SUBMIT) for e in all_submit) == 10
        none_submit = SampleDataGenerator("signup", submit_ratio=0.0, seed=3).generate(10, now=now)
        assert not any(e.is_type(EventType.FORM_SUBMIT) for e in none_submit)

    def test_sorted_and_in_past(self, now):
        events = SampleDataGenerator("signup", seed=9).generate(10, now=now)
        stamps = [e.timestamp for e in events]
        assert stamps == sorted(stamps)
        assert all(t <= now for t in stamps)

    def test_feeds_metric_calculator(self, now):
        events = SampleDataGenerator("signup", seed=5).generate(30, now=now)
        metrics = compute_field_metrics(events, "signup")
        assert {m.field_id for m in metrics} <= {f for f, _ in DEFAULT_FIELDS}
        name = next(m for m in metrics if m.field_id == "name")
        assert name.total_interactions == 30
        assert name.avg_hesitation > 0
        for m in metrics:
            assert 0 <= m.abandonment_rate <= 100

    def test_blur_carries_hesitation(self, now):
        events = SampleDataGenerator("signup", seed=2).generate(3, now=now)
        blurs = [e for e in events if e.is_type(EventType.FIELD_BLUR)]
        assert blurs
        assert all(e.metadata.hesitation_duration is not None for e in blurs)
