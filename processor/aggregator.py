"""Per-field metric calculation: interactions, hesitation, abandonment and changes."""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from processor.classifier import by_field, by_form, by_type, distinct_field_ids
from producers.schemas import Event, EventType


@dataclass(frozen=True)
class FieldMetrics:
    field_id: str
    total_interactions: int
    avg_hesitation: int  # ms
    abandonment_count: int
    abandonment_rate: int  # 0-100
    change_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "fieldId": self.field_id,
            "metrics": {
                "totalInteractions": self.total_interactions,
                "avgHesitation": self.avg_hesitation,
                "abandonmentCount": self.abandonment_count,
                "abandonmentRate": self.abandonment_rate,
                "changeCount": self.change_count,
            },
        }


def round_half_up(value: float) -> int:
    """Nearest integer, .5 rounds up (dashboard convention)."""
    return math.floor(value + 0.5)


def average_hesitation(blur_events: Iterable[Event]) -> int:
    """Mean hesitationDuration over blur events that carry one, rounded to ms."""
    samples = [
        e.metadata.hesitation_duration
        for e in blur_events
        if e.metadata.hesitation_duration is not None
        and math.isfinite(e.metadata.hesitation_duration)
    ]
    if not samples:
        return 0
    return round_half_up(sum(samples) / len(samples))


def abandonment_rate(abandoned: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(100 * abandoned / total)


def submitted_sessions(form_events: Iterable[Event]) -> set[str]:
    return {e.session_id for e in by_type(form_events, EventType.FORM_SUBMIT)}


def metrics_for_field(
    field_id: str, form_events: list[Event], submitted: set[str]
) -> FieldMetrics:
    """
    Metrics for one field of a form.

    A focus event counts as abandoned when its session produced no
    formSubmit anywhere in the form, so one submission absolves every field
    the session touched.
    """
    field_events = by_field(form_events, field_id)
    focus_events = by_type(field_events, EventType.FIELD_FOCUS)
    blur_events = by_type(field_events, EventType.FIELD_BLUR)

    total = len(focus_events)
    abandoned = sum(1 for e in focus_events if e.session_id not in submitted)

    return FieldMetrics(
        field_id=field_id,
        total_interactions=total,
        avg_hesitation=average_hesitation(blur_events),
        abandonment_count=abandoned,
        abandonment_rate=abandonment_rate(abandoned, total),
        change_count=len(by_type(field_events, EventType.FIELD_CHANGED)),
    )


def compute_field_metrics(events: Iterable[Event], form_id: str) -> list[FieldMetrics]:
    """One FieldMetrics per distinct field of ``form_id``, first-observed order."""
    form_events = by_form(events, form_id)
    if not form_events:
        return []
    submitted = submitted_sessions(form_events)
    return [
        metrics_for_field(field_id, form_events, submitted)
        for field_id in distinct_field_ids(form_events)
    ]
