"""Analytics engine: wires the event store to the aggregation stages."""

import asyncio
from collections.abc import Mapping
from typing import Any

import redis

from config import Settings, configure_logging
from processor.aggregator import FieldMetrics, compute_field_metrics
from processor.classifier import by_form, distinct_form_ids
from processor.heatmap import HeatmapPoint, bin_positions
from processor.problems import ProblemDetector, ProblemReport
from processor.store import EventStore
from processor.window import filter_by_window
from producers.schemas import Event
from storage.event_log import RedisEventLog
from storage.redis_client import CircuitOpenError


class AnalyticsEngine:
    """
    Event Store -> filter by form/time -> {metrics, heatmap} -> problem detection.

    The store is the only mutable state. Queries aggregate over a snapshot.
    An optional event log mirrors every ingested event; its failures are
    logged and never lose the in-memory copy.
    """

    def __init__(self, settings: Settings, event_log: RedisEventLog | None = None):
        self.settings = settings
        self.log = configure_logging("analytics-engine", settings.log_level)
        self._store = EventStore(capacity=settings.store_capacity)
        self._detector = ProblemDetector(
            abandonment_threshold=settings.abandonment_threshold,
            hesitation_threshold_ms=settings.hesitation_threshold_ms,
            change_threshold=settings.change_threshold,
        )
        self._event_log = event_log

    @property
    def store(self) -> EventStore:
        return self._store

    def restore(self) -> int:
        """Replay the event log into the store. Returns the number of events loaded."""
        if self._event_log is None:
            return 0
        events = self._event_log.load()
        self._store.extend(events)
        self.log.info("events_restored", count=len(events))
        return len(events)

    def ingest(self, payload: Event | Mapping[str, Any]) -> Event:
        event = self._store.append(payload)
        if not event.is_recognized:
            self.log.warning("unrecognized_event_type", event_type=event.event_type)
        self.log.debug(
            "event_ingested",
            event_type=event.event_type,
            form_id=event.form_id,
            field_id=event.field_id,
            stored=len(self._store),
        )
        self._mirror(event)
        return event

    def _mirror(self, event: Event):
        if self._event_log is None:
            return
        try:
            self._event_log.append(event)
        except (redis.RedisError, CircuitOpenError) as e:
            self.log.error("event_log_write_failed", error=str(e))

    def get_events(self) -> tuple[Event, ...]:
        return self._store.all()

    def list_forms(self) -> list[str]:
        return distinct_form_ids(self._store.all())

    async def get_form_analytics(self, form_id: str) -> list[FieldMetrics]:
        # Let queued ingestion run before the synchronous aggregation pass.
        await asyncio.sleep(0)
        metrics = compute_field_metrics(self._store.all(), form_id)
        self.log.info("form_analytics_computed", form_id=form_id, fields=len(metrics))
        return metrics

    async def identify_problematic_fields(self, form_id: str) -> list[ProblemReport]:
        metrics = await self.get_form_analytics(form_id)
        return self._detector.detect(metrics)

    def generate_heatmap(self, form_id: str, window_token: str | None = None) -> list[HeatmapPoint]:
        token = window_token or self.settings.default_window
        events = filter_by_window(by_form(self._store.all(), form_id), token)
        return bin_positions(events)

    def clear_events(self):
        self._store.clear()
        if self._event_log is not None:
            try:
                self._event_log.clear()
            except (redis.RedisError, CircuitOpenError) as e:
                self.log.error("event_log_clear_failed", error=str(e))
        self.log.info("events_cleared")
