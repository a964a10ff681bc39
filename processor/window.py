"""Symbolic time ranges ("24h", "7d", "30d") and the filter that applies them."""

from collections.abc import Iterable
from datetime import datetime, timedelta

import structlog

from producers.schemas import Event, utcnow

WINDOWS_MS: dict[str, int] = {
    "24h": 86_400_000,
    "7d": 604_800_000,
    "30d": 2_592_000_000,
}
DEFAULT_WINDOW = "24h"

log = structlog.get_logger(component="time-window")


def resolve_cutoff(token: str | None) -> int:
    """Window length in milliseconds. Unknown tokens fall back to 24h."""
    try:
        return WINDOWS_MS[token]  # type: ignore[index]
    except KeyError:
        log.debug("unknown_window_token", token=token, fallback=DEFAULT_WINDOW)
        return WINDOWS_MS[DEFAULT_WINDOW]


def filter_by_window(
    events: Iterable[Event], token: str | None, now: datetime | None = None
) -> list[Event]:
    """Keep events with ``timestamp >= now - window``. ``now`` is sampled once."""
    now = now or utcnow()
    cutoff = now - timedelta(milliseconds=resolve_cutoff(token))
    return [e for e in events if e.timestamp >= cutoff]
