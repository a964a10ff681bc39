"""Prometheus-compatible metrics endpoint."""

import time

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/metrics")
async def prometheus_metrics(request: Request):
    """Expose store and connection gauges in Prometheus text exposition format."""
    engine = request.app.state.engine
    ws_manager = request.app.state.ws_manager
    uptime = time.time() - request.app.state.start_time

    lines = [
        "# HELP event_store_events Events currently held in the store",
        "# TYPE event_store_events gauge",
        f"event_store_events {len(engine.store)}",
        "",
        "# HELP event_store_capacity Maximum events retained before eviction",
        "# TYPE event_store_capacity gauge",
        f"event_store_capacity {engine.store.capacity}",
        "",
        "# HELP tracked_forms Distinct forms with stored events",
        "# TYPE tracked_forms gauge",
        f"tracked_forms {len(engine.list_forms())}",
        "",
        "# HELP websocket_connections_active Current dashboard WebSocket connections",
        "# TYPE websocket_connections_active gauge",
        f"websocket_connections_active {ws_manager.connection_count}",
        "",
        "# HELP api_uptime_seconds Seconds since API start",
        "# TYPE api_uptime_seconds gauge",
        f"api_uptime_seconds {uptime:.1f}",
    ]
    return PlainTextResponse("\n".join(lines) + "\n", media_type="text/plain; version=0.0.4")
