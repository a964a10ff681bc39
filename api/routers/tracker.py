"""Ingestion endpoints used by the embedded form tracker script."""

from fastapi import APIRouter, Depends

from api.dependencies import get_engine, get_ws_manager
from api.ws_manager import WebSocketManager
from processor.engine import AnalyticsEngine
from producers.schemas import TrackerEvent

router = APIRouter(prefix="/api/tracker")


@router.post("/event")
async def track_event(
    event: TrackerEvent,
    engine: AnalyticsEngine = Depends(get_engine),
    ws: WebSocketManager = Depends(get_ws_manager),
):
    """Store one event. A missing timestamp is filled in at receipt."""
    stored = engine.ingest(event)
    data = stored.to_json_dict()
    await ws.broadcast("events", data, form_id=stored.form_id)
    return {"status": "success", "data": data}


@router.post("/events")
async def track_events(
    events: list[TrackerEvent],
    engine: AnalyticsEngine = Depends(get_engine),
    ws: WebSocketManager = Depends(get_ws_manager),
):
    """Batch variant for trackers that buffer events before page unload."""
    for event in events:
        stored = engine.ingest(event)
        await ws.broadcast("events", stored.to_json_dict(), form_id=stored.form_id)
    return {"status": "success", "count": len(events)}
