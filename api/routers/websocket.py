"""WebSocket endpoints: event push from trackers and a live feed for dashboards."""

import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from api.ws_manager import SubscriptionError, WebSocketManager
from processor.engine import AnalyticsEngine
from producers.schemas import TrackerEvent

router = APIRouter()


@router.websocket("/ws/tracker")
async def websocket_tracker(websocket: WebSocket):
    """
    Tracker push channel. Each text frame is one event JSON object; the
    server answers ``{"type": "ack"}`` or ``{"type": "error", "errors": [...]}``.
    """
    engine: AnalyticsEngine = websocket.app.state.engine
    manager: WebSocketManager = websocket.app.state.ws_manager
    await websocket.accept()
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                event = TrackerEvent.model_validate_json(raw)
            except ValidationError as e:
                await websocket.send_json(
                    {"type": "error", "errors": e.errors(include_url=False, include_context=False)}
                )
                continue
            stored = engine.ingest(event)
            data = stored.to_json_dict()
            await websocket.send_json({"type": "ack", "data": data})
            await manager.broadcast("events", data, form_id=stored.form_id)
    except WebSocketDisconnect:
        pass


@router.websocket("/ws/live")
async def websocket_live(websocket: WebSocket):
    """
    Dashboard feed.

    Clients may narrow what they receive:
        {"type": "subscribe", "channels": ["events", "problems"], "forms": ["signup"]}
    Frames that are not JSON objects are ignored.
    """
    manager: WebSocketManager = websocket.app.state.ws_manager
    await manager.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(data, dict):
                continue
            if data.get("type") == "subscribe":
                try:
                    manager.subscribe(websocket, data)
                except SubscriptionError as e:
                    await websocket.send_json({"type": "error", "error": str(e)})
                else:
                    await websocket.send_json({"type": "subscribed"})
            elif data.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)
