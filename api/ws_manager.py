"""Dashboard WebSocket fan-out: per-form, per-channel subscriptions with throttling."""

import asyncio
import json
import time
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from config import configure_logging

CHANNELS = frozenset({"events", "problems"})


class SubscriptionError(ValueError):
    pass


def _string_list(value: Any, name: str) -> set[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SubscriptionError(f"{name} must be a list of strings")
    return set(value)


class DashboardSubscription:
    """What one dashboard socket wants to see. An empty ``forms`` set means every form."""

    __slots__ = ("websocket", "channels", "forms", "last_send_time")

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.channels: set[str] = set(CHANNELS)
        self.forms: set[str] = set()
        self.last_send_time: float = 0.0

    def wants(self, channel: str, form_id: str | None) -> bool:
        if channel not in self.channels:
            return False
        return not self.forms or form_id in self.forms


class WebSocketManager:
    """
    Pushes ingested events and problem reports to dashboards.

    Each socket receives at most one message per ``throttle_ms``. A failed
    send drops the socket.
    """

    def __init__(self, throttle_ms: int = 100, log_level: str | None = None):
        self._subscriptions: dict[WebSocket, DashboardSubscription] = {}
        self._throttle_interval = throttle_ms / 1000.0
        self.log = configure_logging("ws-manager", log_level)

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self._subscriptions[websocket] = DashboardSubscription(websocket)
        self.log.info("dashboard_connected", total=len(self._subscriptions))

    def disconnect(self, websocket: WebSocket):
        if self._subscriptions.pop(websocket, None) is not None:
            self.log.info("dashboard_disconnected", total=len(self._subscriptions))

    def subscribe(self, websocket: WebSocket, message: dict[str, Any]):
        """
        Apply ``{"channels": [...], "forms": [...]}``; either key may be omitted.
        Raises SubscriptionError on malformed filters, leaving the old ones intact.
        """
        sub = self._subscriptions.get(websocket)
        if sub is None:
            return
        channels = sub.channels
        forms = sub.forms
        if "channels" in message:
            channels = _string_list(message["channels"], "channels") & CHANNELS
        if "forms" in message:
            forms = _string_list(message["forms"], "forms")
        sub.channels = channels
        sub.forms = forms
        self.log.debug("dashboard_subscribed", channels=sorted(channels), forms=sorted(forms))

    async def broadcast(self, channel: str, data: dict, form_id: str | None = None):
        """Send ``data`` to sockets subscribed to ``channel`` and ``form_id``."""
        if not self._subscriptions:
            return

        now = time.monotonic()
        message = json.dumps({"channel": channel, "formId": form_id, "data": data})

        sends = []
        for ws, sub in list(self._subscriptions.items()):
            if not sub.wants(channel, form_id):
                continue
            if now - sub.last_send_time < self._throttle_interval:
                continue
            sub.last_send_time = now
            sends.append(self._safe_send(ws, message))

        if sends:
            await asyncio.gather(*sends)

    async def _safe_send(self, ws: WebSocket, message: str):
        try:
            if ws.client_state == WebSocketState.CONNECTED:
                await ws.send_text(message)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            self.log.warning("dashboard_send_failed", error=str(e))
            self.disconnect(ws)

    @property
    def connection_count(self) -> int:
        return len(self._subscriptions)
