"""In-process WebSocket connection manager for the change feed."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import WebSocket

from catering_chat.domain.events.row_change import RowChange
from catering_chat.infrastructure.ws.protocol import WsOutbound

logger = logging.getLogger(__name__)

FeedKey = tuple[str, UUID]


class ConnectionManager:
    """Tracks sockets and the (table, vendor_lead_id) filters each one holds."""

    def __init__(self) -> None:
        self._connections: dict[str, set[WebSocket]] = {}
        self._subscriptions: dict[FeedKey, set[WebSocket]] = {}

    async def connect(self, ws: WebSocket, principal_key: str) -> None:
        await ws.accept()
        self._connections.setdefault(principal_key, set()).add(ws)
        logger.debug("WS connected: %s (total=%d)", principal_key, len(self._connections))

    def disconnect(self, ws: WebSocket, principal_key: str) -> None:
        conns = self._connections.get(principal_key)
        if conns:
            conns.discard(ws)
            if not conns:
                del self._connections[principal_key]
        for key in list(self._subscriptions):
            subs = self._subscriptions[key]
            subs.discard(ws)
            if not subs:
                del self._subscriptions[key]
        logger.debug("WS disconnected: %s", principal_key)

    def subscribe(self, ws: WebSocket, table: str, vendor_lead_id: UUID) -> None:
        self._subscriptions.setdefault((table, vendor_lead_id), set()).add(ws)

    def unsubscribe(self, ws: WebSocket, table: str, vendor_lead_id: UUID) -> None:
        key = (table, vendor_lead_id)
        subs = self._subscriptions.get(key)
        if subs:
            subs.discard(ws)
            if not subs:
                del self._subscriptions[key]

    def subscriber_count(self, table: str, vendor_lead_id: UUID) -> int:
        return len(self._subscriptions.get((table, vendor_lead_id), ()))

    async def dispatch(self, change: RowChange) -> int:
        """Forward a row change to every socket filtered on its table and conversation."""
        subs = list(self._subscriptions.get((change.table, change.vendor_lead_id), ()))
        raw = WsOutbound(type="row_change", data=change.to_payload()).model_dump_json()
        delivered = 0
        dead: list[WebSocket] = []
        for ws in subs:
            try:
                await ws.send_text(raw)
                delivered += 1
            except Exception:
                dead.append(ws)
        for ws in dead:
            self._drop(ws)
        return delivered

    async def send(self, ws: WebSocket, event_type: str, data: dict[str, Any]) -> None:
        await ws.send_text(WsOutbound(type=event_type, data=data).model_dump_json())

    def _drop(self, ws: WebSocket) -> None:
        for key, conns in list(self._connections.items()):
            if ws in conns:
                self.disconnect(ws, key)
                return
