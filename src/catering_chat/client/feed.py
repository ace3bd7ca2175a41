"""Change-feed subscription over the ``/ws/feed`` WebSocket."""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Protocol
from urllib.parse import urlencode

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed

logger = logging.getLogger(__name__)

RowHandler = Callable[[dict[str, Any]], Awaitable[None]]


class Subscription(Protocol):
    """What a conversation view needs from a change feed."""

    def on(self, event: str, handler: RowHandler) -> None: ...
    async def connect(self, table: str, vendor_lead_id: str) -> None: ...
    async def disconnect(self) -> None: ...


class ChangeFeed:
    """One filtered subscription with an explicit connect/disconnect lifecycle.

    Handlers receive the row ``record``. After ``disconnect()`` returns no
    handler is invoked again, even for frames already in flight.
    """

    def __init__(
        self,
        url: str,
        token: str,
        *,
        connector: Callable[[str], Awaitable[Any]] = ws_connect,
    ) -> None:
        self._url = f"{url}?{urlencode({'token': token})}"
        self._connector = connector
        self._handlers: dict[str, list[RowHandler]] = {}
        self._ws: Any = None
        self._reader: asyncio.Task[None] | None = None
        self._filter: tuple[str, str] | None = None
        self._closed = False

    @property
    def is_connected(self) -> bool:
        return self._ws is not None and not self._closed

    def on(self, event: str, handler: RowHandler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    async def connect(self, table: str, vendor_lead_id: str) -> None:
        if self._ws is not None:
            raise RuntimeError("ChangeFeed is already connected")
        self._closed = False
        self._filter = (table, str(vendor_lead_id))
        self._ws = await self._connector(self._url)
        await self._ws.send(json.dumps({
            "type": "subscribe",
            "data": {"table": table, "vendor_lead_id": str(vendor_lead_id)},
        }))
        self._reader = asyncio.create_task(self._read_loop(), name=f"feed-{vendor_lead_id}")
        logger.debug("Feed subscribed to %s/%s", table, vendor_lead_id)

    async def disconnect(self) -> None:
        self._closed = True
        if self._reader is not None:
            self._reader.cancel()
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
            self._reader = None
        if self._ws is not None:
            try:
                await self._ws.close()
            finally:
                self._ws = None
        logger.debug("Feed disconnected")

    async def _read_loop(self) -> None:
        try:
            async for raw in self._ws:
                if self._closed:
                    return
                await self._handle_frame(raw)
        except ConnectionClosed:
            logger.info("Feed connection closed by server")

    async def _handle_frame(self, raw: str | bytes) -> None:
        try:
            frame = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring non-JSON feed frame")
            return

        kind = frame.get("type")
        data = frame.get("data") or {}
        if kind == "error":
            logger.warning("Feed error: %s", data)
            return
        if kind != "row_change":
            return

        if (data.get("table"), str(data.get("vendor_lead_id"))) != self._filter:
            return
        for handler in list(self._handlers.get(data.get("event", ""), ())):
            if self._closed:
                return
            try:
                await handler(data.get("record") or {})
            except Exception:
                logger.exception("Feed handler failed")
