"""Change-feed WebSocket: filtered row changes per (table, vendor_lead_id)."""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError

from catering_chat.api.deps import get_verifier
from catering_chat.application.dto.principal import Principal
from catering_chat.application.exceptions import AppError
from catering_chat.config import settings
from catering_chat.infrastructure.db.session import AsyncSessionLocal
from catering_chat.infrastructure.db.uow import SqlAlchemyUoW
from catering_chat.infrastructure.ws.manager import ConnectionManager
from catering_chat.infrastructure.ws.protocol import SubscriptionFilter, WsInbound
from catering_chat.services import conversation_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["feed"])

manager = ConnectionManager()


def get_manager() -> ConnectionManager:
    return manager


async def _authenticate(token: str) -> Principal | None:
    try:
        return await get_verifier().verify(token)
    except Exception:
        logger.debug("WS auth failed", exc_info=True)
        return None


async def _authorize(principal: Principal, feed: SubscriptionFilter) -> str | None:
    """Return an error code when the caller is not part of the conversation."""
    async with AsyncSessionLocal() as session:
        try:
            await conversation_service.get_conversation(
                feed.vendor_lead_id, principal, SqlAlchemyUoW(session),
            )
        except AppError as exc:
            return exc.code
    return None


@router.websocket("/ws/feed")
async def ws_feed(
    websocket: WebSocket,
    token: str = Query(...),
) -> None:
    principal = await _authenticate(token)
    if principal is None:
        await websocket.close(code=4001, reason="Authentication failed")
        return

    pkey = principal.principal_key
    await manager.connect(websocket, pkey)

    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket), name=f"ws-heartbeat-{pkey}",
    )
    try:
        await _read_loop(websocket, principal)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", pkey)
    finally:
        heartbeat_task.cancel()
        manager.disconnect(websocket, pkey)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await manager.send(ws, "pong", {})
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("Heartbeat stopped", exc_info=True)


async def _read_loop(ws: WebSocket, principal: Principal) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except PydanticValidationError:
            await manager.send(ws, "error", {"code": "invalid_payload"})
            continue

        if msg.type == "ping":
            await manager.send(ws, "pong", {})
            continue

        if msg.type not in ("subscribe", "unsubscribe"):
            await manager.send(ws, "error", {"code": "unknown_type", "type": msg.type})
            continue

        try:
            feed = SubscriptionFilter.model_validate(msg.data)
        except PydanticValidationError:
            await manager.send(ws, "error", {"code": "invalid_filter"})
            continue

        filter_data = {"table": feed.table.value, "vendor_lead_id": str(feed.vendor_lead_id)}
        if msg.type == "unsubscribe":
            manager.unsubscribe(ws, feed.table.value, feed.vendor_lead_id)
            await manager.send(ws, "unsubscribed", filter_data)
            continue

        error_code = await _authorize(principal, feed)
        if error_code is not None:
            await manager.send(ws, "error", {"code": error_code, **filter_data})
            continue

        manager.subscribe(ws, feed.table.value, feed.vendor_lead_id)
        await manager.send(ws, "subscribed", filter_data)
