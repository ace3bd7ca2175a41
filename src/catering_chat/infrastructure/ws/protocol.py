"""Change-feed WebSocket envelope models."""
from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel

from catering_chat.domain.value_objects.enums import FeedTable


class WsInbound(BaseModel):
    """Client -> Server."""

    type: str  # subscribe | unsubscribe | ping
    data: dict[str, Any] = {}


class SubscriptionFilter(BaseModel):
    table: FeedTable
    vendor_lead_id: UUID


class WsOutbound(BaseModel):
    """Server -> Client."""

    type: str  # row_change | subscribed | unsubscribed | error | pong
    data: dict[str, Any] = {}
