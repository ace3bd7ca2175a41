from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: UUID
    type: str
    title: str
    message: str | None
    entity_type: str | None
    entity_id: UUID | None
    action_url: str | None
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationsPageResponse(BaseModel):
    notifications: list[NotificationResponse]
    total_count: int
    has_more: bool


class MarkNotificationsReadRequest(BaseModel):
    ids: list[UUID] | None = None


class MarkNotificationsReadResponse(BaseModel):
    marked_count: int
