from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel


class LastMessageResponse(BaseModel):
    content: str
    sender_type: str
    created_at: datetime
    is_read: bool

    model_config = {"from_attributes": True}


class ConversationResponse(BaseModel):
    vendor_lead_id: UUID
    last_message_at: datetime | None
    vendor_id: UUID
    business_name: str
    logo_url: str | None
    lead_id: UUID
    customer_name: str
    event_date: date | None
    last_message: LastMessageResponse | None
    unread_count: int
    user_role: str

    model_config = {"from_attributes": True}


class ConversationsPageResponse(BaseModel):
    conversations: list[ConversationResponse]
    total_count: int
    has_more: bool

    model_config = {"from_attributes": True}
