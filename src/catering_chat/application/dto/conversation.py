from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class LastMessagePreview:
    content: str
    sender_type: str
    created_at: datetime
    is_read: bool


@dataclass(frozen=True, slots=True)
class ConversationItem:
    vendor_lead_id: UUID
    last_message_at: datetime | None
    vendor_id: UUID
    business_name: str
    logo_url: str | None
    lead_id: UUID
    customer_name: str
    event_date: date | None
    last_message: LastMessagePreview | None
    unread_count: int
    user_role: str


@dataclass(frozen=True, slots=True)
class ConversationPage:
    conversations: list[ConversationItem]
    total_count: int
    has_more: bool
