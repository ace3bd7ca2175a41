from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True, slots=True)
class EmbeddedQuote:
    id: UUID
    total_price: Decimal
    price_per_person: Decimal | None
    message: str | None
    status: str
    valid_until: datetime | None
    created_at: datetime


@dataclass(frozen=True, slots=True)
class MessageView:
    """A message as seen by one participant, with the quote join resolved."""

    id: UUID
    sender_id: UUID
    sender_type: str
    content: str
    message_type: str
    is_read: bool
    created_at: datetime
    sender_name: str | None
    is_own: bool
    quote: EmbeddedQuote | None


@dataclass(frozen=True, slots=True)
class MessagePage:
    messages: list[MessageView]
    total_count: int
    unread_count: int
    has_more: bool


@dataclass(frozen=True, slots=True)
class SendMessageResult:
    message_id: UUID
    recipient_id: UUID | None
    sender_type: str
    vendor_lead_id: UUID
