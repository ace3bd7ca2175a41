from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    vendor_lead_id: UUID
    sender_id: UUID
    sender_type: str
    content: str
    message_type: str
    quote_id: UUID | None
    is_read: bool
    created_at: datetime
