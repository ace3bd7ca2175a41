from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class VendorLeadContext:
    """One vendor paired with one customer lead: the scope of a conversation."""

    id: UUID
    vendor_id: UUID
    lead_id: UUID
    status: str
    vendor_owner_id: UUID
    vendor_name: str
    vendor_logo_url: str | None
    customer_profile_id: UUID | None
    customer_name: str
    event_date: date | None
    last_message_at: datetime | None
