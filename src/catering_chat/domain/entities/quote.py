from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Quote:
    id: UUID
    vendor_lead_id: UUID
    total_price: Decimal
    price_per_person: Decimal | None
    message: str | None
    valid_until: datetime | None
    status: str
    created_at: datetime
    sent_at: datetime | None = None
    accepted_at: datetime | None = None
    rejected_at: datetime | None = None
    parent_quote_id: UUID | None = None
    is_counter_offer: bool = False
    counter_offer_by: str | None = None
    counter_offer_note: str | None = None
