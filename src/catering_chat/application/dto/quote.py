from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from catering_chat.application.dto.message import MessageView


@dataclass(frozen=True, slots=True)
class CreateQuoteDTO:
    vendor_lead_id: UUID
    total_price: Decimal
    price_per_person: Decimal | None = None
    message: str | None = None
    valid_until: datetime | None = None


@dataclass(frozen=True, slots=True)
class CounterOfferDTO:
    total_price: Decimal
    price_per_person: Decimal | None = None
    note: str | None = None


@dataclass(frozen=True, slots=True)
class QuoteStatusResult:
    """Outcome of accept/reject, carrying the synthesized conversation message."""

    status: str
    message: MessageView
