from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field

from catering_chat.api.v1.schemas.common import CamelModel


class CreateQuoteRequest(CamelModel):
    vendor_lead_id: UUID = Field(alias="vendorLeadId")
    total_price: float = Field(alias="totalPrice")
    price_per_person: float | None = Field(None, alias="pricePerPerson")
    message: str | None = None
    valid_until: AwareDatetime | None = Field(None, alias="validUntil")


class UpdateQuoteStatusRequest(CamelModel):
    status: Literal["accepted", "rejected"]


class CounterOfferRequest(CamelModel):
    total_price: float = Field(alias="totalPrice")
    price_per_person: float | None = Field(None, alias="pricePerPerson")
    note: str | None = None


class EmbeddedQuoteResponse(BaseModel):
    id: UUID
    total_price: float
    price_per_person: float | None
    message: str | None
    status: str
    valid_until: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class QuoteResponse(EmbeddedQuoteResponse):
    vendor_lead_id: UUID
    sent_at: datetime | None
    accepted_at: datetime | None
    rejected_at: datetime | None
    parent_quote_id: UUID | None
    is_counter_offer: bool
    counter_offer_by: str | None
    counter_offer_note: str | None


class CreateQuoteResponse(CamelModel):
    quote_id: UUID = Field(alias="quoteId")


class CounterOfferResponse(CamelModel):
    counter_offer_id: UUID = Field(alias="counterOfferId")
    message: str = "Karşı teklif gönderildi"
