from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter

from catering_chat.api.deps import CurrentPrincipal, RateLimitedPrincipal, UoWDep
from catering_chat.api.v1.schemas.common import Envelope
from catering_chat.api.v1.schemas.message import MessageWithSender, QuoteStatusResponse
from catering_chat.api.v1.schemas.quote import (
    CounterOfferRequest,
    CounterOfferResponse,
    CreateQuoteRequest,
    CreateQuoteResponse,
    QuoteResponse,
    UpdateQuoteStatusRequest,
)
from catering_chat.application.dto.quote import CounterOfferDTO, CreateQuoteDTO
from catering_chat.services import quote_service

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


def _money(value: float | None) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


@router.post("", response_model=Envelope[CreateQuoteResponse])
async def create_quote(
    body: CreateQuoteRequest,
    principal: RateLimitedPrincipal,
    uow: UoWDep,
) -> Envelope[CreateQuoteResponse]:
    dto = CreateQuoteDTO(
        vendor_lead_id=body.vendor_lead_id,
        total_price=_money(body.total_price),
        price_per_person=_money(body.price_per_person),
        message=body.message,
        valid_until=body.valid_until,
    )
    quote = await quote_service.create_quote(dto, principal, uow)
    return Envelope(data=CreateQuoteResponse(quote_id=quote.id))


@router.patch("/{quote_id}/status", response_model=Envelope[QuoteStatusResponse])
async def update_quote_status(
    quote_id: UUID,
    body: UpdateQuoteStatusRequest,
    principal: RateLimitedPrincipal,
    uow: UoWDep,
) -> Envelope[QuoteStatusResponse]:
    result = await quote_service.update_status(quote_id, body.status, principal, uow)
    return Envelope(
        data=QuoteStatusResponse(
            status=result.status,
            message=MessageWithSender.from_view(result.message),
        )
    )


@router.post("/{quote_id}/counter-offer", response_model=Envelope[CounterOfferResponse])
async def counter_offer(
    quote_id: UUID,
    body: CounterOfferRequest,
    principal: RateLimitedPrincipal,
    uow: UoWDep,
) -> Envelope[CounterOfferResponse]:
    dto = CounterOfferDTO(
        total_price=_money(body.total_price),
        price_per_person=_money(body.price_per_person),
        note=body.note,
    )
    offer = await quote_service.counter_offer(quote_id, dto, principal, uow)
    return Envelope(data=CounterOfferResponse(counter_offer_id=offer.id))


@router.get("/{quote_id}/history", response_model=Envelope[list[QuoteResponse]])
async def quote_history(
    quote_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> Envelope[list[QuoteResponse]]:
    chain = await quote_service.get_history(quote_id, principal, uow)
    return Envelope(data=[QuoteResponse.model_validate(q, from_attributes=True) for q in chain])
