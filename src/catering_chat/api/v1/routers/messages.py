from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query

from catering_chat.api.deps import CurrentPrincipal, RateLimitedPrincipal, UoWDep
from catering_chat.api.v1.schemas.common import Envelope
from catering_chat.api.v1.schemas.conversation import ConversationsPageResponse
from catering_chat.api.v1.schemas.message import (
    MarkReadRequest,
    MarkReadResponse,
    MessagesPageResponse,
    MessageWithSender,
    SendMessageRequest,
    SendMessageResponse,
    UnreadCountResponse,
)
from catering_chat.services import conversation_service, message_service

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("", response_model=Envelope[SendMessageResponse])
async def send_message(
    body: SendMessageRequest,
    principal: RateLimitedPrincipal,
    uow: UoWDep,
) -> Envelope[SendMessageResponse]:
    result = await message_service.send_message(
        body.vendor_lead_id, principal, body.content, uow,
    )
    return Envelope(data=SendMessageResponse.model_validate(result, from_attributes=True))


@router.get("", response_model=Envelope[MessagesPageResponse])
async def list_messages(
    principal: CurrentPrincipal,
    uow: UoWDep,
    vendor_lead_id: UUID = Query(..., alias="vendorLeadId"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> Envelope[MessagesPageResponse]:
    page = await message_service.list_messages(
        vendor_lead_id, principal, limit, offset, uow,
    )
    return Envelope(
        data=MessagesPageResponse(
            messages=[MessageWithSender.from_view(m) for m in page.messages],
            total_count=page.total_count,
            unread_count=page.unread_count,
            has_more=page.has_more,
        )
    )


@router.post("/read", response_model=Envelope[MarkReadResponse])
async def mark_read(
    body: MarkReadRequest,
    principal: RateLimitedPrincipal,
    uow: UoWDep,
) -> Envelope[MarkReadResponse]:
    marked = await message_service.mark_read(body.vendor_lead_id, principal, uow)
    return Envelope(data=MarkReadResponse(marked_count=marked))


@router.get("/unread", response_model=Envelope[UnreadCountResponse])
async def unread_count(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> Envelope[UnreadCountResponse]:
    count = await message_service.unread_count(principal, uow)
    return Envelope(data=UnreadCountResponse(unread_count=count))


@router.get("/conversations", response_model=Envelope[ConversationsPageResponse])
async def list_conversations(
    principal: CurrentPrincipal,
    uow: UoWDep,
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
) -> Envelope[ConversationsPageResponse]:
    page = await conversation_service.list_conversations(principal, limit, offset, uow)
    return Envelope(data=ConversationsPageResponse.model_validate(page, from_attributes=True))
