from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from catering_chat.api.v1.schemas.common import CamelModel
from catering_chat.api.v1.schemas.quote import EmbeddedQuoteResponse
from catering_chat.application.dto.message import MessageView


class SendMessageRequest(CamelModel):
    vendor_lead_id: UUID = Field(alias="vendorLeadId")
    content: str


class MarkReadRequest(CamelModel):
    vendor_lead_id: UUID = Field(alias="vendorLeadId")


class SendMessageResponse(BaseModel):
    message_id: UUID
    recipient_id: UUID | None
    sender_type: str
    vendor_lead_id: UUID

    model_config = {"from_attributes": True}


class MessageWithSender(BaseModel):
    id: UUID
    sender_id: UUID
    sender_type: str
    content: str
    message_type: str
    is_read: bool
    created_at: datetime
    sender_name: str | None
    is_own: bool
    quote: EmbeddedQuoteResponse | None = None

    @classmethod
    def from_view(cls, view: MessageView) -> MessageWithSender:
        return cls(
            id=view.id,
            sender_id=view.sender_id,
            sender_type=view.sender_type,
            content=view.content,
            message_type=view.message_type,
            is_read=view.is_read,
            created_at=view.created_at,
            sender_name=view.sender_name,
            is_own=view.is_own,
            quote=EmbeddedQuoteResponse.model_validate(view.quote, from_attributes=True)
            if view.quote
            else None,
        )


class MessagesPageResponse(BaseModel):
    messages: list[MessageWithSender]
    total_count: int
    unread_count: int
    has_more: bool


class MarkReadResponse(BaseModel):
    marked_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class QuoteStatusResponse(BaseModel):
    """Accept/reject outcome with the conversation message it produced."""

    status: str
    message: MessageWithSender
