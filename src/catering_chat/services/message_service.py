from __future__ import annotations

import logging
import uuid
from datetime import datetime

from catering_chat.application.dto.message import (
    EmbeddedQuote,
    MessagePage,
    MessageView,
    SendMessageResult,
)
from catering_chat.application.dto.principal import Principal
from catering_chat.application.exceptions import ValidationError
from catering_chat.application.policies.permissions import (
    recipient_of,
    resolve_role,
    sender_name,
)
from catering_chat.application.ports.clock import Clock, resolve_now
from catering_chat.application.uow import UnitOfWork
from catering_chat.config import settings
from catering_chat.domain.entities.message import Message
from catering_chat.domain.entities.quote import Quote
from catering_chat.domain.entities.vendor_lead import VendorLeadContext
from catering_chat.domain.events.row_change import message_change
from catering_chat.domain.value_objects.enums import (
    MessageType,
    NotificationType,
    RowEvent,
    SenderType,
)
from catering_chat.services import feed_events
from catering_chat.services.notification_service import notify

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


def conversation_url(vendor_lead_id: uuid.UUID, audience: SenderType) -> str:
    """Deep link into the conversation for the given side."""
    if audience is SenderType.VENDOR:
        return f"/vendor/messages/{vendor_lead_id}"
    return f"/account/messages/{vendor_lead_id}"


def preview(content: str) -> str:
    if len(content) <= PREVIEW_LENGTH:
        return content
    return content[:PREVIEW_LENGTH] + "..."


def validate_content(content: str) -> str:
    text = content.strip()
    if not text:
        raise ValidationError("Mesaj boş olamaz")
    if len(text) > settings.MESSAGE_MAX_LENGTH:
        raise ValidationError(
            f"Mesaj çok uzun (max {settings.MESSAGE_MAX_LENGTH} karakter)"
        )
    return text


def build_view(
    message: Message,
    context: VendorLeadContext,
    principal: Principal,
    quote: Quote | None = None,
) -> MessageView:
    embedded = None
    if quote is not None:
        embedded = EmbeddedQuote(
            id=quote.id,
            total_price=quote.total_price,
            price_per_person=quote.price_per_person,
            message=quote.message,
            status=quote.status,
            valid_until=quote.valid_until,
            created_at=quote.created_at,
        )
    return MessageView(
        id=message.id,
        sender_id=message.sender_id,
        sender_type=message.sender_type,
        content=message.content,
        message_type=message.message_type,
        is_read=message.is_read,
        created_at=message.created_at,
        sender_name=sender_name(context, message.sender_type),
        is_own=message.sender_id == principal.user_id,
        quote=embedded,
    )


async def append_message(
    uow: UnitOfWork,
    context: VendorLeadContext,
    *,
    sender_id: uuid.UUID,
    sender_type: SenderType,
    content: str,
    now: datetime,
    message_type: MessageType = MessageType.TEXT,
    quote_id: uuid.UUID | None = None,
) -> Message:
    """Insert a message row, bump the conversation and queue the feed event."""
    msg = await uow.messages_w.create(
        Message(
            id=uuid.uuid4(),
            vendor_lead_id=context.id,
            sender_id=sender_id,
            sender_type=sender_type.value,
            content=content,
            message_type=message_type.value,
            quote_id=quote_id,
            is_read=False,
            created_at=now,
        )
    )
    await uow.vendor_leads_w.touch_last_message_at(context.id, msg.created_at)
    await feed_events.emit(uow, message_change(msg, RowEvent.INSERT))
    return msg


async def send_message(
    vendor_lead_id: uuid.UUID,
    principal: Principal,
    content: str,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> SendMessageResult:
    text = validate_content(content)
    context = await uow.vendor_leads.get_context(vendor_lead_id)
    role = resolve_role(
        principal,
        context,
        not_found="Talep bulunamadı",
        forbidden="Bu talebe erişiminiz yok",
    )
    now = resolve_now(clock)

    msg = await append_message(
        uow,
        context,
        sender_id=principal.user_id,
        sender_type=role,
        content=text,
        now=now,
    )

    recipient_id = recipient_of(context, role)
    if recipient_id is not None:
        await notify(
            uow,
            user_id=recipient_id,
            type_=NotificationType.MESSAGE_NEW,
            title="Yeni Mesaj Aldınız" if role is SenderType.VENDOR else "Yeni Müşteri Mesajı",
            message=preview(text),
            entity_type="vendor_lead",
            entity_id=vendor_lead_id,
            action_url=conversation_url(vendor_lead_id, role.counterpart),
            now=now,
        )

    await uow.commit()
    logger.info("Message %s sent by %s in %s", msg.id, role, vendor_lead_id)

    return SendMessageResult(
        message_id=msg.id,
        recipient_id=recipient_id,
        sender_type=role.value,
        vendor_lead_id=vendor_lead_id,
    )


async def list_messages(
    vendor_lead_id: uuid.UUID,
    principal: Principal,
    limit: int,
    offset: int,
    uow: UnitOfWork,
) -> MessagePage:
    context = await uow.vendor_leads.get_context(vendor_lead_id)
    role = resolve_role(principal, context)

    page = await uow.messages.list_page(vendor_lead_id, limit=limit, offset=offset)
    total = await uow.messages.count(vendor_lead_id)
    unread = await uow.messages.count_unread(vendor_lead_id, role.counterpart.value)
    quotes = await uow.quotes.get_many([m.quote_id for m in page if m.quote_id])

    views = [
        build_view(m, context, principal, quotes.get(m.quote_id) if m.quote_id else None)
        for m in page
    ]
    return MessagePage(
        messages=views,
        total_count=total,
        unread_count=unread,
        has_more=offset + len(page) < total,
    )


async def mark_read(
    vendor_lead_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
) -> int:
    """Mark everything the other side sent as read."""
    context = await uow.vendor_leads.get_context(vendor_lead_id)
    role = resolve_role(principal, context)

    updated = await uow.messages_w.mark_read(vendor_lead_id, role.counterpart.value)
    for msg in updated:
        await feed_events.emit(uow, message_change(msg, RowEvent.UPDATE))
    await uow.commit()
    return len(updated)


async def unread_count(principal: Principal, uow: UnitOfWork) -> int:
    return await uow.messages.count_unread_for_user(principal.user_id)
