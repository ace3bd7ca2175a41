from __future__ import annotations

import uuid

from catering_chat.application.dto.conversation import (
    ConversationItem,
    ConversationPage,
    LastMessagePreview,
)
from catering_chat.application.dto.principal import Principal
from catering_chat.application.policies.permissions import resolve_role
from catering_chat.application.uow import UnitOfWork
from catering_chat.domain.entities.vendor_lead import VendorLeadContext
from catering_chat.domain.value_objects.enums import SenderType


async def get_conversation(
    vendor_lead_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
) -> tuple[VendorLeadContext, SenderType]:
    """Load the conversation and the caller's side of it, or raise."""
    context = await uow.vendor_leads.get_context(vendor_lead_id)
    role = resolve_role(principal, context)
    return context, role  # type: ignore[return-value]


async def list_conversations(
    principal: Principal,
    limit: int,
    offset: int,
    uow: UnitOfWork,
) -> ConversationPage:
    contexts, total = await uow.vendor_leads.list_for_user(
        principal.user_id, limit=limit, offset=offset,
    )

    items: list[ConversationItem] = []
    for ctx in contexts:
        role = resolve_role(principal, ctx)
        last = await uow.messages.get_last(ctx.id)
        unread = await uow.messages.count_unread(ctx.id, role.counterpart.value)
        items.append(
            ConversationItem(
                vendor_lead_id=ctx.id,
                last_message_at=ctx.last_message_at,
                vendor_id=ctx.vendor_id,
                business_name=ctx.vendor_name,
                logo_url=ctx.vendor_logo_url,
                lead_id=ctx.lead_id,
                customer_name=ctx.customer_name,
                event_date=ctx.event_date,
                last_message=(
                    LastMessagePreview(
                        content=last.content,
                        sender_type=last.sender_type,
                        created_at=last.created_at,
                        is_read=last.is_read,
                    )
                    if last
                    else None
                ),
                unread_count=unread,
                user_role=role.value,
            )
        )

    return ConversationPage(
        conversations=items,
        total_count=total,
        has_more=offset + len(items) < total,
    )
