from __future__ import annotations

import logging
import uuid
from datetime import timedelta

from catering_chat.application.dto.principal import Principal
from catering_chat.application.dto.quote import (
    CounterOfferDTO,
    CreateQuoteDTO,
    QuoteStatusResult,
)
from catering_chat.application.exceptions import (
    ForbiddenError,
    InvalidStatusError,
    NotFoundError,
    QuoteExpiredError,
    ValidationError,
)
from catering_chat.application.policies.permissions import resolve_role
from catering_chat.application.ports.clock import Clock, resolve_now
from catering_chat.application.uow import UnitOfWork
from catering_chat.config import settings
from catering_chat.domain.entities.quote import Quote
from catering_chat.domain.entities.vendor_lead import VendorLeadContext
from catering_chat.domain.events.row_change import quote_change
from catering_chat.domain.value_objects.enums import (
    MessageType,
    NotificationType,
    QuoteStatus,
    RowEvent,
    SenderType,
    VendorLeadStatus,
)
from catering_chat.domain.value_objects.quote_status import (
    ACTIONABLE_STATUSES,
    COUNTER_OFFERABLE_STATUSES,
    can_transition,
    is_expired,
)
from catering_chat.formatting import format_price
from catering_chat.services import feed_events
from catering_chat.services.message_service import (
    append_message,
    build_view,
    conversation_url,
)
from catering_chat.services.notification_service import notify

logger = logging.getLogger(__name__)

CUSTOMER_DECISIONS = frozenset({QuoteStatus.ACCEPTED, QuoteStatus.REJECTED})


def _validate_price(value) -> None:
    if value is None or value < 1:
        raise ValidationError("Geçerli bir fiyat giriniz")


async def _load_quote(
    quote_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
) -> tuple[Quote, VendorLeadContext, SenderType]:
    quote = await uow.quotes.get_by_id(quote_id)
    if quote is None:
        raise NotFoundError("Teklif bulunamadı")
    context = await uow.vendor_leads.get_context(quote.vendor_lead_id)
    role = resolve_role(
        principal,
        context,
        not_found="Teklif bulunamadı",
        forbidden="Bu teklife erişiminiz yok",
    )
    return quote, context, role


async def create_quote(
    dto: CreateQuoteDTO,
    principal: Principal,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> Quote:
    """Vendor sends a quote; a ``quote`` message is added to the thread."""
    _validate_price(dto.total_price)
    if dto.message and len(dto.message) > settings.QUOTE_MESSAGE_MAX_LENGTH:
        raise ValidationError(
            f"Mesaj en fazla {settings.QUOTE_MESSAGE_MAX_LENGTH} karakter olabilir"
        )

    context = await uow.vendor_leads.get_context(dto.vendor_lead_id)
    role = resolve_role(
        principal,
        context,
        not_found="Talep bulunamadı",
        forbidden="Bu talebe erişiminiz yok",
    )
    if role is not SenderType.VENDOR:
        raise ForbiddenError("Bu talebe erişiminiz yok")

    now = resolve_now(clock)
    quote = await uow.quotes_w.create(
        Quote(
            id=uuid.uuid4(),
            vendor_lead_id=dto.vendor_lead_id,
            total_price=dto.total_price,
            price_per_person=dto.price_per_person,
            message=dto.message or None,
            valid_until=dto.valid_until,
            status=QuoteStatus.SENT.value,
            created_at=now,
            sent_at=now,
        )
    )
    await feed_events.emit(uow, quote_change(quote, RowEvent.INSERT))

    price = format_price(quote.total_price)
    await append_message(
        uow,
        context,
        sender_id=principal.user_id,
        sender_type=SenderType.VENDOR,
        content=f"Yeni teklif gönderildi: {price}",
        message_type=MessageType.QUOTE,
        quote_id=quote.id,
        now=now,
    )
    await uow.vendor_leads_w.set_status(context.id, VendorLeadStatus.QUOTED.value)

    if context.customer_profile_id is not None:
        await notify(
            uow,
            user_id=context.customer_profile_id,
            type_=NotificationType.QUOTE_RECEIVED,
            title="Yeni Teklif Aldınız",
            message=f"{context.vendor_name} size {price} tutarında teklif gönderdi.",
            entity_type="quote",
            entity_id=quote.id,
            action_url=conversation_url(context.id, SenderType.CUSTOMER),
            now=now,
        )

    await uow.commit()
    logger.info("Quote %s sent for vendor lead %s", quote.id, context.id)
    return quote


async def update_status(
    quote_id: uuid.UUID,
    status: str,
    principal: Principal,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> QuoteStatusResult:
    """Customer accepts or rejects a quote.

    The synthesized conversation message is returned so the caller can
    render it without a refetch.
    """
    try:
        target = QuoteStatus(status)
    except ValueError:
        target = None
    if target not in CUSTOMER_DECISIONS:
        raise ValidationError("Geçersiz durum")

    quote, context, role = await _load_quote(quote_id, principal, uow)
    if role is not SenderType.CUSTOMER:
        raise ForbiddenError("Bu teklife erişiminiz yok")

    # Sequential double-clicks stop here; concurrent ones at the guarded update.
    if QuoteStatus(quote.status) not in ACTIONABLE_STATUSES or not can_transition(
        quote.status, target
    ):
        raise InvalidStatusError("Bu teklif artık güncellenemez")

    now = resolve_now(clock)
    if is_expired(quote.valid_until, now):
        raise QuoteExpiredError("Bu teklifin süresi dolmuş")

    updated = await uow.quotes_w.update_status(
        quote.id, target.value, at=now, from_statuses=ACTIONABLE_STATUSES,
    )
    if updated is None:
        raise InvalidStatusError("Bu teklif artık güncellenemez")
    await feed_events.emit(uow, quote_change(updated, RowEvent.UPDATE))

    price = format_price(updated.total_price)
    accepted = target is QuoteStatus.ACCEPTED
    msg = await append_message(
        uow,
        context,
        sender_id=principal.user_id,
        sender_type=SenderType.CUSTOMER,
        content=f"Teklif kabul edildi: {price}" if accepted else f"Teklif reddedildi: {price}",
        message_type=MessageType.QUOTE,
        quote_id=updated.id,
        now=now,
    )

    if accepted:
        await uow.vendor_leads_w.set_status(context.id, VendorLeadStatus.WON.value)

    await notify(
        uow,
        user_id=context.vendor_owner_id,
        type_=NotificationType.QUOTE_ACCEPTED if accepted else NotificationType.QUOTE_REJECTED,
        title="Teklifiniz Kabul Edildi! 🎉" if accepted else "Teklifiniz Reddedildi",
        message=(
            f"{context.customer_name} teklifinizi kabul etti."
            if accepted
            else f"{context.customer_name} teklifinizi reddetti."
        ),
        entity_type="quote",
        entity_id=updated.id,
        action_url=conversation_url(context.id, SenderType.VENDOR),
        now=now,
    )

    await uow.commit()
    logger.info("Quote %s %s by customer %s", updated.id, target, principal.user_id)

    return QuoteStatusResult(
        status=updated.status,
        message=build_view(msg, context, principal, updated),
    )


async def counter_offer(
    quote_id: uuid.UUID,
    dto: CounterOfferDTO,
    principal: Principal,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> Quote:
    _validate_price(dto.total_price)
    if dto.note and len(dto.note) > settings.COUNTER_OFFER_NOTE_MAX_LENGTH:
        raise ValidationError(
            f"Not en fazla {settings.COUNTER_OFFER_NOTE_MAX_LENGTH} karakter olabilir"
        )

    original, context, role = await _load_quote(quote_id, principal, uow)
    if QuoteStatus(original.status) not in COUNTER_OFFERABLE_STATUSES:
        raise InvalidStatusError("Bu teklif için karşı teklif verilemez")

    now = resolve_now(clock)
    if is_expired(original.valid_until, now):
        raise QuoteExpiredError("Bu teklifin süresi dolmuş")

    offer = await uow.quotes_w.create(
        Quote(
            id=uuid.uuid4(),
            vendor_lead_id=original.vendor_lead_id,
            total_price=dto.total_price,
            price_per_person=dto.price_per_person,
            message=dto.note or None,
            valid_until=now + timedelta(days=settings.COUNTER_OFFER_VALID_DAYS),
            status=QuoteStatus.SENT.value,
            created_at=now,
            sent_at=now,
            parent_quote_id=original.id,
            is_counter_offer=True,
            counter_offer_by=role.value,
            counter_offer_note=dto.note or None,
        )
    )
    await feed_events.emit(uow, quote_change(offer, RowEvent.INSERT))

    if original.status != QuoteStatus.COUNTER_OFFERED:
        superseded = await uow.quotes_w.update_status(
            original.id, QuoteStatus.COUNTER_OFFERED.value, from_statuses=(original.status,),
        )
        if superseded is None:
            raise InvalidStatusError("Bu teklif için karşı teklif verilemez")
        await feed_events.emit(uow, quote_change(superseded, RowEvent.UPDATE))

    price = format_price(offer.total_price)
    prefix = "Karşı teklif gönderildi" if role is SenderType.CUSTOMER else "Yeni teklif gönderildi"
    suffix = f" - {dto.note}" if dto.note else ""
    await append_message(
        uow,
        context,
        sender_id=principal.user_id,
        sender_type=role,
        content=f"{prefix}: {price}{suffix}",
        message_type=MessageType.QUOTE,
        quote_id=offer.id,
        now=now,
    )

    await uow.commit()
    logger.info("Counter offer %s on quote %s by %s", offer.id, original.id, role)
    return offer


async def get_history(
    quote_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
) -> list[Quote]:
    """The whole counter-offer chain containing ``quote_id``, oldest first."""
    quote, _context, _role = await _load_quote(quote_id, principal, uow)

    root = quote
    seen = {quote.id}
    while root.parent_quote_id is not None and root.parent_quote_id not in seen:
        parent = await uow.quotes.get_by_id(root.parent_quote_id)
        if parent is None:
            break
        seen.add(parent.id)
        root = parent

    chain: list[Quote] = [root]
    pending = [root.id]
    visited = {root.id}
    while pending:
        children = await uow.quotes.list_children(pending.pop(0))
        for child in children:
            if child.id in visited:
                continue
            visited.add(child.id)
            chain.append(child)
            pending.append(child.id)

    chain.sort(key=lambda q: q.created_at)
    return chain


async def expire_overdue(uow: UnitOfWork, clock: Clock | None = None) -> list[Quote]:
    """Flip actionable quotes past their deadline to ``expired``."""
    now = resolve_now(clock)
    expired = await uow.quotes_w.expire_overdue(now)
    for quote in expired:
        await feed_events.emit(uow, quote_change(quote, RowEvent.UPDATE))
    await uow.commit()
    if expired:
        logger.info("Expired %d overdue quotes", len(expired))
    return expired
