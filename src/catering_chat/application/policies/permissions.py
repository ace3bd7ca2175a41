from __future__ import annotations

from uuid import UUID

from catering_chat.application.dto.principal import Principal
from catering_chat.application.exceptions import ForbiddenError, NotFoundError
from catering_chat.domain.entities.vendor_lead import VendorLeadContext
from catering_chat.domain.value_objects.enums import SenderType


def resolve_role(
    principal: Principal,
    context: VendorLeadContext | None,
    *,
    not_found: str = "Görüşme bulunamadı",
    forbidden: str = "Bu görüşmeye erişiminiz yok",
) -> SenderType:
    """Return the caller's side of the conversation or raise."""
    if context is None:
        raise NotFoundError(not_found)

    if context.vendor_owner_id == principal.user_id:
        return SenderType.VENDOR
    if context.customer_profile_id == principal.user_id:
        return SenderType.CUSTOMER

    raise ForbiddenError(forbidden)


def recipient_of(context: VendorLeadContext, sender: SenderType) -> UUID | None:
    """User id on the other side of the conversation (customer may be a guest)."""
    if sender is SenderType.VENDOR:
        return context.customer_profile_id
    return context.vendor_owner_id


def sender_name(context: VendorLeadContext, sender_type: str) -> str:
    if sender_type == SenderType.VENDOR:
        return context.vendor_name
    return context.customer_name
