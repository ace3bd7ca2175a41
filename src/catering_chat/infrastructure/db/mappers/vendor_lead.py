from __future__ import annotations

from catering_chat.domain.entities.vendor_lead import VendorLeadContext
from catering_chat.infrastructure.db.models.vendor_lead import VendorLeadModel


def model_to_context(model: VendorLeadModel) -> VendorLeadContext:
    """Flatten a vendor_leads row with its joined vendor and lead."""
    return VendorLeadContext(
        id=model.id,
        vendor_id=model.vendor_id,
        lead_id=model.lead_id,
        status=model.status,
        vendor_owner_id=model.vendor.owner_id,
        vendor_name=model.vendor.business_name,
        vendor_logo_url=model.vendor.logo_url,
        customer_profile_id=model.lead.customer_profile_id,
        customer_name=model.lead.customer_name,
        event_date=model.lead.event_date,
        last_message_at=model.last_message_at,
    )
