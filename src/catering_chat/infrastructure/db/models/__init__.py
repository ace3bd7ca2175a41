"""Importing this package registers every table on Base.metadata."""
from catering_chat.infrastructure.db.models.message import MessageModel
from catering_chat.infrastructure.db.models.notification import (
    NotificationModel,
    NotificationPreferenceModel,
)
from catering_chat.infrastructure.db.models.outbox import OutboxEventModel
from catering_chat.infrastructure.db.models.quote import QuoteModel
from catering_chat.infrastructure.db.models.vendor_lead import (
    LeadModel,
    VendorLeadModel,
    VendorModel,
)

__all__ = [
    "LeadModel",
    "MessageModel",
    "NotificationModel",
    "NotificationPreferenceModel",
    "OutboxEventModel",
    "QuoteModel",
    "VendorLeadModel",
    "VendorModel",
]
