from __future__ import annotations

from enum import StrEnum


class SenderType(StrEnum):
    VENDOR = "vendor"
    CUSTOMER = "customer"

    @property
    def counterpart(self) -> SenderType:
        return SenderType.CUSTOMER if self is SenderType.VENDOR else SenderType.VENDOR


class MessageType(StrEnum):
    TEXT = "text"
    QUOTE = "quote"


class QuoteStatus(StrEnum):
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    COUNTER_OFFERED = "counter_offered"


class VendorLeadStatus(StrEnum):
    NEW = "new"
    QUOTED = "quoted"
    WON = "won"
    LOST = "lost"


class NotificationType(StrEnum):
    LEAD_NEW = "lead_new"
    QUOTE_RECEIVED = "quote_received"
    QUOTE_ACCEPTED = "quote_accepted"
    QUOTE_REJECTED = "quote_rejected"
    MESSAGE_NEW = "message_new"
    REVIEW_NEW = "review_new"
    BOOKING_REMINDER = "booking_reminder"
    SYSTEM = "system"


class NotificationChannel(StrEnum):
    INAPP = "inapp"
    EMAIL = "email"


class FeedTable(StrEnum):
    MESSAGES = "vendor_lead_messages"
    QUOTES = "quotes"


class RowEvent(StrEnum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
