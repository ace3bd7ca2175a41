from __future__ import annotations

from typing import Protocol

from catering_chat.application.repositories.message import MessageReader, MessageWriter
from catering_chat.application.repositories.notification import (
    NotificationReader,
    NotificationWriter,
    PreferenceRepository,
)
from catering_chat.application.repositories.outbox import OutboxWriter
from catering_chat.application.repositories.quote import QuoteReader, QuoteWriter
from catering_chat.application.repositories.vendor_lead import (
    VendorLeadReader,
    VendorLeadWriter,
)


class UnitOfWork(Protocol):
    vendor_leads: VendorLeadReader
    vendor_leads_w: VendorLeadWriter
    messages: MessageReader
    messages_w: MessageWriter
    quotes: QuoteReader
    quotes_w: QuoteWriter
    notifications: NotificationReader
    notifications_w: NotificationWriter
    preferences: PreferenceRepository
    outbox: OutboxWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
