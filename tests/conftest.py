"""Shared test fixtures."""
from __future__ import annotations

import uuid
from collections.abc import Collection
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

import pytest

from catering_chat.application.dto.principal import Principal
from catering_chat.application.repositories.outbox import OutboxRecord
from catering_chat.domain.entities.message import Message
from catering_chat.domain.entities.notification import Notification, NotificationPreferences
from catering_chat.domain.entities.quote import Quote
from catering_chat.domain.entities.vendor_lead import VendorLeadContext
from catering_chat.domain.value_objects.enums import (
    MessageType,
    QuoteStatus,
    SenderType,
)
from catering_chat.domain.value_objects.quote_status import ACTIONABLE_STATUSES

VENDOR_USER_ID = uuid.UUID("11111111-1111-4111-8111-111111111111")
CUSTOMER_USER_ID = uuid.UUID("22222222-2222-4222-8222-222222222222")
STRANGER_USER_ID = uuid.UUID("33333333-3333-4333-8333-333333333333")

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime = NOW) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def vendor_principal() -> Principal:
    return Principal(user_id=VENDOR_USER_ID)


@pytest.fixture
def customer_principal() -> Principal:
    return Principal(user_id=CUSTOMER_USER_ID)


@pytest.fixture
def stranger_principal() -> Principal:
    return Principal(user_id=STRANGER_USER_ID)


def make_context(
    *,
    vendor_lead_id: UUID | None = None,
    vendor_owner_id: UUID = VENDOR_USER_ID,
    customer_profile_id: UUID | None = CUSTOMER_USER_ID,
    last_message_at: datetime | None = None,
) -> VendorLeadContext:
    return VendorLeadContext(
        id=vendor_lead_id or uuid.uuid4(),
        vendor_id=uuid.uuid4(),
        lead_id=uuid.uuid4(),
        status="new",
        vendor_owner_id=vendor_owner_id,
        vendor_name="Lezzet Catering",
        vendor_logo_url=None,
        customer_profile_id=customer_profile_id,
        customer_name="Ayşe Yılmaz",
        event_date=date(2026, 12, 1),
        last_message_at=last_message_at,
    )


def make_message(
    *,
    vendor_lead_id: UUID,
    sender_type: SenderType = SenderType.CUSTOMER,
    sender_id: UUID | None = None,
    content: str = "Merhaba",
    message_type: MessageType = MessageType.TEXT,
    quote_id: UUID | None = None,
    is_read: bool = False,
    created_at: datetime | None = None,
) -> Message:
    if sender_id is None:
        sender_id = VENDOR_USER_ID if sender_type is SenderType.VENDOR else CUSTOMER_USER_ID
    return Message(
        id=uuid.uuid4(),
        vendor_lead_id=vendor_lead_id,
        sender_id=sender_id,
        sender_type=sender_type.value,
        content=content,
        message_type=message_type.value,
        quote_id=quote_id,
        is_read=is_read,
        created_at=created_at or NOW,
    )


def make_quote(
    *,
    vendor_lead_id: UUID,
    status: QuoteStatus = QuoteStatus.SENT,
    total_price: Decimal = Decimal("12500"),
    valid_until: datetime | None = None,
    parent_quote_id: UUID | None = None,
    created_at: datetime | None = None,
) -> Quote:
    return Quote(
        id=uuid.uuid4(),
        vendor_lead_id=vendor_lead_id,
        total_price=total_price,
        price_per_person=Decimal("125"),
        message="Menü dahil",
        valid_until=valid_until if valid_until is not None else NOW + timedelta(days=7),
        status=status.value,
        created_at=created_at or NOW - timedelta(days=1),
        sent_at=NOW - timedelta(days=1),
        parent_quote_id=parent_quote_id,
        is_counter_offer=parent_quote_id is not None,
    )


@dataclass
class FakeVendorLeadReader:
    _store: dict[UUID, VendorLeadContext] = field(default_factory=dict)

    def add(self, context: VendorLeadContext) -> VendorLeadContext:
        self._store[context.id] = context
        return context

    async def get_context(self, vendor_lead_id: UUID) -> VendorLeadContext | None:
        return self._store.get(vendor_lead_id)

    async def list_for_user(
        self, user_id: UUID, *, limit: int = 20, offset: int = 0
    ) -> tuple[list[VendorLeadContext], int]:
        mine = [
            c for c in self._store.values()
            if c.last_message_at is not None
            and user_id in (c.vendor_owner_id, c.customer_profile_id)
        ]
        mine.sort(key=lambda c: c.last_message_at, reverse=True)
        return mine[offset:offset + limit], len(mine)


@dataclass
class FakeVendorLeadWriter:
    _reader: FakeVendorLeadReader

    async def set_status(self, vendor_lead_id: UUID, status: str) -> None:
        ctx = self._reader._store[vendor_lead_id]
        self._reader._store[vendor_lead_id] = replace(ctx, status=status)

    async def touch_last_message_at(self, vendor_lead_id: UUID, ts: datetime) -> None:
        ctx = self._reader._store[vendor_lead_id]
        self._reader._store[vendor_lead_id] = replace(ctx, last_message_at=ts)


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    def _for(self, vendor_lead_id: UUID) -> list[Message]:
        rows = [m for m in self._messages if m.vendor_lead_id == vendor_lead_id]
        return sorted(rows, key=lambda m: m.created_at)

    async def list_page(self, vendor_lead_id: UUID, *, limit: int = 50, offset: int = 0) -> list[Message]:
        newest_first = list(reversed(self._for(vendor_lead_id)))
        page = newest_first[offset:offset + limit]
        page.reverse()
        return page

    async def count(self, vendor_lead_id: UUID) -> int:
        return len(self._for(vendor_lead_id))

    async def count_unread(self, vendor_lead_id: UUID, sender_type: str) -> int:
        return sum(
            1 for m in self._for(vendor_lead_id)
            if m.sender_type == sender_type and not m.is_read
        )

    async def count_unread_for_user(self, user_id: UUID) -> int:
        # Only counts messages addressed to the user by sender id.
        return sum(1 for m in self._messages if not m.is_read and m.sender_id != user_id)

    async def get_last(self, vendor_lead_id: UUID) -> Message | None:
        rows = self._for(vendor_lead_id)
        return rows[-1] if rows else None


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    async def create(self, message: Message) -> Message:
        self._reader._messages.append(message)
        return message

    async def mark_read(self, vendor_lead_id: UUID, sender_type: str) -> list[Message]:
        updated: list[Message] = []
        rows: list[Message] = []
        for m in self._reader._messages:
            if m.vendor_lead_id == vendor_lead_id and m.sender_type == sender_type and not m.is_read:
                m = replace(m, is_read=True)
                updated.append(m)
            rows.append(m)
        self._reader._messages = rows
        return updated


@dataclass
class FakeQuoteReader:
    _store: dict[UUID, Quote] = field(default_factory=dict)

    def add(self, quote: Quote) -> Quote:
        self._store[quote.id] = quote
        return quote

    async def get_by_id(self, quote_id: UUID) -> Quote | None:
        return self._store.get(quote_id)

    async def get_many(self, quote_ids: list[UUID]) -> dict[UUID, Quote]:
        return {qid: self._store[qid] for qid in quote_ids if qid in self._store}

    async def list_children(self, parent_quote_id: UUID) -> list[Quote]:
        children = [q for q in self._store.values() if q.parent_quote_id == parent_quote_id]
        return sorted(children, key=lambda q: q.created_at)


@dataclass
class FakeQuoteWriter:
    _reader: FakeQuoteReader

    async def create(self, quote: Quote) -> Quote:
        self._reader._store[quote.id] = quote
        return quote

    async def update_status(
        self,
        quote_id: UUID,
        status: str,
        *,
        at: datetime | None = None,
        from_statuses: Collection[str] | None = None,
    ) -> Quote | None:
        quote = self._reader._store[quote_id]
        if from_statuses is not None and quote.status not in from_statuses:
            return None
        changes: dict[str, Any] = {"status": status}
        if at is not None and status == QuoteStatus.ACCEPTED:
            changes["accepted_at"] = at
        if at is not None and status == QuoteStatus.REJECTED:
            changes["rejected_at"] = at
        quote = replace(quote, **changes)
        self._reader._store[quote_id] = quote
        return quote

    async def expire_overdue(self, now: datetime) -> list[Quote]:
        expired = []
        for qid, q in list(self._reader._store.items()):
            if q.status in ACTIONABLE_STATUSES and q.valid_until is not None and q.valid_until < now:
                q = replace(q, status=QuoteStatus.EXPIRED.value)
                self._reader._store[qid] = q
                expired.append(q)
        return expired


@dataclass
class FakeNotificationReader:
    _items: list[Notification] = field(default_factory=list)

    async def list_for_user(
        self, user_id: UUID, *, limit: int = 20, offset: int = 0
    ) -> tuple[list[Notification], int]:
        mine = [n for n in self._items if n.user_id == user_id]
        mine.sort(key=lambda n: n.created_at, reverse=True)
        return mine[offset:offset + limit], len(mine)


@dataclass
class FakeNotificationWriter:
    _reader: FakeNotificationReader

    async def create(self, notification: Notification) -> Notification:
        self._reader._items.append(notification)
        return notification

    async def mark_read(self, user_id: UUID, ids: list[UUID] | None = None) -> int:
        count = 0
        items = []
        for n in self._reader._items:
            if n.user_id == user_id and not n.is_read and (ids is None or n.id in ids):
                n = replace(n, is_read=True)
                count += 1
            items.append(n)
        self._reader._items = items
        return count


@dataclass
class FakePreferenceRepo:
    _store: dict[UUID, dict[str, bool]] = field(default_factory=dict)

    async def get(self, user_id: UUID) -> NotificationPreferences:
        prefs = NotificationPreferences(user_id=user_id)
        if user_id in self._store:
            prefs = prefs.merged(self._store[user_id])
        return prefs

    async def save(self, preferences: NotificationPreferences) -> None:
        self._store[preferences.user_id] = dict(preferences.settings)


@dataclass
class FakeOutboxWriter:
    _records: list[dict[str, Any]] = field(default_factory=list)
    _pending: list[OutboxRecord] = field(default_factory=list)
    _sent: list[int] = field(default_factory=list)
    _failed: list[tuple[int, datetime]] = field(default_factory=list)

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._records.append({"event_type": event_type, "payload": payload})

    async def fetch_pending(self, batch_size: int) -> list[OutboxRecord]:
        batch, self._pending = self._pending[:batch_size], self._pending[batch_size:]
        return batch

    async def mark_sent(self, ids: list[int]) -> None:
        self._sent.extend(ids)

    async def mark_failed(self, record_id: int, next_retry_at: datetime) -> None:
        self._failed.append((record_id, next_retry_at))

    def changes(self, table: str | None = None) -> list[dict[str, Any]]:
        return [
            r["payload"] for r in self._records
            if r["event_type"] == "feed.row_change"
            and (table is None or r["payload"]["table"] == table)
        ]


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    vendor_leads: FakeVendorLeadReader = field(default_factory=FakeVendorLeadReader)
    vendor_leads_w: FakeVendorLeadWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    quotes: FakeQuoteReader = field(default_factory=FakeQuoteReader)
    quotes_w: FakeQuoteWriter | None = None
    notifications: FakeNotificationReader = field(default_factory=FakeNotificationReader)
    notifications_w: FakeNotificationWriter | None = None
    preferences: FakePreferenceRepo = field(default_factory=FakePreferenceRepo)
    outbox: FakeOutboxWriter = field(default_factory=FakeOutboxWriter)
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.vendor_leads_w is None:
            self.vendor_leads_w = FakeVendorLeadWriter(self.vendor_leads)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)
        if self.quotes_w is None:
            self.quotes_w = FakeQuoteWriter(self.quotes)
        if self.notifications_w is None:
            self.notifications_w = FakeNotificationWriter(self.notifications)

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()


@pytest.fixture
def conversation(uow: FakeUoW) -> VendorLeadContext:
    return uow.vendor_leads.add(make_context())
