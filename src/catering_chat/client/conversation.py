"""Live conversation state for one vendor lead, customer or vendor side."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

import httpx
from websockets.exceptions import WebSocketException

from catering_chat.application.ports.clock import utc_now
from catering_chat.client.api import ApiResult, MarketplaceApi
from catering_chat.client.composer import validate_message
from catering_chat.client.feed import Subscription
from catering_chat.client.models import ThreadMessage
from catering_chat.domain.value_objects.enums import FeedTable, MessageType, RowEvent, SenderType

logger = logging.getLogger(__name__)

SEND_FAILED = "Mesaj gönderilemedi"
CONNECTION_ERROR = "Bağlantı hatası"
ACCEPT_FAILED = "Teklif kabul edilemedi"
REJECT_FAILED = "Teklif reddedilemedi"
QUOTE_FAILED = "Teklif gönderilemedi"
COUNTER_OFFER_FAILED = "Karşı teklif gönderilemedi"
LOAD_FAILED = "Mesajlar yüklenemedi"


class ConversationClient:
    """Keeps ``messages`` in sync with the server and the change feed.

    ``messages`` is replaced, never mutated in place, so a renderer can
    compare snapshots. All errors land in ``error`` and are never retried.
    """

    role: SenderType

    def __init__(
        self,
        vendor_lead_id: str,
        user_id: str,
        api: MarketplaceApi,
        feed: Subscription,
        *,
        counterpart_name: str | None = None,
        page_size: int = 50,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.vendor_lead_id = str(vendor_lead_id)
        self.user_id = str(user_id)
        self.counterpart_name = counterpart_name
        self._api = api
        self._feed = feed
        self._page_size = page_size
        self._clock = clock or utc_now

        self.messages: list[ThreadMessage] = []
        self.error: str | None = None
        self.is_sending = False
        self.unread_count = 0
        self.total_count = 0
        self._mounted = False
        self._listening = False
        self._background: set[asyncio.Task[Any]] = set()
        self._last_temp_ms = 0

    # lifecycle

    async def open(
        self,
        initial: list[ThreadMessage] | None = None,
        *,
        unread_count: int = 0,
    ) -> None:
        """Hydrate from ``initial`` (or the first page) and start listening.

        Messages that were already unread are marked read once hydrated.
        A feed that cannot connect leaves the thread usable with the
        connection banner set.
        """
        self._mounted = True
        if initial is not None:
            self.messages = list(initial)
            self.unread_count = unread_count
        else:
            await self.reload()
        if self.unread_count > 0:
            self._spawn(self._mark_read())

        if not self._listening:
            self._feed.on(RowEvent.INSERT.value, self._on_insert)
            self._feed.on(RowEvent.UPDATE.value, self._on_update)
            self._listening = True
        try:
            await self._feed.connect(FeedTable.MESSAGES.value, self.vendor_lead_id)
        except (OSError, WebSocketException):
            logger.warning("Feed connect failed for %s", self.vendor_lead_id, exc_info=True)
            self._fail(CONNECTION_ERROR)

    async def close(self) -> None:
        self._mounted = False
        await self._feed.disconnect()
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        self._background.clear()

    @property
    def is_open(self) -> bool:
        return self._mounted

    def dismiss_error(self) -> None:
        self.error = None

    async def reload(self) -> None:
        """Re-fetch the first page and replace local state."""
        try:
            result = await self._api.list_messages(self.vendor_lead_id, limit=self._page_size)
        except httpx.HTTPError:
            logger.warning("Reload failed for %s", self.vendor_lead_id, exc_info=True)
            self._fail(CONNECTION_ERROR)
            return
        if not self._mounted:
            return
        if not result.ok:
            self._fail(result.error_message or LOAD_FAILED)
            return
        data = result.data or {}
        self.messages = [ThreadMessage.from_json(m) for m in data.get("messages", [])]
        self.unread_count = int(data.get("unread_count", 0))
        self.total_count = int(data.get("total_count", len(self.messages)))

    # sending

    def _temp_id(self) -> str:
        ms = max(int(time.time() * 1000), self._last_temp_ms + 1)
        self._last_temp_ms = ms
        return f"temp-{ms}"

    async def send_message(self, content: str) -> bool:
        text, problem = validate_message(content)
        if problem is not None:
            self._fail(problem)
            return False

        self.error = None
        self.is_sending = True
        temp = ThreadMessage(
            id=self._temp_id(),
            sender_id=self.user_id,
            sender_type=self.role.value,
            content=text,
            message_type=MessageType.TEXT.value,
            is_read=False,
            created_at=self._clock(),
            is_own=True,
        )
        self.messages = [*self.messages, temp]

        try:
            result = await self._api.send_message(self.vendor_lead_id, text)
        except httpx.HTTPError:
            logger.warning("Send failed for %s", self.vendor_lead_id, exc_info=True)
            self._drop(temp.id)
            self._fail(CONNECTION_ERROR)
            return False
        finally:
            self.is_sending = False

        if not result.ok:
            self._drop(temp.id)
            self._fail(result.error_message or SEND_FAILED)
            return False

        if not self._mounted:
            return True
        server_id = str(result.data["message_id"])
        known = {m.id for m in self.messages}
        if server_id in known:
            # The feed delivered the row first.
            self._drop(temp.id)
        elif temp.id in known:
            self.messages = [
                replace(m, id=server_id) if m.id == temp.id else m
                for m in self.messages
            ]
        else:
            # A reload replaced the page while the request was in flight.
            self.messages = [*self.messages, replace(temp, id=server_id)]
        return True

    async def counter_offer(
        self,
        quote_id: str,
        total_price: float,
        *,
        price_per_person: float | None = None,
        note: str | None = None,
    ) -> bool:
        """Either side may answer an open quote with a new price."""
        self.error = None
        try:
            result = await self._api.counter_offer(
                quote_id, total_price, price_per_person=price_per_person, note=note,
            )
        except httpx.HTTPError:
            logger.warning("Counter-offer failed for quote %s", quote_id, exc_info=True)
            self._fail(CONNECTION_ERROR)
            return False
        if not result.ok:
            self._fail(result.error_message or COUNTER_OFFER_FAILED)
            return False
        await self.reload()
        return True

    # feed handlers

    async def _on_insert(self, record: dict[str, Any]) -> None:
        if not self._mounted:
            return
        msg_id = str(record.get("id"))
        known = any(m.id == msg_id for m in self.messages)

        if record.get("message_type") == MessageType.QUOTE.value:
            # Feed rows carry no quote body; only a refetch can render the card.
            if not known:
                await self.reload()
            return

        if str(record.get("sender_id")) == self.user_id or known:
            return

        incoming = ThreadMessage.from_record(
            record, sender_name=self.counterpart_name, own_user_id=self.user_id,
        )
        self.messages = [*self.messages, incoming]
        self._spawn(self._mark_read())

    async def _on_update(self, record: dict[str, Any]) -> None:
        if not self._mounted:
            return
        msg_id = str(record.get("id"))
        is_read = bool(record.get("is_read"))
        self.messages = [
            m.with_read(is_read) if m.id == msg_id else m for m in self.messages
        ]

    async def _mark_read(self) -> None:
        try:
            result = await self._api.mark_read(self.vendor_lead_id)
        except httpx.HTTPError:
            logger.warning("Mark-read failed for %s", self.vendor_lead_id, exc_info=True)
            return
        if not result.ok:
            logger.warning("Mark-read refused: %s", result.error_code)

    # helpers

    def _spawn(self, coro: Any) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    def _drop(self, message_id: str) -> None:
        self.messages = [m for m in self.messages if m.id != message_id]

    def _fail(self, message: str) -> None:
        if not self._mounted:
            return
        logger.info("Conversation %s error: %s", self.vendor_lead_id, message)
        self.error = message


class CustomerConversationClient(ConversationClient):
    role = SenderType.CUSTOMER

    async def accept_quote(self, quote_id: str) -> bool:
        return await self._decide(quote_id, "accepted", ACCEPT_FAILED)

    async def reject_quote(self, quote_id: str) -> bool:
        return await self._decide(quote_id, "rejected", REJECT_FAILED)

    async def _decide(self, quote_id: str, status: str, fallback: str) -> bool:
        self.error = None
        try:
            result = await self._api.update_quote_status(quote_id, status)
        except httpx.HTTPError:
            logger.warning("Quote %s update failed", quote_id, exc_info=True)
            self._fail(CONNECTION_ERROR)
            return False
        if not result.ok:
            self._fail(result.error_message or fallback)
            return False
        if not self._mounted:
            return True
        self._apply_decision(quote_id, result)
        return True

    def _apply_decision(self, quote_id: str, result: ApiResult) -> None:
        data = result.data or {}
        new_status = data.get("status", "")
        raw_message = data.get("message")
        if not raw_message:
            self._spawn(self.reload())
            return

        synthesized = ThreadMessage.from_json(raw_message)
        updated = [
            m.with_quote_status(new_status) if m.quote and m.quote.id == quote_id else m
            for m in self.messages
        ]
        if not any(m.id == synthesized.id for m in updated):
            updated.append(synthesized)
        self.messages = updated


class VendorConversationClient(ConversationClient):
    role = SenderType.VENDOR

    async def send_quote(
        self,
        total_price: float,
        *,
        price_per_person: float | None = None,
        message: str | None = None,
        valid_until: datetime | None = None,
    ) -> bool:
        self.error = None
        try:
            result = await self._api.create_quote(
                self.vendor_lead_id,
                total_price,
                price_per_person=price_per_person,
                message=message,
                valid_until=valid_until,
            )
        except httpx.HTTPError:
            logger.warning("Quote send failed for %s", self.vendor_lead_id, exc_info=True)
            self._fail(CONNECTION_ERROR)
            return False
        if not result.ok:
            self._fail(result.error_message or QUOTE_FAILED)
            return False
        await self.reload()
        return True
