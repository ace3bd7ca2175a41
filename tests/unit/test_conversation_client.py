from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx
import pytest

from catering_chat.client.api import ApiResult
from catering_chat.client.conversation import (
    CustomerConversationClient,
    VendorConversationClient,
)

VENDOR_LEAD = "8f7d1c7e-1111-4c1d-9a55-000000000001"
CUSTOMER = "22222222-2222-4222-8222-222222222222"
VENDOR = "11111111-1111-4111-8111-111111111111"
QUOTE_ID = "9a9a9a9a-0000-4000-8000-000000000009"


def api_message(
    msg_id: str,
    *,
    sender_id: str = VENDOR,
    sender_type: str = "vendor",
    content: str = "Merhaba",
    message_type: str = "text",
    is_read: bool = False,
    quote: dict | None = None,
    is_own: bool = False,
) -> dict[str, Any]:
    return {
        "id": msg_id,
        "sender_id": sender_id,
        "sender_type": sender_type,
        "content": content,
        "message_type": message_type,
        "is_read": is_read,
        "created_at": "2026-10-19T12:00:00+00:00",
        "sender_name": "Lezzet Catering",
        "is_own": is_own,
        "quote": quote,
    }


def quote_json(status: str = "sent", valid_until: str = "2026-10-26T12:00:00+00:00") -> dict[str, Any]:
    return {
        "id": QUOTE_ID,
        "total_price": 12500.0,
        "price_per_person": 125.0,
        "message": "Menü dahil",
        "status": status,
        "valid_until": valid_until,
        "created_at": "2026-10-18T12:00:00+00:00",
    }


def feed_row(msg_id: str, **overrides: Any) -> dict[str, Any]:
    row = {
        "id": msg_id,
        "vendor_lead_id": VENDOR_LEAD,
        "sender_id": VENDOR,
        "sender_type": "vendor",
        "content": "Yeni mesaj",
        "message_type": "text",
        "quote_id": None,
        "is_read": False,
        "created_at": "2026-10-19T12:05:00+00:00",
    }
    row.update(overrides)
    return row


@dataclass
class FakeApi:
    pages: list[list[dict[str, Any]]] = field(default_factory=list)
    send_result: ApiResult | Exception = field(default_factory=lambda: ApiResult(ok=True, data={"message_id": "srv-1"}))
    status_result: ApiResult | Exception = field(default_factory=lambda: ApiResult(ok=True, data={}))
    quote_result: ApiResult = field(default_factory=lambda: ApiResult(ok=True, data={"quoteId": QUOTE_ID}))
    counter_result: ApiResult = field(default_factory=lambda: ApiResult(ok=True, data={"counterOfferId": "co-1"}))
    unread: int = 0
    calls: list[tuple] = field(default_factory=list)

    async def list_messages(self, vendor_lead_id: str, *, limit: int = 50, offset: int = 0) -> ApiResult:
        self.calls.append(("list", vendor_lead_id))
        page = self.pages.pop(0) if self.pages else []
        return ApiResult(ok=True, data={"messages": page, "total_count": len(page), "unread_count": self.unread})

    async def send_message(self, vendor_lead_id: str, content: str) -> ApiResult:
        self.calls.append(("send", content))
        if isinstance(self.send_result, Exception):
            raise self.send_result
        return self.send_result

    async def mark_read(self, vendor_lead_id: str) -> ApiResult:
        self.calls.append(("mark_read", vendor_lead_id))
        return ApiResult(ok=True, data={"marked_count": 1})

    async def update_quote_status(self, quote_id: str, status: str) -> ApiResult:
        self.calls.append(("status", quote_id, status))
        if isinstance(self.status_result, Exception):
            raise self.status_result
        return self.status_result

    async def create_quote(self, vendor_lead_id: str, total_price: float, **kwargs: Any) -> ApiResult:
        self.calls.append(("quote", total_price))
        return self.quote_result

    async def counter_offer(self, quote_id: str, total_price: float, **kwargs: Any) -> ApiResult:
        self.calls.append(("counter", quote_id, total_price, kwargs.get("note")))
        return self.counter_result


@dataclass
class FakeFeed:
    handlers: dict[str, list] = field(default_factory=dict)
    connected: tuple[str, str] | None = None
    disconnected: bool = False
    fail_with: Exception | None = None

    def on(self, event: str, handler) -> None:
        self.handlers.setdefault(event, []).append(handler)

    async def connect(self, table: str, vendor_lead_id: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.connected = (table, vendor_lead_id)

    async def disconnect(self) -> None:
        self.disconnected = True

    async def emit(self, event: str, record: dict[str, Any]) -> None:
        for handler in self.handlers.get(event, []):
            await handler(record)


def _fixed_now() -> datetime:
    return datetime(2026, 10, 19, 12, 1, tzinfo=timezone.utc)


async def _customer(api: FakeApi, feed: FakeFeed) -> CustomerConversationClient:
    client = CustomerConversationClient(
        VENDOR_LEAD, CUSTOMER, api, feed, counterpart_name="Lezzet Catering", clock=_fixed_now,
    )
    await client.open()
    return client


@pytest.mark.asyncio
async def test_open_hydrates_and_subscribes():
    api = FakeApi(pages=[[api_message("m1")]])
    feed = FakeFeed()

    client = await _customer(api, feed)

    assert [m.id for m in client.messages] == ["m1"]
    assert feed.connected == ("vendor_lead_messages", VENDOR_LEAD)
    assert client.is_open


@pytest.mark.asyncio
async def test_optimistic_send_swaps_temp_id():
    api = FakeApi(send_result=ApiResult(ok=True, data={"message_id": "srv-42"}))
    client = await _customer(api, FakeFeed())

    ok = await client.send_message("  Merhaba  ")

    assert ok is True
    assert len(client.messages) == 1
    msg = client.messages[0]
    assert msg.id == "srv-42"
    assert msg.content == "Merhaba"
    assert msg.is_own is True
    assert msg.sender_type == "customer"
    assert ("send", "Merhaba") in api.calls
    assert client.error is None


@pytest.mark.asyncio
async def test_failed_send_removes_optimistic_entry():
    api = FakeApi(send_result=ApiResult(ok=False, error_code="FORBIDDEN", error_message="Bu talebe erişiminiz yok"))
    client = await _customer(api, FakeFeed())

    ok = await client.send_message("Merhaba")

    assert ok is False
    assert client.messages == []
    assert client.error == "Bu talebe erişiminiz yok"


@pytest.mark.asyncio
async def test_failed_send_without_message_uses_default_banner():
    api = FakeApi(send_result=ApiResult(ok=False, error_code="SERVER_ERROR"))
    client = await _customer(api, FakeFeed())

    await client.send_message("Merhaba")

    assert client.error == "Mesaj gönderilemedi"


@pytest.mark.asyncio
async def test_transport_error_sets_connection_banner():
    api = FakeApi(send_result=httpx.ConnectError("boom"))
    client = await _customer(api, FakeFeed())

    await client.send_message("Merhaba")

    assert client.messages == []
    assert client.error == "Bağlantı hatası"
    client.dismiss_error()
    assert client.error is None


@pytest.mark.asyncio
async def test_empty_message_is_not_sent():
    api = FakeApi()
    client = await _customer(api, FakeFeed())

    assert await client.send_message("   ") is False
    assert not any(c[0] == "send" for c in api.calls)


@pytest.mark.asyncio
async def test_duplicate_feed_inserts_append_once_and_mark_read():
    api = FakeApi()
    feed = FakeFeed()
    client = await _customer(api, feed)

    await feed.emit("INSERT", feed_row("m2"))
    await feed.emit("INSERT", feed_row("m2"))
    await asyncio.sleep(0)

    assert [m.id for m in client.messages] == ["m2"]
    assert client.messages[0].sender_name == "Lezzet Catering"
    assert client.messages[0].is_own is False
    assert api.calls.count(("mark_read", VENDOR_LEAD)) == 1


@pytest.mark.asyncio
async def test_own_insert_is_ignored():
    api = FakeApi()
    feed = FakeFeed()
    client = await _customer(api, feed)

    await feed.emit("INSERT", feed_row("m3", sender_id=CUSTOMER, sender_type="customer"))

    assert client.messages == []


@pytest.mark.asyncio
async def test_temp_entry_dropped_when_server_id_already_present():
    api = FakeApi(send_result=ApiResult(ok=True, data={"message_id": "srv-7"}))
    feed = FakeFeed()
    client = await _customer(api, feed)

    original_send = api.send_message

    async def send_and_echo(vendor_lead_id: str, content: str) -> ApiResult:
        await feed.emit("INSERT", feed_row("srv-7", sender_id=VENDOR))
        return await original_send(vendor_lead_id, content)

    api.send_message = send_and_echo  # type: ignore[method-assign]
    await client.send_message("Merhaba")

    assert [m.id for m in client.messages] == ["srv-7"]
    await client.close()


@pytest.mark.asyncio
async def test_quote_insert_triggers_refresh():
    api = FakeApi(pages=[[], [api_message("q1", message_type="quote", quote=quote_json())]])
    feed = FakeFeed()
    client = await _customer(api, feed)

    await feed.emit("INSERT", feed_row("q1", message_type="quote", quote_id=QUOTE_ID))

    assert api.calls.count(("list", VENDOR_LEAD)) == 2
    assert client.messages[0].quote is not None
    assert client.messages[0].quote.total_price == 12500.0


@pytest.mark.asyncio
async def test_update_patches_only_is_read():
    api = FakeApi(pages=[[
        api_message("x", sender_id=CUSTOMER, sender_type="customer", is_own=True),
        api_message("y", sender_id=CUSTOMER, sender_type="customer", is_own=True),
    ]])
    feed = FakeFeed()
    client = await _customer(api, feed)
    before_y = client.messages[1]

    await feed.emit("UPDATE", {"id": "x", "is_read": True, "content": "tampered"})

    assert client.messages[0].is_read is True
    assert client.messages[0].content == "Merhaba"
    assert client.messages[1] == before_y


@pytest.mark.asyncio
async def test_no_updates_after_close():
    api = FakeApi()
    feed = FakeFeed()
    client = await _customer(api, feed)

    await client.close()
    await feed.emit("INSERT", feed_row("late"))
    await feed.emit("UPDATE", {"id": "late", "is_read": True})

    assert feed.disconnected is True
    assert client.messages == []
    assert not client.is_open


@pytest.mark.asyncio
async def test_accept_applies_inline_message():
    api = FakeApi(pages=[[api_message("q1", message_type="quote", quote=quote_json())]])
    api.status_result = ApiResult(ok=True, data={
        "status": "accepted",
        "message": api_message(
            "s1",
            sender_id=CUSTOMER,
            sender_type="customer",
            content="Teklif kabul edildi: ₺12.500",
            message_type="quote",
            quote=quote_json("accepted"),
            is_own=True,
        ),
    })
    feed = FakeFeed()
    client = await _customer(api, feed)

    assert await client.accept_quote(QUOTE_ID) is True

    assert [m.id for m in client.messages] == ["q1", "s1"]
    assert client.messages[0].quote.status == "accepted"
    assert api.calls.count(("list", VENDOR_LEAD)) == 1

    # The echo of our own synthesized row must not trigger another refetch.
    await feed.emit("INSERT", feed_row("s1", sender_id=CUSTOMER, message_type="quote", quote_id=QUOTE_ID))
    assert api.calls.count(("list", VENDOR_LEAD)) == 1


@pytest.mark.asyncio
async def test_accept_without_inline_message_falls_back_to_refresh():
    api = FakeApi(pages=[[], [api_message("q1", message_type="quote", quote=quote_json("accepted"))]])
    api.status_result = ApiResult(ok=True, data={"status": "accepted"})
    client = await _customer(api, FakeFeed())

    await client.accept_quote(QUOTE_ID)
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert api.calls.count(("list", VENDOR_LEAD)) == 2
    assert client.messages[0].quote.status == "accepted"


@pytest.mark.asyncio
async def test_reject_failure_sets_banner():
    api = FakeApi(status_result=ApiResult(ok=False, error_code="INVALID_STATUS"))
    client = await _customer(api, FakeFeed())

    assert await client.reject_quote(QUOTE_ID) is False
    assert client.error == "Teklif reddedilemedi"


@pytest.mark.asyncio
async def test_vendor_send_quote_refreshes():
    api = FakeApi(pages=[[], [api_message("q9", message_type="quote", quote=quote_json(), is_own=True)]])
    client = VendorConversationClient(VENDOR_LEAD, VENDOR, api, FakeFeed())
    await client.open()

    assert await client.send_quote(12500) is True
    assert [m.id for m in client.messages] == ["q9"]
    assert ("quote", 12500) in api.calls


@pytest.mark.asyncio
async def test_send_survives_reload_while_in_flight():
    api = FakeApi(
        pages=[
            [api_message("m1")],
            [api_message("m1"), api_message("q1", message_type="quote", quote=quote_json())],
        ],
        send_result=ApiResult(ok=True, data={"message_id": "srv-9"}),
    )
    feed = FakeFeed()
    client = await _customer(api, feed)

    release = asyncio.Event()
    original_send = api.send_message

    async def gated_send(vendor_lead_id: str, content: str) -> ApiResult:
        await release.wait()
        return await original_send(vendor_lead_id, content)

    api.send_message = gated_send  # type: ignore[method-assign]
    sending = asyncio.create_task(client.send_message("Merhaba"))
    await asyncio.sleep(0)
    assert client.messages[-1].id.startswith("temp-")

    await feed.emit("INSERT", feed_row("q1", message_type="quote", quote_id=QUOTE_ID))
    assert [m.id for m in client.messages] == ["m1", "q1"]

    release.set()
    assert await sending is True

    assert [m.id for m in client.messages] == ["m1", "q1", "srv-9"]
    assert client.messages[-1].content == "Merhaba"
    assert client.messages[-1].is_own is True


@pytest.mark.asyncio
async def test_feed_connect_failure_sets_banner():
    api = FakeApi(pages=[[api_message("m1")], [api_message("m1")]])
    feed = FakeFeed(fail_with=OSError("connection refused"))

    client = await _customer(api, feed)

    assert client.error == "Bağlantı hatası"
    assert [m.id for m in client.messages] == ["m1"]
    assert feed.connected is None

    feed.fail_with = None
    client.dismiss_error()
    await client.open()

    assert feed.connected == ("vendor_lead_messages", VENDOR_LEAD)
    assert len(feed.handlers["INSERT"]) == 1
    assert len(feed.handlers["UPDATE"]) == 1

    await feed.emit("INSERT", feed_row("m2"))
    assert [m.id for m in client.messages] == ["m1", "m2"]
    await client.close()


@pytest.mark.asyncio
async def test_open_marks_existing_unread_messages_read():
    api = FakeApi(pages=[[api_message("m1")]], unread=2)

    client = await _customer(api, FakeFeed())
    await asyncio.sleep(0)

    assert client.unread_count == 2
    assert api.calls.count(("mark_read", VENDOR_LEAD)) == 1
    await client.close()


@pytest.mark.asyncio
async def test_open_with_nothing_unread_does_not_mark_read():
    api = FakeApi(pages=[[api_message("m1", is_read=True)]])

    await _customer(api, FakeFeed())
    await asyncio.sleep(0)

    assert not any(c[0] == "mark_read" for c in api.calls)


@pytest.mark.asyncio
async def test_counter_offer_refreshes_thread():
    api = FakeApi(pages=[
        [api_message("q1", message_type="quote", quote=quote_json())],
        [
            api_message("q1", message_type="quote", quote=quote_json("counter_offered")),
            api_message("q2", sender_id=CUSTOMER, sender_type="customer", message_type="quote",
                        quote=quote_json(), is_own=True),
        ],
    ])
    client = await _customer(api, FakeFeed())

    assert await client.counter_offer(QUOTE_ID, 11000, note="Biraz indirim") is True

    assert ("counter", QUOTE_ID, 11000, "Biraz indirim") in api.calls
    assert [m.id for m in client.messages] == ["q1", "q2"]
    assert client.messages[0].quote.status == "counter_offered"


@pytest.mark.asyncio
async def test_counter_offer_failure_sets_banner():
    api = FakeApi(counter_result=ApiResult(ok=False, error_code="INVALID_STATUS"))
    client = await _customer(api, FakeFeed())

    assert await client.counter_offer(QUOTE_ID, 11000) is False
    assert client.error == "Karşı teklif gönderilemedi"
    assert api.calls.count(("list", VENDOR_LEAD)) == 1
