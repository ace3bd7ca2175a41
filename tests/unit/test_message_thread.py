from datetime import timedelta

from catering_chat.client.models import QuoteSnapshot, ThreadMessage
from catering_chat.client.thread import (
    GLYPH_READ,
    GLYPH_SENT,
    Bubble,
    DaySeparator,
    EmptyState,
    MessageThread,
    QuoteBubble,
)
from catering_chat.domain.value_objects.enums import SenderType
from tests.conftest import NOW


def _msg(msg_id: str, *, at=NOW, own: bool = False, is_read: bool = False, **kw) -> ThreadMessage:
    return ThreadMessage(
        id=msg_id,
        sender_id="me" if own else "them",
        sender_type="customer" if own else "vendor",
        content=kw.pop("content", "Merhaba"),
        message_type=kw.pop("message_type", "text"),
        is_read=is_read,
        created_at=at,
        sender_name=None if own else "Lezzet Catering",
        is_own=own,
        **kw,
    )


def test_empty_state_differs_by_role():
    assert MessageThread(SenderType.CUSTOMER).render([], NOW) == EmptyState(
        "Henüz mesaj yok", "Firmaya mesaj gönderin",
    )
    assert MessageThread(SenderType.VENDOR).render([], NOW).hint == (
        "Müşterinize mesaj veya teklif gönderin"
    )


def test_groups_by_local_day():
    yesterday = NOW - timedelta(days=1)
    items = MessageThread(SenderType.CUSTOMER).render(
        [_msg("a", at=yesterday), _msg("b", at=yesterday + timedelta(minutes=5)), _msg("c")],
        NOW,
    )

    kinds = [type(item) for item in items]
    assert kinds == [DaySeparator, Bubble, Bubble, DaySeparator, Bubble]
    assert items[0].label == "18 Ekim"
    assert items[3].label == "19 Ekim"


def test_alignment_and_read_glyphs():
    items = MessageThread(SenderType.CUSTOMER).render(
        [
            _msg("theirs"),
            _msg("sent", own=True),
            _msg("read", own=True, is_read=True),
            _msg("temp-1", own=True),
        ],
        NOW,
    )
    theirs, sent, read, pending = items[1:]

    assert (theirs.align, theirs.read_glyph, theirs.sender_name) == ("left", None, "Lezzet Catering")
    assert (sent.align, sent.read_glyph, sent.sender_name) == ("right", GLYPH_SENT, None)
    assert read.read_glyph == GLYPH_READ
    assert pending.pending is True
    assert sent.pending is False


def test_quote_message_renders_card_when_body_present():
    quote = QuoteSnapshot(
        id="q1",
        total_price=12500.0,
        price_per_person=None,
        message=None,
        status="sent",
        valid_until=NOW + timedelta(days=7),
    )
    items = MessageThread(SenderType.CUSTOMER).render(
        [
            _msg("with", message_type="quote", quote=quote, content="Yeni teklif gönderildi: ₺12.500"),
            _msg("without", message_type="quote", content="Yeni teklif gönderildi: ₺9.000"),
        ],
        NOW,
    )
    with_card, without_card = items[1:]

    assert isinstance(with_card, QuoteBubble)
    assert with_card.card is not None and with_card.card.can_act is True
    assert isinstance(without_card, QuoteBubble)
    assert without_card.card is None


def test_should_scroll_only_on_append():
    a, b = _msg("a"), _msg("b")
    assert MessageThread.should_scroll([a], [a, b]) is True
    assert MessageThread.should_scroll([a, b], [a, b]) is False
    assert MessageThread.should_scroll([a, b], [a.with_read(True), b]) is False
    assert MessageThread.should_scroll([], [a]) is True
