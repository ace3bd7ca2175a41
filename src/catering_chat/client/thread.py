"""Pure presentation of a conversation: day groups, bubbles and quote cards."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from catering_chat.client.models import ThreadMessage
from catering_chat.client.quote_card import QuoteCardView
from catering_chat.domain.value_objects.enums import MessageType, SenderType
from catering_chat.formatting import format_day_separator, format_message_time, to_local

GLYPH_SENT = "✓"
GLYPH_READ = "✓✓"


@dataclass(frozen=True, slots=True)
class DaySeparator:
    label: str


@dataclass(frozen=True, slots=True)
class Bubble:
    message_id: str
    align: str  # right | left
    sender_name: str | None
    content: str
    time_label: str
    read_glyph: str | None
    pending: bool


@dataclass(frozen=True, slots=True)
class QuoteBubble:
    message_id: str
    align: str
    content: str
    time_label: str
    card: QuoteCardView | None


@dataclass(frozen=True, slots=True)
class EmptyState:
    title: str
    hint: str


ThreadItem = DaySeparator | Bubble | QuoteBubble


class MessageThread:
    def __init__(self, viewer_role: SenderType) -> None:
        self.viewer_role = viewer_role

    def empty_state(self) -> EmptyState:
        if self.viewer_role == SenderType.VENDOR:
            return EmptyState("Henüz mesaj yok", "Müşterinize mesaj veya teklif gönderin")
        return EmptyState("Henüz mesaj yok", "Firmaya mesaj gönderin")

    def render(self, messages: list[ThreadMessage], now: datetime) -> list[ThreadItem] | EmptyState:
        if not messages:
            return self.empty_state()

        items: list[ThreadItem] = []
        current_day = None
        for msg in messages:
            day = to_local(msg.created_at).date()
            if day != current_day:
                items.append(DaySeparator(format_day_separator(msg.created_at, now)))
                current_day = day
            items.append(self._item(msg, now))
        return items

    def _item(self, msg: ThreadMessage, now: datetime) -> Bubble | QuoteBubble:
        align = "right" if msg.is_own else "left"
        time_label = format_message_time(msg.created_at, now)

        if msg.message_type == MessageType.QUOTE:
            card = None
            if msg.quote is not None:
                card = QuoteCardView.build(
                    msg.quote, viewer_role=self.viewer_role, is_own=msg.is_own, now=now,
                )
            return QuoteBubble(msg.id, align, msg.content, time_label, card)

        glyph = None
        if msg.is_own:
            glyph = GLYPH_READ if msg.is_read else GLYPH_SENT
        return Bubble(
            message_id=msg.id,
            align=align,
            sender_name=None if msg.is_own else msg.sender_name,
            content=msg.content,
            time_label=time_label,
            read_glyph=glyph,
            pending=msg.is_pending,
        )

    @staticmethod
    def should_scroll(previous: list[ThreadMessage], current: list[ThreadMessage]) -> bool:
        """Stick to the bottom whenever a new message was appended."""
        if len(current) <= len(previous):
            return False
        return not previous or current[-1].id != previous[-1].id
