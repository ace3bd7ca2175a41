"""Client-side view state for a conversation thread."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any


def parse_ts(value: str | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _price(value: Any) -> float | None:
    return float(value) if value is not None else None


@dataclass(frozen=True, slots=True)
class QuoteSnapshot:
    id: str
    total_price: float
    price_per_person: float | None
    message: str | None
    status: str
    valid_until: datetime | None
    created_at: datetime | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> QuoteSnapshot:
        return cls(
            id=str(data["id"]),
            total_price=float(data["total_price"]),
            price_per_person=_price(data.get("price_per_person")),
            message=data.get("message"),
            status=data["status"],
            valid_until=parse_ts(data.get("valid_until")),
            created_at=parse_ts(data.get("created_at")),
        )


@dataclass(frozen=True, slots=True)
class ThreadMessage:
    id: str
    sender_id: str
    sender_type: str
    content: str
    message_type: str
    is_read: bool
    created_at: datetime
    sender_name: str | None = None
    is_own: bool = False
    quote: QuoteSnapshot | None = None
    quote_id: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.id.startswith("temp-")

    def with_read(self, is_read: bool) -> ThreadMessage:
        return replace(self, is_read=is_read)

    def with_quote_status(self, status: str) -> ThreadMessage:
        if self.quote is None:
            return self
        return replace(self, quote=replace(self.quote, status=status))

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> ThreadMessage:
        """Build from a ``MessageWithSender`` API payload."""
        quote = data.get("quote")
        return cls(
            id=str(data["id"]),
            sender_id=str(data["sender_id"]),
            sender_type=data["sender_type"],
            content=data["content"],
            message_type=data.get("message_type", "text"),
            is_read=bool(data.get("is_read", False)),
            created_at=parse_ts(data["created_at"]),
            sender_name=data.get("sender_name"),
            is_own=bool(data.get("is_own", False)),
            quote=QuoteSnapshot.from_json(quote) if quote else None,
            quote_id=str(quote["id"]) if quote else data.get("quote_id"),
        )

    @classmethod
    def from_record(
        cls,
        record: dict[str, Any],
        *,
        sender_name: str | None,
        own_user_id: str,
    ) -> ThreadMessage:
        """Build from a raw feed row, which carries no joined data."""
        return cls(
            id=str(record["id"]),
            sender_id=str(record["sender_id"]),
            sender_type=record["sender_type"],
            content=record["content"],
            message_type=record.get("message_type", "text"),
            is_read=bool(record.get("is_read", False)),
            created_at=parse_ts(record["created_at"]),
            sender_name=sender_name,
            is_own=str(record["sender_id"]) == own_user_id,
            quote=None,
            quote_id=record.get("quote_id"),
        )
