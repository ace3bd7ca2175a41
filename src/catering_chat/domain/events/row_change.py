from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from catering_chat.domain.entities.message import Message
from catering_chat.domain.entities.quote import Quote
from catering_chat.domain.value_objects.enums import FeedTable, RowEvent


@dataclass(frozen=True, slots=True)
class RowChange:
    """Row-level change notification as delivered on the change feed.

    ``record`` carries the table row only, never joined data.
    """

    table: str
    event: str  # INSERT | UPDATE
    vendor_lead_id: UUID
    record: dict[str, Any]

    def to_payload(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "event": self.event,
            "vendor_lead_id": str(self.vendor_lead_id),
            "record": self.record,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> RowChange:
        return cls(
            table=payload["table"],
            event=payload["event"],
            vendor_lead_id=UUID(str(payload["vendor_lead_id"])),
            record=dict(payload.get("record") or {}),
        )


def _json_value(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def _record(entity: Message | Quote) -> dict[str, Any]:
    return {key: _json_value(value) for key, value in asdict(entity).items()}


def message_change(message: Message, event: RowEvent = RowEvent.INSERT) -> RowChange:
    return RowChange(
        table=FeedTable.MESSAGES.value,
        event=event.value,
        vendor_lead_id=message.vendor_lead_id,
        record=_record(message),
    )


def quote_change(quote: Quote, event: RowEvent = RowEvent.INSERT) -> RowChange:
    return RowChange(
        table=FeedTable.QUOTES.value,
        event=event.value,
        vendor_lead_id=quote.vendor_lead_id,
        record=_record(quote),
    )
