"""JSON wire format for events relayed between workers and API processes."""
from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

WIRE_VERSION = 1


def _default(o: object) -> Any:
    if isinstance(o, UUID):
        return str(o)
    if isinstance(o, (datetime, date)):
        return o.isoformat()
    if isinstance(o, Decimal):
        # Prices travel as JSON numbers, the same as in API responses.
        return float(o)
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def serialize_event(event_type: str, payload: dict[str, Any]) -> str:
    envelope = {"v": WIRE_VERSION, "event": event_type, "data": payload}
    return json.dumps(envelope, default=_default, ensure_ascii=False)


def deserialize_event(raw: str | bytes) -> tuple[str, dict[str, Any]]:
    envelope = json.loads(raw)
    version = envelope.get("v", WIRE_VERSION)
    if version != WIRE_VERSION:
        raise ValueError(f"Unsupported event wire version: {version}")
    return envelope["event"], envelope["data"]
