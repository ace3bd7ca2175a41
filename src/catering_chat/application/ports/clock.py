from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Clock(Protocol):
    """Source of "now" for message timestamps and quote expiry checks."""

    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return utc_now()


def resolve_now(clock: Clock | None) -> datetime:
    """Services take an optional clock; ``None`` means wall time."""
    return (clock or SystemClock()).now()
