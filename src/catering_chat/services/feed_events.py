"""Change-feed fan-out through the transactional outbox."""
from __future__ import annotations

from catering_chat.application.uow import UnitOfWork
from catering_chat.domain.events.row_change import RowChange

FEED_EVENT_TYPE = "feed.row_change"


async def emit(uow: UnitOfWork, change: RowChange) -> None:
    await uow.outbox.add(FEED_EVENT_TYPE, change.to_payload())
