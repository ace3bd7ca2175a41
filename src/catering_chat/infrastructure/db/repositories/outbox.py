from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catering_chat.application.ports.clock import utc_now
from catering_chat.application.repositories.outbox import OutboxRecord
from catering_chat.infrastructure.db.models.outbox import (
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_PROCESSING,
    STATUS_SENT,
    OutboxEventModel,
)


def _vendor_lead_id(payload: dict[str, Any]) -> uuid.UUID | None:
    raw = payload.get("vendor_lead_id")
    try:
        return uuid.UUID(str(raw)) if raw else None
    except ValueError:
        return None


class OutboxWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._session.add(
            OutboxEventModel(
                event_type=event_type,
                vendor_lead_id=_vendor_lead_id(payload),
                payload=payload,
            )
        )
        await self._session.flush()

    async def fetch_pending(self, batch_size: int) -> list[OutboxRecord]:
        """Claim a batch of due events; concurrent workers skip claimed rows."""
        stmt = (
            select(OutboxEventModel)
            .where(
                OutboxEventModel.status.in_([STATUS_PENDING, STATUS_FAILED]),
                OutboxEventModel.next_retry_at.is_(None)
                | (OutboxEventModel.next_retry_at <= utc_now()),
            )
            .order_by(OutboxEventModel.created_at.asc(), OutboxEventModel.id.asc())
            .limit(batch_size)
            .with_for_update(skip_locked=True)
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        if not rows:
            return []

        await self._session.execute(
            update(OutboxEventModel)
            .where(OutboxEventModel.id.in_([r.id for r in rows]))
            .values(status=STATUS_PROCESSING)
        )
        await self._session.flush()
        return [
            OutboxRecord(id=r.id, event_type=r.event_type, payload=r.payload, attempts=r.attempts)
            for r in rows
        ]

    async def mark_sent(self, ids: list[int]) -> None:
        if not ids:
            return
        await self._session.execute(
            update(OutboxEventModel)
            .where(OutboxEventModel.id.in_(ids))
            .values(status=STATUS_SENT, sent_at=utc_now())
        )

    async def mark_failed(self, record_id: int, next_retry_at: datetime) -> None:
        await self._session.execute(
            update(OutboxEventModel)
            .where(OutboxEventModel.id == record_id)
            .values(
                status=STATUS_FAILED,
                attempts=OutboxEventModel.attempts + 1,
                next_retry_at=next_retry_at,
            )
        )
