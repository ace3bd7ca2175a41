from __future__ import annotations

from collections.abc import Collection
from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catering_chat.domain.entities.quote import Quote
from catering_chat.domain.value_objects.enums import QuoteStatus
from catering_chat.domain.value_objects.quote_status import ACTIONABLE_STATUSES
from catering_chat.infrastructure.db.mappers import quote as mapper
from catering_chat.infrastructure.db.models.quote import QuoteModel

_STAMP_COLUMNS = {
    QuoteStatus.ACCEPTED: "accepted_at",
    QuoteStatus.REJECTED: "rejected_at",
    QuoteStatus.SENT: "sent_at",
}


class QuoteReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, quote_id: UUID) -> Quote | None:
        model = await self._session.get(QuoteModel, quote_id)
        return mapper.model_to_entity(model) if model else None

    async def get_many(self, quote_ids: list[UUID]) -> dict[UUID, Quote]:
        if not quote_ids:
            return {}
        stmt = select(QuoteModel).where(QuoteModel.id.in_(quote_ids))
        result = await self._session.execute(stmt)
        return {m.id: mapper.model_to_entity(m) for m in result.scalars().all()}

    async def list_children(self, parent_quote_id: UUID) -> list[Quote]:
        stmt = (
            select(QuoteModel)
            .where(QuoteModel.parent_quote_id == parent_quote_id)
            .order_by(QuoteModel.created_at.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class QuoteWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, quote: Quote) -> Quote:
        model = mapper.entity_to_model(quote)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def update_status(
        self,
        quote_id: UUID,
        status: str,
        *,
        at: datetime | None = None,
        from_statuses: Collection[str] | None = None,
    ) -> Quote | None:
        values: dict = {"status": status}
        column = _STAMP_COLUMNS.get(QuoteStatus(status))
        if column and at is not None:
            values[column] = at
        stmt = update(QuoteModel).where(QuoteModel.id == quote_id)
        if from_statuses is not None:
            # Guarded compare-and-set: a concurrent decision matches no row.
            stmt = stmt.where(QuoteModel.status.in_([str(s) for s in from_statuses]))
        stmt = stmt.values(**values).returning(QuoteModel)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def expire_overdue(self, now: datetime) -> list[Quote]:
        stmt = (
            update(QuoteModel)
            .where(
                QuoteModel.status.in_([s.value for s in ACTIONABLE_STATUSES]),
                QuoteModel.valid_until.is_not(None),
                QuoteModel.valid_until < now,
            )
            .values(status=QuoteStatus.EXPIRED.value)
            .returning(QuoteModel)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]
