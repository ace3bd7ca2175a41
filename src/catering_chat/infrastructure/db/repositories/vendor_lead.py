from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catering_chat.domain.entities.vendor_lead import VendorLeadContext
from catering_chat.infrastructure.db.mappers import vendor_lead as mapper
from catering_chat.infrastructure.db.models.vendor_lead import (
    LeadModel,
    VendorLeadModel,
    VendorModel,
)


class VendorLeadReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_context(self, vendor_lead_id: UUID) -> VendorLeadContext | None:
        model = await self._session.get(VendorLeadModel, vendor_lead_id)
        return mapper.model_to_context(model) if model else None

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[VendorLeadContext], int]:
        participant = or_(
            VendorModel.owner_id == user_id,
            LeadModel.customer_profile_id == user_id,
        )
        base = (
            select(VendorLeadModel.id)
            .join(VendorModel, VendorModel.id == VendorLeadModel.vendor_id)
            .join(LeadModel, LeadModel.id == VendorLeadModel.lead_id)
            .where(participant, VendorLeadModel.last_message_at.is_not(None))
        )

        total = await self._session.scalar(
            select(func.count()).select_from(base.subquery())
        )

        stmt = (
            select(VendorLeadModel)
            .where(VendorLeadModel.id.in_(base))
            .order_by(VendorLeadModel.last_message_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        items = [mapper.model_to_context(m) for m in result.unique().scalars().all()]
        return items, int(total or 0)


class VendorLeadWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def set_status(self, vendor_lead_id: UUID, status: str) -> None:
        stmt = (
            update(VendorLeadModel)
            .where(VendorLeadModel.id == vendor_lead_id)
            .values(status=status)
        )
        await self._session.execute(stmt)

    async def touch_last_message_at(self, vendor_lead_id: UUID, ts: datetime) -> None:
        stmt = (
            update(VendorLeadModel)
            .where(VendorLeadModel.id == vendor_lead_id)
            .values(last_message_at=ts)
        )
        await self._session.execute(stmt)
