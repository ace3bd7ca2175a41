from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catering_chat.domain.entities.message import Message
from catering_chat.domain.value_objects.enums import SenderType
from catering_chat.infrastructure.db.mappers import message as mapper
from catering_chat.infrastructure.db.models.message import MessageModel
from catering_chat.infrastructure.db.models.vendor_lead import (
    LeadModel,
    VendorLeadModel,
    VendorModel,
)


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_page(
        self,
        vendor_lead_id: UUID,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Message]:
        # Newest first to slice the page, then flipped for display order.
        stmt = (
            select(MessageModel)
            .where(MessageModel.vendor_lead_id == vendor_lead_id)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        rows = [mapper.model_to_entity(m) for m in result.scalars().all()]
        rows.reverse()
        return rows

    async def count(self, vendor_lead_id: UUID) -> int:
        stmt = select(func.count()).where(MessageModel.vendor_lead_id == vendor_lead_id)
        return int(await self._session.scalar(stmt) or 0)

    async def count_unread(self, vendor_lead_id: UUID, sender_type: str) -> int:
        stmt = select(func.count()).where(
            MessageModel.vendor_lead_id == vendor_lead_id,
            MessageModel.sender_type == sender_type,
            MessageModel.is_read.is_(False),
        )
        return int(await self._session.scalar(stmt) or 0)

    async def count_unread_for_user(self, user_id: UUID) -> int:
        # Vendor side reads customer messages and vice versa.
        stmt = (
            select(func.count())
            .select_from(MessageModel)
            .join(VendorLeadModel, VendorLeadModel.id == MessageModel.vendor_lead_id)
            .join(VendorModel, VendorModel.id == VendorLeadModel.vendor_id)
            .join(LeadModel, LeadModel.id == VendorLeadModel.lead_id)
            .where(
                MessageModel.is_read.is_(False),
                or_(
                    (VendorModel.owner_id == user_id)
                    & (MessageModel.sender_type == SenderType.CUSTOMER.value),
                    (LeadModel.customer_profile_id == user_id)
                    & (MessageModel.sender_type == SenderType.VENDOR.value),
                ),
            )
        )
        return int(await self._session.scalar(stmt) or 0)

    async def get_last(self, vendor_lead_id: UUID) -> Message | None:
        stmt = (
            select(MessageModel)
            .where(MessageModel.vendor_lead_id == vendor_lead_id)
            .order_by(MessageModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: Message) -> Message:
        model = mapper.entity_to_model(message)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def mark_read(self, vendor_lead_id: UUID, sender_type: str) -> list[Message]:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.vendor_lead_id == vendor_lead_id,
                MessageModel.sender_type == sender_type,
                MessageModel.is_read.is_(False),
            )
            .values(is_read=True)
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]
