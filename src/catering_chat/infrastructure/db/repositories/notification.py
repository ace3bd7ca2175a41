from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from catering_chat.domain.entities.notification import Notification, NotificationPreferences
from catering_chat.infrastructure.db.mappers import notification as mapper
from catering_chat.infrastructure.db.models.notification import (
    NotificationModel,
    NotificationPreferenceModel,
)


class NotificationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Notification], int]:
        total = await self._session.scalar(
            select(func.count()).where(NotificationModel.user_id == user_id)
        )
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()], int(total or 0)


class NotificationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, notification: Notification) -> Notification:
        model = mapper.entity_to_model(notification)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def mark_read(self, user_id: UUID, ids: list[UUID] | None = None) -> int:
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .values(is_read=True)
        )
        if ids is not None:
            stmt = stmt.where(NotificationModel.id.in_(ids))
        result = await self._session.execute(stmt)
        return result.rowcount or 0


class PreferenceRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: UUID) -> NotificationPreferences:
        model = await self._session.get(NotificationPreferenceModel, user_id)
        if model is None:
            return NotificationPreferences(user_id=user_id)
        return NotificationPreferences(user_id=user_id).merged(model.settings)

    async def save(self, preferences: NotificationPreferences) -> None:
        stmt = (
            pg_insert(NotificationPreferenceModel)
            .values(user_id=preferences.user_id, settings=preferences.settings)
            .on_conflict_do_update(
                index_elements=[NotificationPreferenceModel.user_id],
                set_={"settings": preferences.settings, "updated_at": func.now()},
            )
        )
        await self._session.execute(stmt)
