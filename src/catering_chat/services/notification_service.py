from __future__ import annotations

import logging
import uuid
from datetime import datetime

from catering_chat.application.dto.principal import Principal
from catering_chat.application.exceptions import ValidationError
from catering_chat.application.ports.clock import utc_now
from catering_chat.application.uow import UnitOfWork
from catering_chat.domain.entities.notification import (
    DEFAULT_PREFERENCES,
    Notification,
    NotificationPreferences,
)
from catering_chat.domain.value_objects.enums import NotificationChannel, NotificationType

logger = logging.getLogger(__name__)


async def notify(
    uow: UnitOfWork,
    *,
    user_id: uuid.UUID,
    type_: NotificationType,
    title: str,
    message: str | None = None,
    entity_type: str | None = None,
    entity_id: uuid.UUID | None = None,
    action_url: str | None = None,
    now: datetime | None = None,
) -> Notification | None:
    """Write an in-app notification unless the user switched that type off.

    Runs inside the caller's transaction; the caller commits.
    """
    preferences = await uow.preferences.get(user_id)
    if not preferences.allows(type_, NotificationChannel.INAPP):
        logger.debug("Notification %s muted for user %s", type_, user_id)
        return None

    notification = Notification(
        id=uuid.uuid4(),
        user_id=user_id,
        type=type_.value,
        title=title,
        message=message,
        entity_type=entity_type,
        entity_id=entity_id,
        action_url=action_url,
        is_read=False,
        created_at=now or utc_now(),
    )
    return await uow.notifications_w.create(notification)


async def list_notifications(
    principal: Principal,
    limit: int,
    offset: int,
    uow: UnitOfWork,
) -> tuple[list[Notification], int]:
    return await uow.notifications.list_for_user(
        principal.user_id, limit=limit, offset=offset,
    )


async def mark_read(
    principal: Principal,
    ids: list[uuid.UUID] | None,
    uow: UnitOfWork,
) -> int:
    count = await uow.notifications_w.mark_read(principal.user_id, ids)
    await uow.commit()
    return count


async def get_preferences(principal: Principal, uow: UnitOfWork) -> NotificationPreferences:
    return await uow.preferences.get(principal.user_id)


async def update_preferences(
    principal: Principal,
    changes: dict[str, bool],
    uow: UnitOfWork,
) -> NotificationPreferences:
    unknown = sorted(set(changes) - set(DEFAULT_PREFERENCES))
    if unknown:
        raise ValidationError(f"Geçersiz bildirim tercihi: {', '.join(unknown)}")

    current = await uow.preferences.get(principal.user_id)
    updated = current.merged(changes)
    await uow.preferences.save(updated)
    await uow.commit()
    return updated
