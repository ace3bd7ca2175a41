from __future__ import annotations

from catering_chat.domain.entities.notification import Notification
from catering_chat.infrastructure.db.models.notification import NotificationModel


def model_to_entity(model: NotificationModel) -> Notification:
    return Notification(
        id=model.id,
        user_id=model.user_id,
        type=model.type,
        title=model.title,
        message=model.message,
        entity_type=model.entity_type,
        entity_id=model.entity_id,
        action_url=model.action_url,
        is_read=model.is_read,
        created_at=model.created_at,
    )


def entity_to_model(entity: Notification) -> NotificationModel:
    return NotificationModel(
        id=entity.id,
        user_id=entity.user_id,
        type=entity.type,
        title=entity.title,
        message=entity.message,
        entity_type=entity.entity_type,
        entity_id=entity.entity_id,
        action_url=entity.action_url,
        is_read=entity.is_read,
        created_at=entity.created_at,
    )
