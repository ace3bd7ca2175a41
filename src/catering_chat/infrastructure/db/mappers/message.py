from __future__ import annotations

from catering_chat.domain.entities.message import Message
from catering_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        vendor_lead_id=model.vendor_lead_id,
        sender_id=model.sender_id,
        sender_type=model.sender_type,
        content=model.content,
        message_type=model.message_type,
        quote_id=model.quote_id,
        is_read=model.is_read,
        created_at=model.created_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        vendor_lead_id=entity.vendor_lead_id,
        sender_id=entity.sender_id,
        sender_type=entity.sender_type,
        content=entity.content,
        message_type=entity.message_type,
        quote_id=entity.quote_id,
        is_read=entity.is_read,
        created_at=entity.created_at,
    )

