from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from catering_chat.domain.value_objects.enums import NotificationChannel, NotificationType


@dataclass(frozen=True, slots=True)
class Notification:
    id: UUID
    user_id: UUID
    type: str
    title: str
    message: str | None
    entity_type: str | None
    entity_id: UUID | None
    action_url: str | None
    is_read: bool
    created_at: datetime


def preference_key(type_: NotificationType, channel: NotificationChannel) -> str:
    return f"{type_.value}_{channel.value}"


DEFAULT_PREFERENCES: dict[str, bool] = {
    preference_key(t, c): True for t in NotificationType for c in NotificationChannel
}
DEFAULT_PREFERENCES[preference_key(NotificationType.QUOTE_REJECTED, NotificationChannel.EMAIL)] = False
DEFAULT_PREFERENCES[preference_key(NotificationType.SYSTEM, NotificationChannel.EMAIL)] = False


@dataclass(frozen=True, slots=True)
class NotificationPreferences:
    user_id: UUID
    settings: dict[str, bool] = field(default_factory=lambda: dict(DEFAULT_PREFERENCES))

    def allows(self, type_: NotificationType, channel: NotificationChannel) -> bool:
        key = preference_key(type_, channel)
        return self.settings.get(key, DEFAULT_PREFERENCES[key])

    def merged(self, changes: dict[str, bool]) -> NotificationPreferences:
        return NotificationPreferences(
            user_id=self.user_id,
            settings={**DEFAULT_PREFERENCES, **self.settings, **changes},
        )
