from __future__ import annotations

from typing import Protocol
from uuid import UUID

from catering_chat.domain.entities.notification import Notification, NotificationPreferences


class NotificationReader(Protocol):
    async def list_for_user(
        self, user_id: UUID, *, limit: int = 20, offset: int = 0
    ) -> tuple[list[Notification], int]: ...


class NotificationWriter(Protocol):
    async def create(self, notification: Notification) -> Notification: ...

    async def mark_read(self, user_id: UUID, ids: list[UUID] | None = None) -> int:
        """Mark the user's notifications read (all when ids is None); return count."""
        ...


class PreferenceRepository(Protocol):
    async def get(self, user_id: UUID) -> NotificationPreferences:
        """Stored preferences, or defaults when the user never saved any."""
        ...

    async def save(self, preferences: NotificationPreferences) -> None: ...
