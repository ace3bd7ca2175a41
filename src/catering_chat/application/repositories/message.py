from __future__ import annotations

from typing import Protocol
from uuid import UUID

from catering_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_page(
        self,
        vendor_lead_id: UUID,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Message]:
        """Most recent ``limit`` messages after skipping ``offset``, oldest first."""
        ...

    async def count(self, vendor_lead_id: UUID) -> int: ...

    async def count_unread(self, vendor_lead_id: UUID, sender_type: str) -> int:
        """Unread messages in the conversation sent by ``sender_type``."""
        ...

    async def count_unread_for_user(self, user_id: UUID) -> int: ...

    async def get_last(self, vendor_lead_id: UUID) -> Message | None: ...


class MessageWriter(Protocol):
    async def create(self, message: Message) -> Message: ...

    async def mark_read(self, vendor_lead_id: UUID, sender_type: str) -> list[Message]:
        """Flip is_read on unread messages sent by ``sender_type``; return updated rows."""
        ...
