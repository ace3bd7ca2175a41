from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from catering_chat.domain.entities.vendor_lead import VendorLeadContext


class VendorLeadReader(Protocol):
    async def get_context(self, vendor_lead_id: UUID) -> VendorLeadContext | None: ...

    async def list_for_user(
        self, user_id: UUID, *, limit: int = 20, offset: int = 0
    ) -> tuple[list[VendorLeadContext], int]:
        """Conversations with at least one message where the user is either side.

        Returns (page, total_count), newest activity first.
        """
        ...


class VendorLeadWriter(Protocol):
    async def set_status(self, vendor_lead_id: UUID, status: str) -> None: ...

    async def touch_last_message_at(self, vendor_lead_id: UUID, ts: datetime) -> None: ...
