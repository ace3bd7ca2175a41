from __future__ import annotations

from collections.abc import Collection
from datetime import datetime
from typing import Protocol
from uuid import UUID

from catering_chat.domain.entities.quote import Quote


class QuoteReader(Protocol):
    async def get_by_id(self, quote_id: UUID) -> Quote | None: ...

    async def get_many(self, quote_ids: list[UUID]) -> dict[UUID, Quote]: ...

    async def list_children(self, parent_quote_id: UUID) -> list[Quote]: ...


class QuoteWriter(Protocol):
    async def create(self, quote: Quote) -> Quote: ...

    async def update_status(
        self,
        quote_id: UUID,
        status: str,
        *,
        at: datetime | None = None,
        from_statuses: Collection[str] | None = None,
    ) -> Quote | None:
        """Set status; ``at`` stamps accepted_at / rejected_at when relevant.

        With ``from_statuses`` the row is only touched while its current
        status is one of them, and ``None`` comes back otherwise.
        """
        ...

    async def expire_overdue(self, now: datetime) -> list[Quote]:
        """Flip actionable quotes past valid_until to expired; return them."""
        ...
