from __future__ import annotations

from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession

from catering_chat.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from catering_chat.infrastructure.db.repositories.notification import (
    NotificationReaderRepo,
    NotificationWriterRepo,
    PreferenceRepo,
)
from catering_chat.infrastructure.db.repositories.outbox import OutboxWriterRepo
from catering_chat.infrastructure.db.repositories.quote import QuoteReaderRepo, QuoteWriterRepo
from catering_chat.infrastructure.db.repositories.vendor_lead import (
    VendorLeadReaderRepo,
    VendorLeadWriterRepo,
)


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.vendor_leads = VendorLeadReaderRepo(session)
        self.vendor_leads_w = VendorLeadWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.quotes = QuoteReaderRepo(session)
        self.quotes_w = QuoteWriterRepo(session)
        self.notifications = NotificationReaderRepo(session)
        self.notifications_w = NotificationWriterRepo(session)
        self.preferences = PreferenceRepo(session)
        self.outbox = OutboxWriterRepo(session)

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
