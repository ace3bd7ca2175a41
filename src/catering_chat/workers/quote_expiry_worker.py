"""Periodically expires quotes whose validity window has passed."""
from __future__ import annotations

import asyncio
import logging

from catering_chat.config import settings
from catering_chat.infrastructure.db.session import AsyncSessionLocal
from catering_chat.infrastructure.db.uow import SqlAlchemyUoW
from catering_chat.services import quote_service

logger = logging.getLogger(__name__)


async def run_quote_expiry_worker() -> None:
    logger.info("Quote expiry worker started (interval=%.0fs)", settings.QUOTE_EXPIRY_INTERVAL)
    while True:
        try:
            async with AsyncSessionLocal() as session:
                await quote_service.expire_overdue(SqlAlchemyUoW(session))
        except Exception:
            logger.exception("Quote expiry loop error")
        await asyncio.sleep(settings.QUOTE_EXPIRY_INTERVAL)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run_quote_expiry_worker())


if __name__ == "__main__":
    main()
