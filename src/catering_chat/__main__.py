"""Run the conversation API: ``python -m catering_chat``.

Workers run separately (``catering_chat.workers.outbox_worker`` and
``catering_chat.workers.quote_expiry_worker``).
"""
from __future__ import annotations

import logging

import uvicorn

from catering_chat.api.middleware.correlation_id import RequestIdLogFilter
from catering_chat.config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s [%(request_id)s]: %(message)s",
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(RequestIdLogFilter())

    uvicorn.run(
        "catering_chat.app:create_app",
        factory=True,
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
