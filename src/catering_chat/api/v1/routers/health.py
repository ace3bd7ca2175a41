from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from catering_chat.infrastructure.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    """Ready once Postgres, Redis and the change-feed relay are all up."""
    checks: dict[str, str] = {}

    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        checks["postgres"] = "ok"
    except Exception as exc:  # noqa: BLE001
        checks["postgres"] = str(exc)

    redis = getattr(request.app.state, "redis", None)
    try:
        if redis is None:
            raise RuntimeError("not connected")
        await redis.ping()
        checks["redis"] = "ok"
    except Exception as exc:  # noqa: BLE001
        checks["redis"] = str(exc)

    subscriber = getattr(request.app.state, "pubsub_subscriber", None)
    checks["feed_relay"] = "ok" if subscriber is not None and subscriber.is_running else "stopped"

    if any(value != "ok" for value in checks.values()):
        logger.warning("Readiness check failed: %s", checks)
        return JSONResponse(status_code=503, content={"status": "unavailable", "checks": checks})
    return JSONResponse(content={"status": "ready", "checks": checks})
