from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catering_chat.api.middleware.correlation_id import CorrelationIdMiddleware, current_request_id
from catering_chat.api.middleware.timing import RequestTimingMiddleware
from catering_chat.api.v1.routers import feed, health, messages, notifications, quotes
from catering_chat.application.exceptions import AppError
from catering_chat.application.ports.bus import EventSubscriber
from catering_chat.config import settings
from catering_chat.domain.events.row_change import RowChange
from catering_chat.infrastructure.bus.redis_pubsub import RedisPubSubSubscriber
from catering_chat.infrastructure.ratelimit.redis_limiter import RedisRateLimiter
from catering_chat.services.feed_events import FEED_EVENT_TYPE

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMITED",
}


async def _on_pubsub_event(event_type: str, data: dict[str, Any]) -> None:
    """Dispatch a Redis Pub/Sub event to local feed sockets."""
    if event_type != FEED_EVENT_TYPE:
        return
    try:
        change = RowChange.from_payload(data)
    except (KeyError, ValueError):
        logger.warning("Dropping malformed feed event: %s", data)
        return
    await feed.get_manager().dispatch(change)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Redis connection pool created")

    app.state.rate_limiter = RedisRateLimiter(
        app.state.redis,
        limit=settings.RATE_LIMIT_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        prefix=settings.RATE_LIMIT_PREFIX,
    )

    subscriber: EventSubscriber = RedisPubSubSubscriber(
        app.state.redis,
        settings.REDIS_PUBSUB_CHANNEL,
        _on_pubsub_event,
    )
    await subscriber.start()
    app.state.pubsub_subscriber = subscriber

    yield

    await subscriber.stop()
    await app.state.redis.aclose()
    logger.info("Redis connection pool closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Catering Conversation Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(messages.router)
    app.include_router(quotes.router)
    app.include_router(notifications.router)
    app.include_router(feed.router)

    return app


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "error": {"code": code, "message": message}},
    )


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(_req: Request, exc: AppError) -> JSONResponse:
        return error_response(exc.status_code, exc.code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def _validation(_req: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if any(err.get("type") == "json_invalid" for err in errors):
            return error_response(400, "INVALID_JSON", "Geçersiz JSON formatı")
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query"))
        message = f"Geçersiz değer: {field}" if field else "Geçersiz istek"
        return error_response(400, "VALIDATION_ERROR", message)

    @app.exception_handler(StarletteHTTPException)
    async def _http(_req: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = _HTTP_CODES.get(exc.status_code, "SERVER_ERROR")
        return error_response(exc.status_code, code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _unhandled(req: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s rid=%s", req.method, req.url.path, current_request_id(),
        )
        return error_response(500, "SERVER_ERROR", "Bir hata oluştu")
