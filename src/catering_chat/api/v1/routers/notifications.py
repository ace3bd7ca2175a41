from __future__ import annotations

from fastapi import APIRouter, Body, Query

from catering_chat.api.deps import CurrentPrincipal, RateLimitedPrincipal, UoWDep
from catering_chat.api.v1.schemas.common import Envelope
from catering_chat.api.v1.schemas.notification import (
    MarkNotificationsReadRequest,
    MarkNotificationsReadResponse,
    NotificationResponse,
    NotificationsPageResponse,
)
from catering_chat.services import notification_service

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=Envelope[NotificationsPageResponse])
async def list_notifications(
    principal: CurrentPrincipal,
    uow: UoWDep,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> Envelope[NotificationsPageResponse]:
    items, total = await notification_service.list_notifications(principal, limit, offset, uow)
    return Envelope(
        data=NotificationsPageResponse(
            notifications=[NotificationResponse.model_validate(n, from_attributes=True) for n in items],
            total_count=total,
            has_more=offset + len(items) < total,
        )
    )


@router.post("/read", response_model=Envelope[MarkNotificationsReadResponse])
async def mark_read(
    principal: RateLimitedPrincipal,
    uow: UoWDep,
    body: MarkNotificationsReadRequest | None = None,
) -> Envelope[MarkNotificationsReadResponse]:
    count = await notification_service.mark_read(principal, body.ids if body else None, uow)
    return Envelope(data=MarkNotificationsReadResponse(marked_count=count))


@router.get("/preferences", response_model=Envelope[dict[str, bool]])
async def get_preferences(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> Envelope[dict[str, bool]]:
    prefs = await notification_service.get_preferences(principal, uow)
    return Envelope(data=prefs.settings)


@router.put("/preferences", response_model=Envelope[dict[str, bool]])
async def update_preferences(
    principal: RateLimitedPrincipal,
    uow: UoWDep,
    changes: dict[str, bool] = Body(...),
) -> Envelope[dict[str, bool]]:
    prefs = await notification_service.update_preferences(principal, changes, uow)
    return Envelope(data=prefs.settings)
