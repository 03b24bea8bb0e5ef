"""
Notification routes (polled by the client).
"""

from fastapi import APIRouter, Depends, Query
from typing import List

from barter_exchange.error_handling.errors import NotFoundError
from barter_exchange.models import Notification, User
from barter_exchange.api.dependencies import ExchangeServices, get_current_user, get_services

router = APIRouter()


@router.get("/notifications", response_model=List[Notification])
async def get_my_notifications(
    unread_only: bool = Query(False, description="Only unread notifications"),
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    return services.notifications.get_notifications(user.id, unread_only=unread_only)


@router.get("/notifications/unread-count")
async def get_unread_count(
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    return {"unread": services.notifications.unread_count(user.id)}


@router.post("/notifications/read-all")
async def mark_all_as_read(
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    return {"updated": services.notifications.mark_all_as_read(user.id)}


@router.post("/notifications/{notification_id}/read")
async def mark_as_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    if not services.notifications.mark_as_read(user.id, notification_id):
        raise NotFoundError("Notification", notification_id)
    return {"id": notification_id, "isRead": True}
