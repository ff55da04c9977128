"""
Notification inbox endpoints.
"""

from fastapi import APIRouter, Depends, Query
from typing import Dict, List, Optional

from participium.models.notification import NotificationResponse
from participium.routes.deps import get_current_user
from participium.services.notification_service import get_notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    limit: Optional[int] = Query(None, ge=1, le=200),
    user: Dict = Depends(get_current_user),
):
    return get_notification_service().list_for_user(user["id"], unread_only=unread_only, limit=limit)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(notification_id: str, user: Dict = Depends(get_current_user)):
    return get_notification_service().mark_as_read(notification_id, user["id"])
