"""User Notifications API - In-app notification feed endpoints"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from .schemas import ActionResponse
from ..deps import get_current_user_dep, get_notification_service
from ...domain.models import ActorContext, Notification
from ...domain.enums import NotificationType, Priority
from ...services.notification_service import NotificationService
from ...utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("")
async def get_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False),
    notification_type: Optional[NotificationType] = Query(None, alias="type"),
    priority: Optional[Priority] = Query(None),
    actor: ActorContext = Depends(get_current_user_dep),
    service: NotificationService = Depends(get_notification_service)
) -> Dict[str, Any]:
    """
    Get notifications for the current user.

    - Sorted by newest first
    - Supports filtering by unread only, type and priority
    - Always carries the overall unread count
    """
    return service.list_notifications(
        actor,
        unread_only=unread_only,
        notification_type=notification_type,
        priority=priority,
        page=page,
        limit=limit
    )


@router.get("/unread-count")
async def get_unread_count(
    actor: ActorContext = Depends(get_current_user_dep),
    service: NotificationService = Depends(get_notification_service)
) -> Dict[str, int]:
    """
    Get just the unread notification count.

    Lightweight endpoint for polling the badge count.
    """
    return {"unread_count": service.unread_count(actor)}


@router.post("/mark-all-read", response_model=ActionResponse)
async def mark_all_read(
    actor: ActorContext = Depends(get_current_user_dep),
    service: NotificationService = Depends(get_notification_service)
):
    count = service.mark_all_read(actor)
    logger.info(f"Marked {count} notifications read", extra={"actor": actor.user_id})
    return ActionResponse(message="Notifications marked as read", count=count)


@router.delete("/read", response_model=ActionResponse)
async def delete_all_read(
    actor: ActorContext = Depends(get_current_user_dep),
    service: NotificationService = Depends(get_notification_service)
):
    count = service.delete_all_read(actor)
    return ActionResponse(message="Read notifications deleted", count=count)


@router.delete("/cleanup", response_model=ActionResponse)
async def delete_old_notifications(
    days: Optional[int] = Query(None, ge=1),
    actor: ActorContext = Depends(get_current_user_dep),
    service: NotificationService = Depends(get_notification_service)
):
    """Admin: purge old read notifications and any expired ones"""
    old = service.delete_old(actor, days)
    expired = service.delete_expired(actor)
    return ActionResponse(message="Old notifications deleted", count=old + expired)


@router.get("/{notification_id}", response_model=Notification)
async def get_notification(
    notification_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: NotificationService = Depends(get_notification_service)
):
    return service.get_notification(actor, notification_id)


@router.post("/{notification_id}/read", response_model=Notification)
async def mark_read(
    notification_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: NotificationService = Depends(get_notification_service)
):
    return service.mark_read(actor, notification_id)


@router.delete("/{notification_id}", response_model=ActionResponse)
async def delete_notification(
    notification_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: NotificationService = Depends(get_notification_service)
):
    service.delete_notification(actor, notification_id)
    return ActionResponse(message="Notification deleted")
