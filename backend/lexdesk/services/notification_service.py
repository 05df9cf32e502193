"""Notification Service - In-app notification feed and fan-out"""
from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from pymongo.database import Database

from ..config.settings import settings
from ..domain.models import ActorContext, Notification, RelatedEntity
from ..domain.enums import NotificationType, Priority, EntityType
from ..domain.errors import NotificationNotFoundError
from ..domain.results import BestEffortResult
from ..engine.access_guard import AccessGuard
from ..repositories.notification_repo import NotificationRepository
from ..utils.idgen import generate_notification_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


# icon, color, action text per type
TYPE_DEFAULTS: Dict[NotificationType, Tuple[str, str, str]] = {
    NotificationType.MESSAGE_RECEIVED: ("message", "blue", "View Message"),
    NotificationType.MESSAGE_READ: ("check", "green", "View"),
    NotificationType.CASE_CREATED: ("briefcase", "green", "View Case"),
    NotificationType.CASE_UPDATED: ("edit", "blue", "View Case"),
    NotificationType.CASE_CLOSED: ("check-circle", "green", "View Case"),
    NotificationType.HEARING_SCHEDULED: ("calendar", "orange", "View Hearing"),
    NotificationType.HEARING_REMINDER: ("bell", "red", "View Hearing"),
    NotificationType.HEARING_COMPLETED: ("check", "green", "View Details"),
    NotificationType.DOCUMENT_UPLOADED: ("file", "blue", "View Document"),
    NotificationType.DOCUMENT_SHARED: ("share", "blue", "View Document"),
    NotificationType.TASK_ASSIGNED: ("clipboard", "purple", "View Task"),
    NotificationType.TASK_COMPLETED: ("check-circle", "green", "View Task"),
    NotificationType.TASK_OVERDUE: ("alert", "red", "View Task"),
    NotificationType.TASK_COMMENT: ("message", "purple", "View Task"),
    NotificationType.CONNECTION_REQUEST: ("user-plus", "blue", "View Request"),
    NotificationType.CONNECTION_ACCEPTED: ("user-check", "green", "View Connection"),
    NotificationType.CONNECTION_REJECTED: ("user-x", "red", "View"),
    NotificationType.DEADLINE_APPROACHING: ("clock", "orange", "View Details"),
    NotificationType.PARALEGAL_ASSIGNED: ("user-plus", "blue", "View Case"),
    NotificationType.CASE_STATUS_CHANGED: ("refresh", "blue", "View Case"),
    NotificationType.SYSTEM_ANNOUNCEMENT: ("megaphone", "purple", "Read More"),
    NotificationType.DEADLINE_REMINDER: ("clock", "orange", "View Details"),
    NotificationType.TASK_REMINDER: ("clipboard", "orange", "View Task"),
    NotificationType.DOCUMENT_REMINDER: ("file", "orange", "View Document"),
    NotificationType.PAYMENT_REMINDER: ("credit-card", "orange", "View Details"),
    NotificationType.MEETING_REMINDER: ("calendar", "orange", "View Details"),
    NotificationType.CUSTOM_REMINDER: ("bell", "orange", "View"),
}
FALLBACK_DEFAULTS = ("bell", "gray", "View")


def type_defaults(notification_type: NotificationType) -> Tuple[str, str, str]:
    return TYPE_DEFAULTS.get(notification_type, FALLBACK_DEFAULTS)


class NotificationService:
    """Service for notification creation and the user's notification feed"""

    def __init__(self, database: Optional[Database] = None):
        self.repo = NotificationRepository(database)
        self.guard = AccessGuard()

    # =========================================================================
    # Creation
    # =========================================================================

    def create(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        related_entity: Optional[RelatedEntity] = None,
        action_url: Optional[str] = None,
        priority: Priority = Priority.NORMAL,
        action_text: Optional[str] = None,
        expires_at: Optional[datetime] = None
    ) -> Notification:
        """Create one notification; raises on invalid input or storage failure"""
        icon, color, default_action_text = type_defaults(notification_type)

        notification = Notification(
            notification_id=generate_notification_id(),
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            message=message,
            related_entity=related_entity,
            action_url=action_url,
            action_text=action_text or default_action_text,
            priority=priority,
            icon=icon,
            color=color,
            expires_at=expires_at,
            created_at=utc_now()
        )
        self.repo.insert(notification)

        logger.info(
            f"Created notification for {user_id}",
            extra={
                "notification_id": notification.notification_id,
                "user_id": user_id,
                "action": notification_type.value
            }
        )
        return notification

    def notify(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[str] = None,
        **kwargs: Any
    ) -> BestEffortResult:
        """create() for request paths: failures are logged and returned, never raised"""
        try:
            related = None
            if entity_type is not None and entity_id is not None:
                related = RelatedEntity(entity_type=entity_type, entity_id=entity_id)
            notification = self.create(
                user_id=user_id,
                notification_type=notification_type,
                title=title,
                message=message,
                related_entity=related,
                **kwargs
            )
        except Exception as e:
            logger.warning(
                f"Notification delivery failed: {e}",
                extra={"user_id": user_id, "action": notification_type.value}
            )
            return BestEffortResult.failed(e)

        return BestEffortResult.succeeded(notification)

    # =========================================================================
    # Feed
    # =========================================================================

    def list_notifications(
        self,
        actor: ActorContext,
        unread_only: bool = False,
        notification_type: Optional[NotificationType] = None,
        priority: Optional[Priority] = None,
        page: int = 1,
        limit: int = 20
    ) -> Dict[str, Any]:
        items, total = self.repo.list_for_user(
            actor.user_id,
            unread_only=unread_only,
            notification_type=notification_type.value if notification_type else None,
            priority=priority.value if priority else None,
            page=page,
            limit=limit
        )
        return {
            "items": items,
            "total": total,
            "unread_count": self.repo.unread_count(actor.user_id),
            "page": page,
            "limit": limit,
        }

    def get_notification(self, actor: ActorContext, notification_id: str) -> Notification:
        notification = self.repo.get(notification_id)
        if notification is None:
            raise NotificationNotFoundError(
                "Notification not found", details={"notification_id": notification_id}
            )
        self.guard.require_notification_owner(actor, notification)
        return notification

    def unread_count(self, actor: ActorContext) -> int:
        return self.repo.unread_count(actor.user_id)

    def mark_read(self, actor: ActorContext, notification_id: str) -> Notification:
        notification = self.get_notification(actor, notification_id)
        notification.mark_read()
        return self.repo.save(notification)

    def mark_all_read(self, actor: ActorContext) -> int:
        return self.repo.mark_all_read(actor.user_id)

    def delete_notification(self, actor: ActorContext, notification_id: str) -> None:
        notification = self.get_notification(actor, notification_id)
        self.repo.delete(notification.notification_id)

    def delete_all_read(self, actor: ActorContext) -> int:
        return self.repo.delete_read(actor.user_id)

    def delete_old(self, actor: ActorContext, days: Optional[int] = None) -> int:
        self.guard.require_admin(actor, "purge old notifications")
        return self.repo.delete_old_read(days or settings.notification_retention_days)

    def delete_expired(self, actor: ActorContext) -> int:
        self.guard.require_admin(actor, "purge expired notifications")
        return self.repo.delete_expired()
