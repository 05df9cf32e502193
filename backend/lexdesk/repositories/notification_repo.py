"""Notification Repository - Data access for the in-app notification feed"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from .base_repo import EntityRepository
from ..domain.models import Notification
from ..domain.errors import NotificationNotFoundError
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


def not_expired(now: Optional[datetime] = None) -> Dict[str, Any]:
    """Filter clause hiding notifications whose expires_at has passed"""
    return {
        "$or": [
            {"expires_at": None},
            {"expires_at": {"$gt": now or utc_now()}},
        ]
    }


class NotificationRepository(EntityRepository[Notification]):
    """
    Repository for in-app notifications.

    Every read goes through not_expired(): an expired notification is never
    returned, even before it is purged.
    """

    COLLECTION_NAME = "notifications"
    ID_FIELD = "notification_id"
    MODEL = Notification
    NOT_FOUND = NotificationNotFoundError
    ENTITY_LABEL = "Notification"

    def get(self, entity_id: str) -> Optional[Notification]:
        doc = self._collection.find_one({"_id": entity_id, **not_expired()})
        if doc:
            return self._to_model(doc)
        return None

    def list_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
        notification_type: Optional[str] = None,
        priority: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Notification], int]:
        """Get notifications for a user, newest first"""
        query: Dict[str, Any] = {"user_id": user_id, **not_expired()}
        if unread_only:
            query["is_read"] = False
        if notification_type:
            query["notification_type"] = notification_type
        if priority:
            query["priority"] = priority
        return self.find_page(query, page=page, limit=limit)

    def for_user(self, user_id: str) -> List[Notification]:
        return self.find({"user_id": user_id, **not_expired()}, sort=[("created_at", -1)])

    def unread_count(self, user_id: str) -> int:
        return self.count({"user_id": user_id, "is_read": False, **not_expired()})

    def mark_all_read(self, user_id: str) -> int:
        """Mark all notifications as read for a user. Returns count of updated."""
        result = self._collection.update_many(
            {"user_id": user_id, "is_read": False},
            {"$set": {"is_read": True, "read_at": utc_now()}}
        )
        logger.info(
            f"Marked {result.modified_count} notifications as read",
            extra={"user_id": user_id}
        )
        return result.modified_count

    def delete_read(self, user_id: str) -> int:
        result = self._collection.delete_many({"user_id": user_id, "is_read": True})
        return result.deleted_count

    def delete_old_read(self, days_old: int) -> int:
        """Delete read notifications older than specified days. Returns count deleted."""
        cutoff = utc_now() - timedelta(days=days_old)
        result = self._collection.delete_many({
            "is_read": True,
            "created_at": {"$lt": cutoff}
        })
        if result.deleted_count > 0:
            logger.info(f"Cleaned up {result.deleted_count} old notifications")
        return result.deleted_count

    def delete_expired(self, now: Optional[datetime] = None) -> int:
        result = self._collection.delete_many({
            "expires_at": {"$ne": None, "$lte": now or utc_now()}
        })
        if result.deleted_count > 0:
            logger.info(f"Purged {result.deleted_count} expired notifications")
        return result.deleted_count
