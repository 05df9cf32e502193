"""Reminder Repository - Data access for scheduled reminders"""
from datetime import datetime
from typing import List, Optional, Tuple

from .base_repo import EntityRepository
from ..domain.models import Reminder
from ..domain.enums import ReminderStatus, EntityType
from ..domain.errors import ReminderNotFoundError
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ReminderRepository(EntityRepository[Reminder]):
    """Repository for reminder operations"""

    COLLECTION_NAME = "reminders"
    ID_FIELD = "reminder_id"
    MODEL = Reminder
    NOT_FOUND = ReminderNotFoundError
    ENTITY_LABEL = "Reminder"

    def find_due(self, now: datetime) -> List[Reminder]:
        """Scheduled reminders whose reminder_date has arrived"""
        return self.find(
            {"status": ReminderStatus.SCHEDULED.value, "reminder_date": {"$lte": now}},
            sort=[("reminder_date", 1)]
        )

    def list_for_user(
        self,
        user_id: str,
        status: Optional[str] = None,
        reminder_type: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Reminder], int]:
        """Reminders the user receives or created"""
        query = {"$or": [{"recipients.user_id": user_id}, {"created_by": user_id}]}
        if status:
            query["status"] = status
        if reminder_type:
            query["reminder_type"] = reminder_type
        return self.find_page(query, page=page, limit=limit, sort_field="reminder_date")

    def upcoming(self, user_id: str, now: datetime, until: datetime) -> List[Reminder]:
        return self.find(
            {
                "recipients.user_id": user_id,
                "status": ReminderStatus.SCHEDULED.value,
                "reminder_date": {"$gte": now, "$lte": until},
            },
            sort=[("reminder_date", 1)]
        )

    def for_entity(self, entity_type: EntityType, entity_id: str) -> List[Reminder]:
        return self.find(
            {
                "related_entity.entity_type": entity_type.value,
                "related_entity.entity_id": entity_id,
            },
            sort=[("reminder_date", 1)]
        )

    def cancel_for_entity(self, entity_type: EntityType, entity_id: str) -> int:
        result = self._collection.update_many(
            {
                "related_entity.entity_type": entity_type.value,
                "related_entity.entity_id": entity_id,
                "status": ReminderStatus.SCHEDULED.value,
            },
            {"$set": {"status": ReminderStatus.CANCELLED.value, "updated_at": utc_now()}}
        )
        return result.modified_count

    def delete_finished_before(self, cutoff: datetime) -> int:
        result = self._collection.delete_many({
            "status": {"$in": [ReminderStatus.SENT.value, ReminderStatus.CANCELLED.value]},
            "reminder_date": {"$lt": cutoff},
        })
        if result.deleted_count:
            logger.info(f"Cleaned up {result.deleted_count} old reminders")
        return result.deleted_count
