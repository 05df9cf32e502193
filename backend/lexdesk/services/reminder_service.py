"""Reminder Service - Scheduled reminder management"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from pymongo.database import Database

from ..config.settings import settings
from ..domain.models import ActorContext, Reminder, ReminderRecipient, Recurrence, RelatedEntity
from ..domain.enums import (
    ReminderType, ReminderStatus, Priority, DeliveryChannel, EntityType, ActivityType
)
from ..domain.errors import ValidationError, InvalidStateError
from ..engine.access_guard import AccessGuard
from ..engine.activity_logger import ActivityLogger
from ..repositories.case_repo import CaseRepository
from ..repositories.reminder_repo import ReminderRepository
from .common import apply_updates
from ..utils.idgen import generate_reminder_id
from ..utils.time import utc_now, add_days, is_future
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SNOOZE_MINUTES = 60

UPDATABLE_FIELDS = (
    "title", "message", "reminder_date", "event_date", "recipients", "priority",
    "notification_channels", "action_url", "action_text", "metadata",
)


class ReminderService:
    """
    Service for reminder operations.

    Reminders are only ever sent by the poller; callers create, edit,
    cancel, and as recipients snooze or dismiss.
    """

    def __init__(self, database: Optional[Database] = None):
        self.repo = ReminderRepository(database)
        self.case_repo = CaseRepository(database)
        self.activity = ActivityLogger(database)
        self.guard = AccessGuard(case_lookup=self.case_repo.get)

    def _case_id_of(self, reminder: Reminder) -> Optional[str]:
        if reminder.is_related_to_case():
            return reminder.related_entity.entity_id
        return None

    # =========================================================================
    # Creation
    # =========================================================================

    def create_reminder(
        self,
        actor: ActorContext,
        title: str,
        message: str,
        reminder_type: ReminderType,
        reminder_date: Optional[datetime],
        recipient_ids: List[str],
        related_entity: Optional[RelatedEntity] = None,
        event_date: Optional[datetime] = None,
        priority: Priority = Priority.NORMAL,
        is_recurring: bool = False,
        recurrence: Optional[Recurrence] = None,
        notification_channels: Optional[List[DeliveryChannel]] = None,
        action_url: Optional[str] = None,
        action_text: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Reminder:
        if not title or not message or reminder_type is None or reminder_date is None:
            raise ValidationError("Title, message, type and reminder date are required")
        if not recipient_ids:
            raise ValidationError("At least one recipient is required")

        now = utc_now()
        if not is_future(reminder_date, now):
            raise ValidationError(
                "Reminder date must be in the future",
                details={"reminder_date": str(reminder_date)}
            )
        if is_recurring and (recurrence is None or recurrence.frequency is None):
            raise ValidationError("Recurrence frequency is required for recurring reminders")

        reminder = Reminder(
            reminder_id=generate_reminder_id(),
            title=title,
            message=message,
            reminder_type=reminder_type,
            related_entity=related_entity,
            reminder_date=reminder_date,
            event_date=event_date,
            recipients=[
                ReminderRecipient(user_id=user_id)
                for user_id in dict.fromkeys(recipient_ids)
            ],
            created_by=actor.user_id,
            is_recurring=is_recurring,
            recurrence=recurrence,
            priority=priority,
            notification_channels=notification_channels or [DeliveryChannel.IN_APP],
            action_url=action_url,
            action_text=action_text or "View",
            metadata=metadata or {},
            created_at=now,
            updated_at=now
        )
        self.repo.insert(reminder)

        logger.info(
            f"Reminder scheduled for {reminder.reminder_date.isoformat()}",
            extra={"reminder_id": reminder.reminder_id, "actor_id": actor.user_id}
        )

        case_id = self._case_id_of(reminder)
        if case_id:
            self.activity.record_entity(
                case_id, actor.user_id, ActivityType.REMINDER_CREATED,
                f"Reminder created: {reminder.title}",
                EntityType.CASE, case_id,
                metadata={"reminder_id": reminder.reminder_id}
            )
        return reminder

    # =========================================================================
    # Queries
    # =========================================================================

    def list_reminders(
        self,
        actor: ActorContext,
        status: Optional[ReminderStatus] = None,
        reminder_type: Optional[ReminderType] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Reminder], int]:
        return self.repo.list_for_user(
            actor.user_id,
            status=status.value if status else None,
            reminder_type=reminder_type.value if reminder_type else None,
            page=page,
            limit=limit
        )

    def get_reminder(self, actor: ActorContext, reminder_id: str) -> Reminder:
        reminder = self.repo.get_or_raise(reminder_id)
        self.guard.require_reminder_view(actor, reminder)
        return reminder

    def upcoming(self, actor: ActorContext, days: Optional[int] = None) -> List[Reminder]:
        now = utc_now()
        until = add_days(now, days or settings.upcoming_reminder_days)
        return self.repo.upcoming(actor.user_id, now, until)

    def case_reminders(self, actor: ActorContext, case_id: str) -> List[Reminder]:
        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_view(actor, case)
        return self.repo.for_entity(EntityType.CASE, case_id)

    # =========================================================================
    # Mutations
    # =========================================================================

    def update_reminder(self, actor: ActorContext, reminder_id: str, updates: Dict[str, Any]) -> Reminder:
        reminder = self.repo.get_or_raise(reminder_id)
        self.guard.require_reminder_creator(actor, reminder)

        if reminder.status != ReminderStatus.SCHEDULED:
            raise InvalidStateError(
                "Cannot update reminder that is not scheduled",
                details={"status": reminder.status.value}
            )
        if "reminder_date" in updates and not is_future(updates["reminder_date"]):
            raise ValidationError("Reminder date must be in the future")

        updates = dict(updates)
        if "recipients" in updates:
            recipient_ids = list(dict.fromkeys(updates["recipients"] or []))
            if not recipient_ids:
                raise ValidationError("At least one recipient is required")
            updates["recipients"] = [
                reminder.get_recipient(user_id) or ReminderRecipient(user_id=user_id)
                for user_id in recipient_ids
            ]

        updated, changes = apply_updates(reminder, updates, UPDATABLE_FIELDS)
        updated.updated_at = utc_now()
        self.repo.save(updated)
        logger.info(
            f"Reminder updated ({len(changes)} fields)",
            extra={"reminder_id": reminder_id, "actor_id": actor.user_id}
        )
        return updated

    def cancel_reminder(self, actor: ActorContext, reminder_id: str) -> Reminder:
        reminder = self.repo.get_or_raise(reminder_id)
        self.guard.require_reminder_creator(actor, reminder)

        reminder.cancel()
        reminder.updated_at = utc_now()
        self.repo.save(reminder)

        logger.info("Reminder cancelled", extra={"reminder_id": reminder_id})
        case_id = self._case_id_of(reminder)
        if case_id:
            self.activity.record_entity(
                case_id, actor.user_id, ActivityType.REMINDER_CANCELLED,
                f"Reminder cancelled: {reminder.title}",
                EntityType.CASE, case_id,
                metadata={"reminder_id": reminder_id}
            )
        return reminder

    def snooze(
        self,
        actor: ActorContext,
        reminder_id: str,
        minutes: int = DEFAULT_SNOOZE_MINUTES
    ) -> Reminder:
        if minutes <= 0:
            raise ValidationError("Snooze duration must be positive", details={"minutes": minutes})

        reminder = self.repo.get_or_raise(reminder_id)
        self.guard.require_reminder_recipient(actor, reminder)

        reminder.snooze(actor.user_id, minutes)
        reminder.updated_at = utc_now()
        return self.repo.save(reminder)

    def dismiss(self, actor: ActorContext, reminder_id: str) -> Reminder:
        reminder = self.repo.get_or_raise(reminder_id)
        self.guard.require_reminder_recipient(actor, reminder)

        reminder.dismiss(actor.user_id)
        reminder.updated_at = utc_now()
        return self.repo.save(reminder)

    def delete_old(self, actor: ActorContext, days: Optional[int] = None) -> int:
        self.guard.require_admin(actor, "purge old reminders")
        cutoff = add_days(utc_now(), -(days or settings.reminder_retention_days))
        return self.repo.delete_finished_before(cutoff)

    def cancel_by_entity(self, entity_type: EntityType, entity_id: str) -> int:
        """Internal: cancel scheduled reminders pointing at a removed entity"""
        cancelled = self.repo.cancel_for_entity(entity_type, entity_id)
        if cancelled:
            logger.info(f"Cancelled {cancelled} reminders for {entity_type.value} {entity_id}")
        return cancelled
