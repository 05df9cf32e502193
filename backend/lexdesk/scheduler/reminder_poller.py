"""Reminder Poller - Periodic delivery of due reminders

Every interval the poller loads scheduled reminders whose reminder_date has
arrived and, for each one:
- creates one in-app notification per still-pending recipient
- marks the reminder sent (recipients flip to sent)
- on any delivery error marks the whole reminder failed; notifications
  already created for other recipients are kept and nothing is retried
- records a reminder_sent activity when the reminder points at a case

The poller is a plain instance with its own start/stop lifecycle. It does
no cross-process locking, so run one per deployment.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from pymongo.database import Database

from ..config.settings import settings
from ..domain.models import Reminder
from ..domain.enums import NotificationType, ActivityType, EntityType
from ..engine.activity_logger import ActivityLogger
from ..repositories.reminder_repo import ReminderRepository
from ..services.notification_service import NotificationService
from ..utils.idgen import generate_correlation_id
from ..utils.logger import get_logger, get_context_logger, set_correlation_id
from ..utils.time import utc_now, format_iso

logger = get_logger(__name__)

NOTIFICATION_MESSAGE_LIMIT = 500
CLEANUP_INTERVAL_MINUTES = 60


@dataclass
class PollResult:
    """Counters for one poll cycle"""
    processed: int = 0
    sent: int = 0
    failed: int = 0
    notifications_created: int = 0


class ReminderPoller:
    """APScheduler-driven reminder delivery"""

    def __init__(
        self,
        database: Optional[Database] = None,
        interval_seconds: Optional[int] = None
    ):
        self.reminder_repo = ReminderRepository(database)
        self.notification_service = NotificationService(database)
        self.activity = ActivityLogger(database)
        self.interval_seconds = interval_seconds or settings.reminder_poll_interval_seconds
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._is_running = False
        self._last_run_at: Optional[datetime] = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Start the scheduler; must be called with a running event loop"""
        if self._is_running:
            logger.warning("Reminder poller already running")
            return

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self._run_tick,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id="process_reminders",
            name="Send due reminders",
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        self.scheduler.add_job(
            self._cleanup_expired_notifications,
            trigger=IntervalTrigger(minutes=CLEANUP_INTERVAL_MINUTES),
            id="cleanup_expired_notifications",
            name="Purge expired notifications",
            replace_existing=True
        )
        self.scheduler.start()
        self._is_running = True
        logger.info(
            "Reminder poller started",
            extra={"action": "start", "status": f"every {self.interval_seconds}s"}
        )

    def stop(self) -> None:
        if not self._is_running:
            logger.warning("Reminder poller is not running")
            return
        if self.scheduler:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
        self._is_running = False
        logger.info("Reminder poller stopped", extra={"action": "stop"})

    @property
    def is_running(self) -> bool:
        return self._is_running

    def status(self) -> Dict[str, Any]:
        return {
            "running": self._is_running,
            "interval_seconds": self.interval_seconds,
            "last_run_at": format_iso(self._last_run_at) if self._last_run_at else None,
            "message": "Scheduler is running" if self._is_running else "Scheduler is stopped",
        }

    # =========================================================================
    # Jobs
    # =========================================================================

    async def _run_tick(self) -> None:
        set_correlation_id(generate_correlation_id())
        try:
            self.tick()
        except Exception as e:
            logger.error(f"Reminder poll cycle failed: {e}", exc_info=True)

    async def _cleanup_expired_notifications(self) -> None:
        try:
            self.notification_service.repo.delete_expired()
        except Exception as e:
            logger.error(f"Expired notification cleanup failed: {e}", exc_info=True)

    def tick(self, now: Optional[datetime] = None) -> PollResult:
        """Process every reminder due at `now`; one failure never stops the rest"""
        now = now or utc_now()
        self._last_run_at = now
        result = PollResult()

        reminders = self.reminder_repo.find_due(now)
        if not reminders:
            return result

        logger.info(f"Processing {len(reminders)} due reminder(s)")
        for reminder in reminders:
            log = get_context_logger(__name__, reminder_id=reminder.reminder_id)
            result.processed += 1
            try:
                result.notifications_created += self._deliver(reminder, result)
            except Exception as e:
                result.failed += 1
                log.error(f"Failed to send reminder: {e}")
                self._mark_failed(reminder)
                continue

            result.sent += 1
            log.info(f"Reminder sent: {reminder.title}", extra={"status": reminder.status.value})
            if reminder.is_related_to_case():
                self.activity.record_entity(
                    reminder.related_entity.entity_id,
                    reminder.created_by,
                    ActivityType.REMINDER_SENT,
                    f"Reminder sent: {reminder.title}",
                    EntityType.CASE,
                    reminder.related_entity.entity_id,
                    metadata={
                        "reminder_id": reminder.reminder_id,
                        "recipients": [r.user_id for r in reminder.recipients],
                    }
                )

        return result

    def _deliver(self, reminder: Reminder, result: PollResult) -> int:
        """Fan out to pending recipients, then persist the sent state"""
        notification_type = NotificationType(reminder.reminder_type.value)
        created = 0
        try:
            for recipient in reminder.pending_recipients():
                self.notification_service.create(
                    user_id=recipient.user_id,
                    notification_type=notification_type,
                    title=reminder.title,
                    message=reminder.message[:NOTIFICATION_MESSAGE_LIMIT],
                    related_entity=reminder.related_entity,
                    action_url=reminder.action_url,
                    priority=reminder.priority,
                    action_text=reminder.action_text
                )
                created += 1

            reminder.send()
            reminder.updated_at = utc_now()
            self.reminder_repo.save(reminder)
        except Exception:
            # Partial fan-out is kept and counted
            result.notifications_created += created
            raise
        return created

    def _mark_failed(self, reminder: Reminder) -> None:
        try:
            reminder.mark_failed()
            reminder.updated_at = utc_now()
            self.reminder_repo.save(reminder)
        except Exception as e:
            logger.error(
                f"Could not mark reminder failed: {e}",
                extra={"reminder_id": reminder.reminder_id}
            )
