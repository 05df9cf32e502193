"""Task Service - Case task assignment and tracking"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
from pymongo.database import Database

from ..domain.models import ActorContext, Task, TaskComment, TaskAttachment, RelatedEntity
from ..domain.enums import (
    UserRole, TaskStatus, TaskType, Priority, ReminderType, ActivityType,
    NotificationType, EntityType
)
from ..domain.errors import ValidationError
from ..domain.results import BestEffortResult
from ..engine.access_guard import AccessGuard
from ..engine.activity_logger import ActivityLogger
from ..repositories.case_repo import CaseRepository
from ..repositories.task_repo import TaskRepository
from ..repositories.user_repo import UserRepository
from .notification_service import NotificationService
from .reminder_service import ReminderService
from .common import apply_updates
from ..utils.idgen import generate_task_id
from ..utils.time import utc_now, is_future
from ..utils.logger import get_logger

logger = get_logger(__name__)

REMINDER_LEAD = timedelta(days=1)

UPDATABLE_FIELDS = (
    "title", "description", "task_type", "priority", "due_date",
    "estimated_hours", "actual_hours", "notes",
)


class TaskService:
    """Service for task operations"""

    def __init__(self, database: Optional[Database] = None):
        self.task_repo = TaskRepository(database)
        self.case_repo = CaseRepository(database)
        self.user_repo = UserRepository(database)
        self.activity = ActivityLogger(database)
        self.notifications = NotificationService(database)
        self.reminders = ReminderService(database)
        self.guard = AccessGuard(case_lookup=self.case_repo.get)

    # =========================================================================
    # Creation
    # =========================================================================

    def create_task(
        self,
        actor: ActorContext,
        case_id: str,
        title: str,
        assigned_to: str,
        due_date: datetime,
        description: str = "",
        task_type: TaskType = TaskType.OTHER,
        priority: Priority = Priority.NORMAL,
        estimated_hours: Optional[float] = None,
        notes: Optional[str] = None
    ) -> Task:
        """Assign a new task on a case to a paralegal"""
        if not title or not title.strip():
            raise ValidationError("Title is required")
        if not assigned_to:
            raise ValidationError("Assignee is required")

        now = utc_now()
        if not is_future(due_date, now):
            raise ValidationError(
                "Due date must be in the future", details={"due_date": str(due_date)}
            )

        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_advocate(actor, case)

        assignee = self.user_repo.get_with_role(assigned_to, UserRole.PARALEGAL)
        if assignee is None:
            raise ValidationError(
                "Tasks can only be assigned to paralegals",
                details={"assigned_to": assigned_to}
            )

        task = Task(
            task_id=generate_task_id(),
            case_id=case_id,
            title=title.strip(),
            description=description,
            task_type=task_type,
            assigned_by=actor.user_id,
            assigned_to=assigned_to,
            priority=priority,
            due_date=due_date,
            estimated_hours=estimated_hours,
            notes=notes,
            created_at=now,
            updated_at=now
        )
        self.task_repo.insert(task)
        self.case_repo.adjust_counter(case_id, "total_tasks", 1)

        logger.info(
            f"Task assigned to {assigned_to}",
            extra={"task_id": task.task_id, "case_id": case_id, "actor_id": actor.user_id}
        )

        self.notifications.notify(
            assigned_to,
            NotificationType.TASK_ASSIGNED,
            "New Task Assigned",
            f'You have been assigned: "{task.title}"',
            entity_type=EntityType.TASK,
            entity_id=task.task_id,
            action_url=f"/tasks/{task.task_id}",
            priority=priority
        )
        self._schedule_deadline_reminder(actor, task)
        self.activity.record_entity(
            case_id, actor.user_id, ActivityType.TASK_CREATED,
            f"Task created: {task.title}",
            EntityType.TASK, task.task_id,
            metadata={"assigned_to": assigned_to}
        )
        return task

    def _schedule_deadline_reminder(self, actor: ActorContext, task: Task) -> BestEffortResult:
        """One-day-before reminder for the assignee, skipped when already inside that day"""
        reminder_date = task.due_date - REMINDER_LEAD
        if not is_future(reminder_date):
            return BestEffortResult.succeeded(None)
        try:
            reminder = self.reminders.create_reminder(
                actor,
                title="Task Deadline Reminder",
                message=f'Task "{task.title}" is due tomorrow',
                reminder_type=ReminderType.TASK_REMINDER,
                reminder_date=reminder_date,
                recipient_ids=[task.assigned_to],
                related_entity=RelatedEntity(entity_type=EntityType.TASK, entity_id=task.task_id),
                event_date=task.due_date,
                priority=task.priority,
                action_url=f"/tasks/{task.task_id}"
            )
        except Exception as e:
            logger.warning(
                f"Task reminder scheduling failed: {e}", extra={"task_id": task.task_id}
            )
            return BestEffortResult.failed(e)
        return BestEffortResult.succeeded(reminder)

    # =========================================================================
    # Queries
    # =========================================================================

    def list_tasks(
        self,
        actor: ActorContext,
        status: Optional[TaskStatus] = None,
        priority: Optional[Priority] = None,
        case_id: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Task], int]:
        return self.task_repo.list_tasks(
            actor.user_id,
            actor.role,
            status=status.value if status else None,
            priority=priority.value if priority else None,
            case_id=case_id,
            page=page,
            limit=limit
        )

    def get_task(self, actor: ActorContext, task_id: str) -> Task:
        task = self.task_repo.get_or_raise(task_id)
        self.guard.require_task_view(actor, task)
        return task

    def case_tasks(self, actor: ActorContext, case_id: str) -> List[Task]:
        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_view(actor, case)
        return self.task_repo.for_case(case_id)

    def overdue_tasks(self, actor: ActorContext) -> List[Task]:
        return self.task_repo.overdue(actor.user_id, actor.role, utc_now())

    def stats(self, actor: ActorContext) -> Dict[str, Any]:
        scope = TaskRepository.scope_query(actor.user_id, actor.role)
        return {
            "total": self.task_repo.count(scope),
            "by_status": self.task_repo.count_by("status", scope),
            "by_priority": self.task_repo.count_by("priority", scope),
            "overdue": len(self.overdue_tasks(actor)),
        }

    # =========================================================================
    # Mutations
    # =========================================================================

    def update_task(self, actor: ActorContext, task_id: str, updates: Dict[str, Any]) -> Task:
        task = self.task_repo.get_or_raise(task_id)
        self.guard.require_task_edit(actor, task)

        if "due_date" in updates and not is_future(updates["due_date"]):
            raise ValidationError("Due date must be in the future")

        updated, changes = apply_updates(task, updates, UPDATABLE_FIELDS)
        if not changes:
            return task
        updated.updated_at = utc_now()
        return self.task_repo.save(updated)

    def update_status(self, actor: ActorContext, task_id: str, status: TaskStatus) -> Task:
        task = self.task_repo.get_or_raise(task_id)
        self.guard.require_task_status_update(actor, task)

        previous = task.status
        task.update_status(status)
        task.updated_at = utc_now()
        self.task_repo.save(task)

        logger.info(
            f"Task status {previous.value} -> {status.value}",
            extra={"task_id": task_id, "status": status.value}
        )
        self._after_status_change(actor, task, previous)
        return task

    def update_progress(self, actor: ActorContext, task_id: str, progress: int) -> Task:
        """Reject out-of-range input; the entity derives status from the value"""
        if progress is None or not 0 <= progress <= 100:
            raise ValidationError(
                "Progress must be between 0 and 100", details={"progress": progress}
            )

        task = self.task_repo.get_or_raise(task_id)
        self.guard.require_task_status_update(actor, task)

        previous = task.status
        task.update_progress(progress)
        task.updated_at = utc_now()
        self.task_repo.save(task)

        if task.status != previous:
            self._after_status_change(actor, task, previous)
        return task

    def _after_status_change(self, actor: ActorContext, task: Task, previous: TaskStatus) -> None:
        self.activity.record_entity(
            task.case_id, actor.user_id, ActivityType.TASK_STATUS_CHANGED,
            f"Task status changed from {previous.value} to {task.status.value}",
            EntityType.TASK, task.task_id,
            metadata={"from": previous.value, "to": task.status.value}
        )
        if task.status == TaskStatus.COMPLETED and actor.user_id != task.assigned_by:
            self.notifications.notify(
                task.assigned_by,
                NotificationType.TASK_COMPLETED,
                "Task Completed",
                f'"{task.title}" has been completed',
                entity_type=EntityType.TASK,
                entity_id=task.task_id,
                action_url=f"/tasks/{task.task_id}"
            )

    def delete_task(self, actor: ActorContext, task_id: str) -> None:
        task = self.task_repo.get_or_raise(task_id)
        self.guard.require_task_edit(actor, task)

        self.task_repo.delete(task_id)
        self.case_repo.adjust_counter(task.case_id, "total_tasks", -1)
        self.reminders.cancel_by_entity(EntityType.TASK, task_id)

        self.activity.record_entity(
            task.case_id, actor.user_id, ActivityType.TASK_DELETED,
            f"Task deleted: {task.title}",
            EntityType.TASK, task_id
        )

    def add_comment(self, actor: ActorContext, task_id: str, comment: str) -> TaskComment:
        if not comment or not comment.strip():
            raise ValidationError("Comment cannot be empty")

        task = self.task_repo.get_or_raise(task_id)
        self.guard.require_task_view(actor, task)

        entry = task.add_comment(actor.user_id, comment.strip())
        task.updated_at = utc_now()
        self.task_repo.save(task)

        other_party = task.assigned_to if actor.user_id == task.assigned_by else task.assigned_by
        if other_party != actor.user_id:
            self.notifications.notify(
                other_party,
                NotificationType.TASK_COMMENT,
                "New Task Comment",
                f'{actor.name} commented on "{task.title}"',
                entity_type=EntityType.TASK,
                entity_id=task_id,
                action_url=f"/tasks/{task_id}"
            )
        self.activity.record_entity(
            task.case_id, actor.user_id, ActivityType.COMMENT_ADDED,
            f"Comment added to task {task.title}",
            EntityType.TASK, task_id
        )
        return entry

    def add_attachment(self, actor: ActorContext, task_id: str, name: str, url: str) -> TaskAttachment:
        if not name or not url:
            raise ValidationError("Attachment name and url are required")

        task = self.task_repo.get_or_raise(task_id)
        self.guard.require_task_view(actor, task)

        attachment = task.add_attachment(name, url, actor.user_id)
        task.updated_at = utc_now()
        self.task_repo.save(task)
        return attachment
