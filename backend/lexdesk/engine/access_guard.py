"""Access Guard - Authorization enforcement for service operations"""
from typing import Callable, Optional

from . import access_control as rules
from .access_control import AccessDecision
from ..domain.models import (
    ActorContext, Case, Connection, Document, Message, Notification, Task, Reminder,
    Activity, Note
)
from ..domain.enums import UserRole
from ..domain.errors import PermissionDeniedError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AccessGuard:
    """
    Turns evaluator results into rejections.

    can_* methods return booleans and never raise; require_* methods raise
    PermissionDeniedError with a message naming the failed check.
    Deferred decisions are resolved against the owning case through
    case_lookup, which returns None for a dangling reference.
    """

    def __init__(self, case_lookup: Optional[Callable[[str], Optional[Case]]] = None):
        self._case_lookup = case_lookup

    def _deny(self, actor: ActorContext, message: str, **details) -> PermissionDeniedError:
        logger.warning(
            f"Permission denied: {message}",
            extra={"actor_id": actor.user_id, "action": "deny"}
        )
        return PermissionDeniedError(message, details=details)

    def _case_allows(self, case_id: Optional[str], actor: ActorContext) -> bool:
        if not case_id or self._case_lookup is None:
            return False
        return rules.check_case_view(self._case_lookup(case_id), actor.user_id, actor.role)

    # ------------------------------------------------------------------
    # Case
    # ------------------------------------------------------------------

    def can_view_case(self, actor: ActorContext, case: Case) -> bool:
        return rules.can_view_case(case, actor.user_id, actor.role)

    def require_case_view(self, actor: ActorContext, case: Case) -> None:
        if not self.can_view_case(actor, case):
            raise self._deny(actor, "You do not have access to this case", case_id=case.case_id)

    def require_case_edit(self, actor: ActorContext, case: Case) -> None:
        if not rules.can_edit_case(case, actor.user_id, actor.role):
            raise self._deny(
                actor, "Only the case advocate can modify this case", case_id=case.case_id
            )

    def require_case_advocate(self, actor: ActorContext, case: Case) -> None:
        """Timeline and task authoring: the case's advocate or an admin"""
        if not (actor.is_admin or (
            actor.role == UserRole.ADVOCATE and case.advocate_id == actor.user_id
        )):
            raise self._deny(
                actor, "Only the case advocate can perform this action", case_id=case.case_id
            )

    # ------------------------------------------------------------------
    # Document
    # ------------------------------------------------------------------

    def document_decision(self, actor: ActorContext, document: Document) -> AccessDecision:
        return rules.can_view_document(document, actor.user_id, actor.role)

    def can_view_document(self, actor: ActorContext, document: Document) -> bool:
        return rules.resolve(
            self.document_decision(actor, document),
            lambda: self._case_allows(document.case_id, actor)
        )

    def require_document_view(self, actor: ActorContext, document: Document) -> None:
        if not self.can_view_document(actor, document):
            raise self._deny(
                actor, "You do not have access to this document",
                document_id=document.document_id
            )

    def require_document_edit(self, actor: ActorContext, document: Document) -> None:
        if not rules.can_edit_document(document, actor.user_id, actor.role):
            raise self._deny(
                actor, "You do not have permission to edit this document",
                document_id=document.document_id
            )

    def require_document_delete(self, actor: ActorContext, document: Document) -> None:
        if not rules.can_delete_document(document, actor.user_id, actor.role):
            raise self._deny(
                actor, "You do not have permission to delete this document",
                document_id=document.document_id
            )

    # ------------------------------------------------------------------
    # Message / Notification / Connection / Note
    # ------------------------------------------------------------------

    def can_view_message(self, actor: ActorContext, message: Message) -> bool:
        return rules.can_view_message(message, actor.user_id, actor.role)

    def require_message_delete(self, actor: ActorContext, message: Message) -> None:
        if not rules.can_delete_message(message, actor.user_id, actor.role):
            raise self._deny(
                actor, "You can only delete your own messages", message_id=message.message_id
            )

    def require_notification_owner(self, actor: ActorContext, notification: Notification) -> None:
        if not rules.can_view_notification(notification, actor.user_id, actor.role):
            raise self._deny(
                actor, "This notification belongs to another user",
                notification_id=notification.notification_id
            )

    def require_connection_party(self, actor: ActorContext, connection: Connection) -> None:
        if not rules.is_connection_party(connection, actor.user_id, actor.role):
            raise self._deny(
                actor, "You are not part of this connection",
                connection_id=connection.connection_id
            )

    def require_note_owner(self, actor: ActorContext, note: Note) -> None:
        if not rules.can_edit_note(note, actor.user_id, actor.role):
            raise self._deny(actor, "You do not have access to this note", note_id=note.note_id)

    # ------------------------------------------------------------------
    # Task
    # ------------------------------------------------------------------

    def require_task_view(self, actor: ActorContext, task: Task) -> None:
        if not rules.can_view_task(task, actor.user_id, actor.role):
            raise self._deny(actor, "You do not have access to this task", task_id=task.task_id)

    def require_task_edit(self, actor: ActorContext, task: Task) -> None:
        if not rules.can_edit_task(task, actor.user_id, actor.role):
            raise self._deny(
                actor, "Only the assigning advocate can modify this task", task_id=task.task_id
            )

    def require_task_status_update(self, actor: ActorContext, task: Task) -> None:
        if not rules.can_update_task_status(task, actor.user_id, actor.role):
            raise self._deny(
                actor, "You cannot update the status of this task", task_id=task.task_id
            )

    # ------------------------------------------------------------------
    # Reminder
    # ------------------------------------------------------------------

    def require_reminder_view(self, actor: ActorContext, reminder: Reminder) -> None:
        if not rules.can_view_reminder(reminder, actor.user_id, actor.role):
            raise self._deny(
                actor, "You do not have access to this reminder",
                reminder_id=reminder.reminder_id
            )

    def require_reminder_creator(self, actor: ActorContext, reminder: Reminder) -> None:
        """Strict creator check used for updates (admin included via evaluator)"""
        if not rules.can_edit_reminder(reminder, actor.user_id, actor.role):
            raise self._deny(
                actor, "Only the creator can modify this reminder",
                reminder_id=reminder.reminder_id
            )

    def require_reminder_recipient(self, actor: ActorContext, reminder: Reminder) -> None:
        if not rules.is_reminder_recipient(reminder, actor.user_id, actor.role):
            raise self._deny(
                actor, "You are not a recipient of this reminder",
                reminder_id=reminder.reminder_id
            )

    # ------------------------------------------------------------------
    # Activity
    # ------------------------------------------------------------------

    def can_view_activity(self, actor: ActorContext, activity: Activity) -> bool:
        return rules.resolve(
            rules.can_view_activity(activity, actor.user_id, actor.role),
            lambda: self._case_allows(activity.case_id, actor)
        )

    def require_activity_view(self, actor: ActorContext, activity: Activity) -> None:
        if not self.can_view_activity(actor, activity):
            raise self._deny(
                actor, "You do not have access to this activity",
                activity_id=activity.activity_id
            )

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def require_admin(self, actor: ActorContext, action: str) -> None:
        if not actor.is_admin:
            raise self._deny(actor, f"Only administrators can {action}")
