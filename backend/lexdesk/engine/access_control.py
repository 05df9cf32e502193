"""Access Control - Per-entity authorization rules

Every evaluator takes the entity plus the actor's id and role and never
raises. Admin satisfies every check and is evaluated first.

Rules:
- Case: client, advocate, assigned paralegals view; only the advocate edits
- Document: uploader, public flag, allowed roles, allowed users, else the case
- Message: sender or receiver; case/connection context is checked by the caller
- Notification: owning user
- Task: assigner edits; assigner and assignee view and update status
- Reminder: creator edits; recipients may only snooze/dismiss
- Activity: hidden entries are admin-only; the actor, else the case
- Note: owner
"""
from enum import Enum
from typing import Callable, Optional

from ..domain.models import (
    Case, Connection, Document, Message, Notification, Task, Reminder, Activity, Note
)
from ..domain.enums import UserRole, DocumentPermission


class AccessDecision(Enum):
    """Outcome of an evaluator that may depend on case access"""
    ALLOWED = "allowed"
    DENIED = "denied"
    DEFER_TO_CASE_ACCESS = "defer_to_case_access"


def resolve(decision: AccessDecision, case_check: Callable[[], bool]) -> bool:
    """Fold a decision into a boolean, consulting the case only on deferral"""
    if decision is AccessDecision.ALLOWED:
        return True
    if decision is AccessDecision.DENIED:
        return False
    return case_check()


def _is_admin(role: UserRole) -> bool:
    return role == UserRole.ADMIN


# ============================================================================
# Case
# ============================================================================

def can_view_case(case: Case, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    return (
        case.client_id == user_id
        or case.advocate_id == user_id
        or user_id in case.paralegal_ids
    )


def can_edit_case(case: Case, user_id: str, role: UserRole) -> bool:
    # The client cannot edit their own case
    if _is_admin(role):
        return True
    return case.advocate_id == user_id


# ============================================================================
# Document
# ============================================================================

def can_view_document(document: Document, user_id: str, role: UserRole) -> AccessDecision:
    if _is_admin(role):
        return AccessDecision.ALLOWED
    if document.uploaded_by == user_id:
        return AccessDecision.ALLOWED

    permissions = document.access_permissions
    if permissions.is_public:
        return AccessDecision.ALLOWED
    if role in permissions.allowed_roles:
        return AccessDecision.ALLOWED
    if permissions.grant_for(user_id) is not None:
        return AccessDecision.ALLOWED

    if document.case_id:
        return AccessDecision.DEFER_TO_CASE_ACCESS
    return AccessDecision.DENIED


def can_edit_document(document: Document, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    if document.uploaded_by == user_id:
        return True
    grant = document.access_permissions.grant_for(user_id)
    return grant in (DocumentPermission.EDIT, DocumentPermission.DELETE)


def can_delete_document(document: Document, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    if document.uploaded_by == user_id:
        return True
    return document.access_permissions.grant_for(user_id) == DocumentPermission.DELETE


# ============================================================================
# Message
# ============================================================================

def can_view_message(message: Message, user_id: str, role: UserRole) -> bool:
    """Direct participants only; case and connection scopes need a separate check"""
    if _is_admin(role):
        return True
    return message.sender_id == user_id or message.receiver_id == user_id


def can_delete_message(message: Message, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    return message.sender_id == user_id


# ============================================================================
# Notification
# ============================================================================

def can_view_notification(notification: Notification, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    return notification.user_id == user_id


# ============================================================================
# Task
# ============================================================================

def can_view_task(task: Task, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    return task.assigned_by == user_id or task.assigned_to == user_id


def can_edit_task(task: Task, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    return task.assigned_by == user_id


def can_update_task_status(task: Task, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    return task.assigned_by == user_id or task.assigned_to == user_id


# ============================================================================
# Reminder
# ============================================================================

def can_edit_reminder(reminder: Reminder, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    return reminder.created_by == user_id


def is_reminder_recipient(reminder: Reminder, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    return reminder.get_recipient(user_id) is not None


def can_view_reminder(reminder: Reminder, user_id: str, role: UserRole) -> bool:
    return (
        can_edit_reminder(reminder, user_id, role)
        or is_reminder_recipient(reminder, user_id, role)
    )


# ============================================================================
# Activity
# ============================================================================

def can_view_activity(activity: Activity, user_id: str, role: UserRole) -> AccessDecision:
    if _is_admin(role):
        return AccessDecision.ALLOWED
    if not activity.is_visible:
        return AccessDecision.DENIED
    if activity.user_id == user_id:
        return AccessDecision.ALLOWED
    return AccessDecision.DEFER_TO_CASE_ACCESS


# ============================================================================
# Connection & Note
# ============================================================================

def is_connection_party(connection: Connection, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    return connection.involves(user_id)


def can_edit_note(note: Note, user_id: str, role: UserRole) -> bool:
    if _is_admin(role):
        return True
    return note.user_id == user_id


def check_case_view(case: Optional[Case], user_id: str, role: UserRole) -> bool:
    """Case view check tolerant of a dangling case reference"""
    if case is None:
        return _is_admin(role)
    return can_view_case(case, user_id, role)
