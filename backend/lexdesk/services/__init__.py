"""Service modules - Business logic layer"""
from .case_service import CaseService
from .task_service import TaskService
from .reminder_service import ReminderService
from .timeline_service import TimelineService
from .document_service import DocumentService
from .message_service import MessageService
from .notification_service import NotificationService
from .connection_service import ConnectionService
from .activity_service import ActivityService
from .note_service import NoteService
from .user_service import UserService

__all__ = [
    "CaseService",
    "TaskService",
    "ReminderService",
    "TimelineService",
    "DocumentService",
    "MessageService",
    "NotificationService",
    "ConnectionService",
    "ActivityService",
    "NoteService",
    "UserService",
]
