"""Repository modules - Data access layer"""
from .mongo_client import get_database, get_collection
from .user_repo import UserRepository
from .case_repo import CaseRepository
from .connection_repo import ConnectionRepository
from .task_repo import TaskRepository
from .reminder_repo import ReminderRepository
from .timeline_repo import TimelineRepository
from .document_repo import DocumentRepository
from .message_repo import MessageRepository
from .notification_repo import NotificationRepository
from .activity_repo import ActivityRepository
from .note_repo import NoteRepository

__all__ = [
    "get_database",
    "get_collection",
    "UserRepository",
    "CaseRepository",
    "ConnectionRepository",
    "TaskRepository",
    "ReminderRepository",
    "TimelineRepository",
    "DocumentRepository",
    "MessageRepository",
    "NotificationRepository",
    "ActivityRepository",
    "NoteRepository",
]
