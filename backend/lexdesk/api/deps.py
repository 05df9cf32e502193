"""API Dependencies - Common dependencies for routes"""
from typing import Optional
from fastapi import Depends, Header, HTTPException, Request, status
from pymongo.database import Database

from ..domain.models import ActorContext
from ..domain.errors import AuthenticationError
from ..repositories.mongo_client import get_database
from ..scheduler.reminder_poller import ReminderPoller
from ..services.activity_service import ActivityService
from ..services.case_service import CaseService
from ..services.connection_service import ConnectionService
from ..services.document_service import DocumentService
from ..services.message_service import MessageService
from ..services.note_service import NoteService
from ..services.notification_service import NotificationService
from ..services.reminder_service import ReminderService
from ..services.task_service import TaskService
from ..services.timeline_service import TimelineService
from ..services.user_service import UserService
from ..utils.jwt import get_current_user as _jwt_get_current_user  # Internal use only
from ..utils.logger import set_correlation_id
from ..utils.idgen import generate_correlation_id


async def get_correlation_id_dep(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id")
) -> str:
    """
    Get or generate correlation ID for request tracing

    If client provides X-Correlation-Id, use it.
    Otherwise generate a new one.
    """
    correlation_id = x_correlation_id or generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


async def get_current_user_dep(
    authorization: Optional[str] = Header(None)
) -> ActorContext:
    """
    Dependency to get current user from Authorization header

    Validates JWT token and extracts user information.

    Raises:
        HTTPException: 401 if token is invalid or missing
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": {"code": "AUTHENTICATION_ERROR", "message": "Authorization header is missing"}},
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        return _jwt_get_current_user(authorization)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.to_dict(),
            headers={"WWW-Authenticate": "Bearer"}
        )


# =============================================================================
# Storage & services
# =============================================================================

def get_db() -> Database:
    """Application database; overridden in tests"""
    return get_database()


def get_case_service(db: Database = Depends(get_db)) -> CaseService:
    return CaseService(db)


def get_task_service(db: Database = Depends(get_db)) -> TaskService:
    return TaskService(db)


def get_reminder_service(db: Database = Depends(get_db)) -> ReminderService:
    return ReminderService(db)


def get_timeline_service(db: Database = Depends(get_db)) -> TimelineService:
    return TimelineService(db)


def get_document_service(db: Database = Depends(get_db)) -> DocumentService:
    return DocumentService(db)


def get_message_service(db: Database = Depends(get_db)) -> MessageService:
    return MessageService(db)


def get_notification_service(db: Database = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_connection_service(db: Database = Depends(get_db)) -> ConnectionService:
    return ConnectionService(db)


def get_activity_service(db: Database = Depends(get_db)) -> ActivityService:
    return ActivityService(db)


def get_note_service(db: Database = Depends(get_db)) -> NoteService:
    return NoteService(db)


def get_user_service(db: Database = Depends(get_db)) -> UserService:
    return UserService(db)


def get_poller(request: Request) -> ReminderPoller:
    """The process's reminder poller, created in the app lifespan"""
    poller = getattr(request.app.state, "poller", None)
    if poller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": {"code": "SCHEDULER_UNAVAILABLE", "message": "Reminder poller is not configured"}}
        )
    return poller
