"""API Routes module"""
from fastapi import APIRouter

from .cases import router as cases_router
from .tasks import router as tasks_router
from .reminders import router as reminders_router
from .timeline import router as timeline_router
from .documents import router as documents_router
from .messages import router as messages_router
from .notifications import router as notifications_router
from .connections import router as connections_router
from .activities import router as activities_router
from .notes import router as notes_router
from .admin import router as admin_router

# Main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(cases_router, prefix="/cases", tags=["Cases"])
api_router.include_router(tasks_router, prefix="/tasks", tags=["Tasks"])
api_router.include_router(reminders_router, prefix="/reminders", tags=["Reminders"])
api_router.include_router(timeline_router, prefix="/timeline", tags=["Timeline"])
api_router.include_router(documents_router, prefix="/documents", tags=["Documents"])
api_router.include_router(messages_router, prefix="/messages", tags=["Messages"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(connections_router, prefix="/connections", tags=["Connections"])
api_router.include_router(activities_router, prefix="/activities", tags=["Activities"])
api_router.include_router(notes_router, prefix="/notes", tags=["Notes"])
api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])

__all__ = ["api_router"]
