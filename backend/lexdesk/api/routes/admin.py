"""Admin API Routes - Reminder scheduler control and user registration"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from ..deps import get_current_user_dep, get_poller, get_user_service
from ...domain.models import ActorContext, User
from ...domain.enums import UserRole
from ...engine.access_guard import AccessGuard
from ...scheduler.reminder_poller import ReminderPoller
from ...services.user_service import UserService
from ...utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()

guard = AccessGuard()


class RegisterUserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    role: UserRole
    phone: Optional[str] = None
    specialization: Optional[str] = None


# ============================================================================
# Scheduler
# ============================================================================

@router.get("/scheduler")
async def scheduler_status(
    actor: ActorContext = Depends(get_current_user_dep),
    poller: ReminderPoller = Depends(get_poller)
) -> Dict[str, Any]:
    guard.require_admin(actor, "view scheduler status")
    return poller.status()


@router.post("/scheduler/start")
async def start_scheduler(
    actor: ActorContext = Depends(get_current_user_dep),
    poller: ReminderPoller = Depends(get_poller)
) -> Dict[str, Any]:
    """Start the reminder poller; already running is a no-op"""
    guard.require_admin(actor, "start the scheduler")
    poller.start()
    logger.info("Scheduler start requested", extra={"user_id": actor.user_id, "action": "start"})
    return poller.status()


@router.post("/scheduler/stop")
async def stop_scheduler(
    actor: ActorContext = Depends(get_current_user_dep),
    poller: ReminderPoller = Depends(get_poller)
) -> Dict[str, Any]:
    guard.require_admin(actor, "stop the scheduler")
    poller.stop()
    logger.info("Scheduler stop requested", extra={"user_id": actor.user_id, "action": "stop"})
    return poller.status()


@router.post("/scheduler/run")
async def run_scheduler_once(
    actor: ActorContext = Depends(get_current_user_dep),
    poller: ReminderPoller = Depends(get_poller)
) -> Dict[str, Any]:
    """Process due reminders now, outside the interval"""
    guard.require_admin(actor, "run the scheduler")
    result = poller.tick()
    return {
        "processed": result.processed,
        "sent": result.sent,
        "failed": result.failed,
        "notifications_created": result.notifications_created,
    }


# ============================================================================
# Users
# ============================================================================

@router.post("/users", response_model=User, status_code=201)
async def register_user(
    request: RegisterUserRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: UserService = Depends(get_user_service)
):
    """Create a user profile; credentials live with the auth service"""
    guard.require_admin(actor, "register users")
    return service.register(**request.model_dump())


@router.get("/users/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: UserService = Depends(get_user_service)
):
    guard.require_admin(actor, "view users")
    return service.get_user(user_id)
