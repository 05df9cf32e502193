"""Reminder API Routes - Scheduled reminders and recipient actions"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query

from .schemas import CreateReminderRequest, UpdateReminderRequest, SnoozeRequest, ActionResponse
from ..deps import get_current_user_dep, get_reminder_service
from ...domain.models import ActorContext, Reminder
from ...domain.enums import ReminderStatus, ReminderType
from ...services.reminder_service import ReminderService
from ...services.common import page_envelope

router = APIRouter()


@router.get("")
async def list_reminders(
    status: Optional[ReminderStatus] = Query(None),
    reminder_type: Optional[ReminderType] = Query(None, alias="type"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ReminderService = Depends(get_reminder_service)
) -> Dict[str, Any]:
    """Reminders where the caller is creator or recipient"""
    items, total = service.list_reminders(
        actor, status=status, reminder_type=reminder_type, page=page, limit=limit
    )
    return page_envelope(items, total, page, limit)


@router.post("", response_model=Reminder, status_code=201)
async def create_reminder(
    request: CreateReminderRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ReminderService = Depends(get_reminder_service)
):
    data = request.model_dump(exclude={"recipients", "related_entity", "recurrence"})
    return service.create_reminder(
        actor,
        recipient_ids=request.recipients,
        related_entity=request.related_entity,
        recurrence=request.recurrence,
        **data
    )


@router.get("/upcoming", response_model=List[Reminder])
async def upcoming_reminders(
    days: int = Query(7, ge=1, le=365),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ReminderService = Depends(get_reminder_service)
):
    return service.upcoming(actor, days)


@router.get("/case/{case_id}", response_model=List[Reminder])
async def case_reminders(
    case_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ReminderService = Depends(get_reminder_service)
):
    return service.case_reminders(actor, case_id)


@router.delete("/cleanup", response_model=ActionResponse)
async def delete_old_reminders(
    days: Optional[int] = Query(None, ge=1),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ReminderService = Depends(get_reminder_service)
):
    """Admin: purge finished reminders older than the retention window"""
    deleted = service.delete_old(actor, days)
    return ActionResponse(message="Old reminders deleted", count=deleted)


@router.get("/{reminder_id}", response_model=Reminder)
async def get_reminder(
    reminder_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ReminderService = Depends(get_reminder_service)
):
    return service.get_reminder(actor, reminder_id)


@router.patch("/{reminder_id}", response_model=Reminder)
async def update_reminder(
    reminder_id: str,
    request: UpdateReminderRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ReminderService = Depends(get_reminder_service)
):
    return service.update_reminder(actor, reminder_id, request.model_dump(exclude_unset=True))


@router.post("/{reminder_id}/cancel", response_model=Reminder)
async def cancel_reminder(
    reminder_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ReminderService = Depends(get_reminder_service)
):
    return service.cancel_reminder(actor, reminder_id)


@router.post("/{reminder_id}/snooze", response_model=Reminder)
async def snooze_reminder(
    reminder_id: str,
    request: Optional[SnoozeRequest] = None,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ReminderService = Depends(get_reminder_service)
):
    minutes = request.minutes if request else SnoozeRequest().minutes
    return service.snooze(actor, reminder_id, minutes)


@router.post("/{reminder_id}/dismiss", response_model=Reminder)
async def dismiss_reminder(
    reminder_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ReminderService = Depends(get_reminder_service)
):
    return service.dismiss(actor, reminder_id)
