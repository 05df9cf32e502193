"""Timeline API Routes - Case events, hearings and milestones"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from .schemas import (
    CreateEventRequest, CreateHearingRequest, UpdateEventRequest, CompleteHearingRequest,
    PostponeHearingRequest, MilestoneRequest, ActionResponse
)
from ..deps import get_current_user_dep, get_timeline_service
from ...domain.models import ActorContext, TimelineEvent
from ...domain.enums import TimelineEventType, TimelineEventStatus
from ...services.timeline_service import TimelineService

router = APIRouter()


# =============================================================================
# Authoring
# =============================================================================

@router.post("/events", response_model=TimelineEvent, status_code=201)
async def add_event(
    request: CreateEventRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    data = request.model_dump(exclude={"location", "participants"})
    return service.add_event(actor, location=request.location, participants=request.participants, **data)


@router.post("/hearings", response_model=TimelineEvent, status_code=201)
async def add_hearing(
    request: CreateHearingRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    """Schedule a hearing; it becomes the case's next hearing date"""
    data = request.model_dump(exclude={"location", "participants"})
    return service.add_hearing(actor, location=request.location, participants=request.participants, **data)


@router.patch("/events/{event_id}", response_model=TimelineEvent)
async def update_event(
    event_id: str,
    request: UpdateEventRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.update_event(actor, event_id, request.model_dump(exclude_unset=True))


@router.post("/hearings/{event_id}/complete", response_model=TimelineEvent)
async def complete_hearing(
    event_id: str,
    request: CompleteHearingRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.complete_hearing(actor, event_id, **request.model_dump())


@router.post("/hearings/{event_id}/postpone", response_model=TimelineEvent)
async def postpone_hearing(
    event_id: str,
    request: PostponeHearingRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.postpone_hearing(actor, event_id, request.reason, request.new_date)


@router.post("/events/{event_id}/cancel", response_model=TimelineEvent)
async def cancel_event(
    event_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.cancel_event(actor, event_id)


@router.post("/events/{event_id}/milestone", response_model=TimelineEvent)
async def mark_milestone(
    event_id: str,
    request: MilestoneRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.mark_milestone(actor, event_id, request.milestone_type)


@router.delete("/events/{event_id}", response_model=ActionResponse)
async def delete_event(
    event_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    """Hide the event from non-admin readers"""
    service.delete_event(actor, event_id)
    return ActionResponse(message="Event deleted")


# =============================================================================
# Reading
# =============================================================================

@router.get("/events/{event_id}", response_model=TimelineEvent)
async def get_event(
    event_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.get_event(actor, event_id)


@router.get("/case/{case_id}", response_model=List[TimelineEvent])
async def case_timeline(
    case_id: str,
    event_type: Optional[TimelineEventType] = Query(None),
    status: Optional[TimelineEventStatus] = Query(None),
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.case_timeline(actor, case_id, event_type=event_type, status=status)


@router.get("/case/{case_id}/hearings", response_model=List[TimelineEvent])
async def case_hearings(
    case_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.hearings(actor, case_id)


@router.get("/case/{case_id}/milestones", response_model=List[TimelineEvent])
async def case_milestones(
    case_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.milestones(actor, case_id)


@router.get("/case/{case_id}/upcoming", response_model=List[TimelineEvent])
async def case_upcoming(
    case_id: str,
    limit: int = Query(10, ge=1, le=50),
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.upcoming(actor, case_id, limit)


@router.get("/case/{case_id}/next-hearing", response_model=Optional[TimelineEvent])
async def next_hearing(
    case_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TimelineService = Depends(get_timeline_service)
):
    return service.next_hearing(actor, case_id)
