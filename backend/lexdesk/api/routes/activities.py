"""Activity API Routes - Case audit feed"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query

from ..deps import get_current_user_dep, get_activity_service
from ...domain.models import ActorContext, Activity
from ...domain.enums import ActivityType
from ...services.activity_service import ActivityService
from ...services.common import page_envelope

router = APIRouter()


@router.get("/recent", response_model=List[Activity])
async def recent_activities(
    limit: int = Query(20, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ActivityService = Depends(get_activity_service)
):
    """Latest activity across the caller's cases"""
    return service.recent(actor, limit)


@router.get("/mine")
async def my_activities(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ActivityService = Depends(get_activity_service)
) -> Dict[str, Any]:
    items, total = service.my_activities(actor, page=page, limit=limit)
    return page_envelope(items, total, page, limit)


@router.get("/case/{case_id}")
async def case_activities(
    case_id: str,
    activity_type: Optional[ActivityType] = Query(None, alias="type"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ActivityService = Depends(get_activity_service)
) -> Dict[str, Any]:
    items, total = service.case_activities(
        actor, case_id, activity_type=activity_type, page=page, limit=limit
    )
    return page_envelope(items, total, page, limit)


@router.get("/case/{case_id}/stats")
async def case_activity_stats(
    case_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ActivityService = Depends(get_activity_service)
) -> Dict[str, Any]:
    return service.case_stats(actor, case_id)


@router.get("/{activity_id}", response_model=Activity)
async def get_activity(
    activity_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ActivityService = Depends(get_activity_service)
):
    return service.get_activity(actor, activity_id)


@router.post("/{activity_id}/hide", response_model=Activity)
async def hide_activity(
    activity_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ActivityService = Depends(get_activity_service)
):
    """Admin: remove an entry from non-admin feeds"""
    return service.hide_activity(actor, activity_id)
