"""Case API Routes - Case files, parties and lifecycle"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from .schemas import CreateCaseRequest, UpdateCaseRequest, CloseCaseRequest, AssignParalegalRequest, ActionResponse
from ..deps import get_current_user_dep, get_case_service
from ...domain.models import ActorContext, Case
from ...domain.enums import CaseStatus, CaseCategory, CasePriority
from ...services.case_service import CaseService
from ...services.common import page_envelope
from ...utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("")
async def list_cases(
    status: Optional[CaseStatus] = Query(None),
    category: Optional[CaseCategory] = Query(None),
    priority: Optional[CasePriority] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
) -> Dict[str, Any]:
    """Cases the caller is a party to (all cases for admins)"""
    items, total = service.list_cases(
        actor, status=status, category=category, priority=priority,
        search=search, page=page, limit=limit
    )
    return page_envelope(items, total, page, limit)


@router.post("", response_model=Case, status_code=201)
async def create_case(
    request: CreateCaseRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
):
    """
    Open a new case.

    Clients name the advocate, advocates name the client, admins name both.
    Non-admin callers need an accepted advocate connection with the other party.
    """
    data = request.model_dump(exclude_unset=True)
    return service.create_case(actor, **data)


@router.get("/stats")
async def case_stats(
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
) -> Dict[str, Any]:
    return service.stats(actor)


@router.get("/{case_id}", response_model=Case)
async def get_case(
    case_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
):
    return service.get_case(actor, case_id)


@router.patch("/{case_id}", response_model=Case)
async def update_case(
    case_id: str,
    request: UpdateCaseRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
):
    return service.update_case(actor, case_id, request.model_dump(exclude_unset=True))


@router.post("/{case_id}/paralegals", response_model=Case)
async def assign_paralegal(
    case_id: str,
    request: AssignParalegalRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
):
    return service.assign_paralegal(actor, case_id, request.paralegal_id)


@router.delete("/{case_id}/paralegals/{paralegal_id}", response_model=Case)
async def remove_paralegal(
    case_id: str,
    paralegal_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
):
    return service.remove_paralegal(actor, case_id, paralegal_id)


@router.post("/{case_id}/close", response_model=Case)
async def close_case(
    case_id: str,
    request: CloseCaseRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
):
    return service.close_case(actor, case_id, request.outcome)


@router.post("/{case_id}/archive", response_model=Case)
async def archive_case(
    case_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
):
    return service.set_archived(actor, case_id, True)


@router.post("/{case_id}/unarchive", response_model=Case)
async def unarchive_case(
    case_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
):
    return service.set_archived(actor, case_id, False)


@router.delete("/{case_id}", response_model=ActionResponse)
async def delete_case(
    case_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: CaseService = Depends(get_case_service)
):
    """Hard delete; admin only"""
    service.delete_case(actor, case_id)
    logger.info(f"Case deleted: {case_id}", extra={"actor": actor.user_id})
    return ActionResponse(message="Case deleted")
