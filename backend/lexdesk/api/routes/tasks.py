"""Task API Routes - Advocate-to-paralegal delegation"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query

from .schemas import (
    CreateTaskRequest, UpdateTaskRequest, TaskStatusRequest, TaskProgressRequest,
    CommentRequest, AttachmentRequest, ActionResponse
)
from ..deps import get_current_user_dep, get_task_service
from ...domain.models import ActorContext, Task, TaskComment, TaskAttachment
from ...domain.enums import TaskStatus, Priority
from ...services.task_service import TaskService
from ...services.common import page_envelope

router = APIRouter()


@router.get("")
async def list_tasks(
    status: Optional[TaskStatus] = Query(None),
    priority: Optional[Priority] = Query(None),
    case_id: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
) -> Dict[str, Any]:
    items, total = service.list_tasks(
        actor, status=status, priority=priority, case_id=case_id, page=page, limit=limit
    )
    return page_envelope(items, total, page, limit)


@router.post("", response_model=Task, status_code=201)
async def create_task(
    request: CreateTaskRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
):
    """Assign a task to a paralegal on the case; caller must be the case advocate"""
    return service.create_task(actor, **request.model_dump())


@router.get("/stats")
async def task_stats(
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
) -> Dict[str, Any]:
    return service.stats(actor)


@router.get("/overdue", response_model=List[Task])
async def overdue_tasks(
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
):
    return service.overdue_tasks(actor)


@router.get("/case/{case_id}", response_model=List[Task])
async def case_tasks(
    case_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
):
    return service.case_tasks(actor, case_id)


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
):
    return service.get_task(actor, task_id)


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    request: UpdateTaskRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
):
    return service.update_task(actor, task_id, request.model_dump(exclude_unset=True))


@router.patch("/{task_id}/status", response_model=Task)
async def update_task_status(
    task_id: str,
    request: TaskStatusRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
):
    return service.update_status(actor, task_id, request.status)


@router.patch("/{task_id}/progress", response_model=Task)
async def update_task_progress(
    task_id: str,
    request: TaskProgressRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
):
    """Progress 100 completes the task; 1..99 moves a pending task in progress"""
    return service.update_progress(actor, task_id, request.progress)


@router.post("/{task_id}/comments", response_model=TaskComment, status_code=201)
async def add_comment(
    task_id: str,
    request: CommentRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
):
    return service.add_comment(actor, task_id, request.comment)


@router.post("/{task_id}/attachments", response_model=TaskAttachment, status_code=201)
async def add_attachment(
    task_id: str,
    request: AttachmentRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
):
    return service.add_attachment(actor, task_id, request.name, request.url)


@router.delete("/{task_id}", response_model=ActionResponse)
async def delete_task(
    task_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: TaskService = Depends(get_task_service)
):
    service.delete_task(actor, task_id)
    return ActionResponse(message="Task deleted")
