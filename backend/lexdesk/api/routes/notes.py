"""Note API Routes - Private notes"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from .schemas import CreateNoteRequest, UpdateNoteRequest, ActionResponse
from ..deps import get_current_user_dep, get_note_service
from ...domain.models import ActorContext, Note
from ...domain.enums import NoteCategory, NoteStatus
from ...services.note_service import NoteService
from ...services.common import page_envelope

router = APIRouter()


@router.post("", response_model=Note, status_code=201)
async def create_note(
    request: CreateNoteRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: NoteService = Depends(get_note_service)
):
    return service.create_note(actor, **request.model_dump())


@router.get("")
async def list_notes(
    category: Optional[NoteCategory] = Query(None),
    status: Optional[NoteStatus] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: NoteService = Depends(get_note_service)
) -> Dict[str, Any]:
    items, total = service.list_notes(
        actor, category=category, status=status, search=search, page=page, limit=limit
    )
    return page_envelope(items, total, page, limit)


@router.get("/{note_id}", response_model=Note)
async def get_note(
    note_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: NoteService = Depends(get_note_service)
):
    return service.get_note(actor, note_id)


@router.patch("/{note_id}", response_model=Note)
async def update_note(
    note_id: str,
    request: UpdateNoteRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: NoteService = Depends(get_note_service)
):
    return service.update_note(actor, note_id, request.model_dump(exclude_unset=True))


@router.post("/{note_id}/archive", response_model=Note)
async def archive_note(
    note_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: NoteService = Depends(get_note_service)
):
    return service.archive_note(actor, note_id)


@router.delete("/{note_id}", response_model=ActionResponse)
async def delete_note(
    note_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: NoteService = Depends(get_note_service)
):
    service.delete_note(actor, note_id)
    return ActionResponse(message="Note deleted")
