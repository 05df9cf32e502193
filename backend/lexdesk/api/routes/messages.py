"""Message API Routes - Direct, case and connection messaging"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from .schemas import SendMessageRequest, ActionResponse
from ..deps import get_current_user_dep, get_message_service
from ...domain.models import ActorContext, Message
from ...services.message_service import MessageService
from ...services.common import page_envelope

router = APIRouter()


@router.post("", response_model=Message, status_code=201)
async def send_message(
    request: SendMessageRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: MessageService = Depends(get_message_service)
):
    """Send to exactly one of a receiver, a case or a connection"""
    return service.send_message(actor, **request.model_dump())


@router.get("")
async def list_messages(
    case_id: Optional[str] = Query(None),
    connection_id: Optional[str] = Query(None),
    unread_only: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: MessageService = Depends(get_message_service)
) -> Dict[str, Any]:
    items, total = service.list_messages(
        actor, case_id=case_id, connection_id=connection_id,
        unread_only=unread_only, page=page, limit=limit
    )
    return page_envelope(items, total, page, limit)


@router.get("/unread-count")
async def unread_count(
    actor: ActorContext = Depends(get_current_user_dep),
    service: MessageService = Depends(get_message_service)
) -> Dict[str, int]:
    return {"unread_count": service.unread_count(actor)}


@router.post("/mark-all-read", response_model=ActionResponse)
async def mark_all_read(
    case_id: Optional[str] = Query(None),
    actor: ActorContext = Depends(get_current_user_dep),
    service: MessageService = Depends(get_message_service)
):
    count = service.mark_all_read(actor, case_id)
    return ActionResponse(message="Messages marked as read", count=count)


@router.get("/case/{case_id}")
async def case_messages(
    case_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: MessageService = Depends(get_message_service)
) -> Dict[str, Any]:
    items, total = service.case_messages(actor, case_id, page=page, limit=limit)
    return page_envelope(items, total, page, limit)


@router.get("/connection/{connection_id}")
async def connection_messages(
    connection_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: MessageService = Depends(get_message_service)
) -> Dict[str, Any]:
    items, total = service.connection_messages(actor, connection_id, page=page, limit=limit)
    return page_envelope(items, total, page, limit)


@router.get("/conversation/{user_id}")
async def conversation(
    user_id: str,
    case_id: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: MessageService = Depends(get_message_service)
) -> Dict[str, Any]:
    """Direct messages with a connected user"""
    items, total = service.conversation(actor, user_id, case_id=case_id, page=page, limit=limit)
    return page_envelope(items, total, page, limit)


@router.get("/{message_id}", response_model=Message)
async def get_message(
    message_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: MessageService = Depends(get_message_service)
):
    return service.get_message(actor, message_id)


@router.post("/{message_id}/read", response_model=Message)
async def mark_read(
    message_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: MessageService = Depends(get_message_service)
):
    return service.mark_read(actor, message_id)


@router.delete("/{message_id}", response_model=ActionResponse)
async def delete_message(
    message_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: MessageService = Depends(get_message_service)
):
    service.delete_message(actor, message_id)
    return ActionResponse(message="Message deleted")
