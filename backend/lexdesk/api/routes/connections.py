"""Connection API Routes - Client to advocate/paralegal connections"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query

from .schemas import ConnectionRequestBody, ConnectionResponseBody
from ..deps import get_current_user_dep, get_connection_service
from ...domain.models import ActorContext, Connection, User
from ...domain.enums import ConnectionStatus, ConnectionType, UserRole
from ...services.connection_service import ConnectionService

router = APIRouter()


@router.post("/request", response_model=Connection, status_code=201)
async def send_request(
    request: ConnectionRequestBody,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ConnectionService = Depends(get_connection_service)
):
    """Clients ask an advocate or paralegal to connect"""
    return service.request(actor, request.recipient_id, request.connection_type, request.message)


@router.get("/search", response_model=List[User])
async def search_users(
    role: UserRole = Query(...),
    q: Optional[str] = Query(None, max_length=100),
    limit: int = Query(20, ge=1, le=100),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ConnectionService = Depends(get_connection_service)
):
    return service.search_users(role, q, limit)


@router.get("/received", response_model=List[Connection])
async def received_requests(
    actor: ActorContext = Depends(get_current_user_dep),
    service: ConnectionService = Depends(get_connection_service)
):
    return service.received_requests(actor)


@router.get("/sent", response_model=List[Connection])
async def sent_requests(
    status: Optional[ConnectionStatus] = Query(None),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ConnectionService = Depends(get_connection_service)
):
    return service.sent_requests(actor, status)


@router.get("", response_model=List[Connection])
async def my_connections(
    connection_type: Optional[ConnectionType] = Query(None, alias="type"),
    actor: ActorContext = Depends(get_current_user_dep),
    service: ConnectionService = Depends(get_connection_service)
):
    return service.my_connections(actor, connection_type)


@router.get("/stats")
async def connection_stats(
    actor: ActorContext = Depends(get_current_user_dep),
    service: ConnectionService = Depends(get_connection_service)
) -> Dict[str, Any]:
    return service.stats(actor)


@router.get("/{connection_id}", response_model=Connection)
async def connection_details(
    connection_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ConnectionService = Depends(get_connection_service)
):
    return service.details(actor, connection_id)


@router.post("/{connection_id}/accept", response_model=Connection)
async def accept_request(
    connection_id: str,
    request: Optional[ConnectionResponseBody] = None,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ConnectionService = Depends(get_connection_service)
):
    return service.accept(actor, connection_id, request.message if request else None)


@router.post("/{connection_id}/reject", response_model=Connection)
async def reject_request(
    connection_id: str,
    request: Optional[ConnectionResponseBody] = None,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ConnectionService = Depends(get_connection_service)
):
    return service.reject(actor, connection_id, request.message if request else None)


@router.delete("/{connection_id}", response_model=Connection)
async def remove_connection(
    connection_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: ConnectionService = Depends(get_connection_service)
):
    """Either party may end an active connection; the pair stays blocked"""
    return service.remove(actor, connection_id)
