"""Document API Routes - Case documents, sharing and soft delete"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from .schemas import UploadDocumentRequest, UpdateDocumentRequest, ActionResponse
from ..deps import get_current_user_dep, get_document_service
from ...domain.models import ActorContext, Document, AccessPermissions
from ...domain.enums import DocumentCategory
from ...services.document_service import DocumentService

router = APIRouter()


@router.post("", response_model=Document, status_code=201)
async def upload_document(
    request: UploadDocumentRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: DocumentService = Depends(get_document_service)
):
    """Register an uploaded file against a case or note"""
    data = request.model_dump(exclude={"access_permissions"})
    return service.upload(actor, access_permissions=request.access_permissions, **data)


@router.get("/mine", response_model=List[Document])
async def my_documents(
    actor: ActorContext = Depends(get_current_user_dep),
    service: DocumentService = Depends(get_document_service)
):
    return service.my_documents(actor)


@router.get("/case/{case_id}", response_model=List[Document])
async def case_documents(
    case_id: str,
    category: Optional[DocumentCategory] = Query(None),
    actor: ActorContext = Depends(get_current_user_dep),
    service: DocumentService = Depends(get_document_service)
):
    """Documents on the case the caller is allowed to view"""
    return service.list_case_documents(actor, case_id, category)


@router.get("/{document_id}", response_model=Document)
async def get_document(
    document_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: DocumentService = Depends(get_document_service)
):
    return service.get_document(actor, document_id)


@router.post("/{document_id}/download", response_model=Document)
async def download_document(
    document_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: DocumentService = Depends(get_document_service)
):
    """Count a download and return the document (with its file URL)"""
    return service.record_download(actor, document_id)


@router.patch("/{document_id}", response_model=Document)
async def update_document(
    document_id: str,
    request: UpdateDocumentRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    service: DocumentService = Depends(get_document_service)
):
    return service.update_document(actor, document_id, request.model_dump(exclude_unset=True))


@router.put("/{document_id}/permissions", response_model=Document)
async def update_permissions(
    document_id: str,
    request: AccessPermissions,
    actor: ActorContext = Depends(get_current_user_dep),
    service: DocumentService = Depends(get_document_service)
):
    return service.update_access_permissions(actor, document_id, request)


@router.delete("/{document_id}", response_model=ActionResponse)
async def delete_document(
    document_id: str,
    permanent: bool = Query(False),
    actor: ActorContext = Depends(get_current_user_dep),
    service: DocumentService = Depends(get_document_service)
):
    """Soft delete by default; `permanent` removes the record"""
    service.delete_document(actor, document_id, permanent=permanent)
    return ActionResponse(message="Document deleted permanently" if permanent else "Document deleted")


@router.post("/{document_id}/restore", response_model=Document)
async def restore_document(
    document_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    service: DocumentService = Depends(get_document_service)
):
    return service.restore_document(actor, document_id)
