"""Document Service - Document metadata, sharing and lifecycle"""
from typing import Any, Dict, List, Optional
from pymongo.database import Database

from ..domain.models import ActorContext, Document, AccessPermissions
from ..domain.enums import (
    DocumentCategory, DocumentStatus, ActivityType, ActivityImportance, EntityType
)
from ..domain.errors import ValidationError, DocumentNotFoundError
from ..engine.access_guard import AccessGuard
from ..engine.activity_logger import ActivityLogger
from ..repositories.case_repo import CaseRepository
from ..repositories.document_repo import DocumentRepository
from ..repositories.note_repo import NoteRepository
from .common import apply_updates
from ..utils.idgen import generate_document_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)

UPDATABLE_FIELDS = (
    "name", "description", "category", "sub_category", "tags", "confidential", "status",
)


class DocumentService:
    """
    Service for document metadata.

    File bytes live in external storage; this service keeps the record,
    its access permissions and its soft-delete state.
    """

    def __init__(self, database: Optional[Database] = None):
        self.repo = DocumentRepository(database)
        self.case_repo = CaseRepository(database)
        self.note_repo = NoteRepository(database)
        self.activity = ActivityLogger(database)
        self.guard = AccessGuard(case_lookup=self.case_repo.get)

    def _log(self, document: Document, actor: ActorContext, activity_type: ActivityType, description: str, **kwargs) -> None:
        if document.case_id:
            self.activity.record_entity(
                document.case_id, actor.user_id, activity_type, description,
                EntityType.DOCUMENT, document.document_id, **kwargs
            )

    # =========================================================================
    # Upload
    # =========================================================================

    def upload(
        self,
        actor: ActorContext,
        name: str,
        category: DocumentCategory,
        case_id: Optional[str] = None,
        note_id: Optional[str] = None,
        timeline_event_id: Optional[str] = None,
        description: str = "",
        sub_category: Optional[str] = None,
        file_url: Optional[str] = None,
        file_type: Optional[str] = None,
        file_size: Optional[int] = None,
        tags: Optional[List[str]] = None,
        confidential: bool = False,
        access_permissions: Optional[AccessPermissions] = None
    ) -> Document:
        if not name or category is None:
            raise ValidationError("Document name and category are required")

        if case_id:
            case = self.case_repo.get_or_raise(case_id)
            self.guard.require_case_view(actor, case)
        if note_id:
            note = self.note_repo.get_or_raise(note_id)
            self.guard.require_note_owner(actor, note)

        now = utc_now()
        document = Document(
            document_id=generate_document_id(),
            name=name,
            description=description,
            category=category,
            sub_category=sub_category,
            case_id=case_id,
            note_id=note_id,
            timeline_event_id=timeline_event_id,
            file_url=file_url,
            file_type=file_type,
            file_size=file_size,
            uploaded_by=actor.user_id,
            uploaded_at=now,
            access_permissions=access_permissions or AccessPermissions(),
            status=DocumentStatus.APPROVED,
            tags=tags or [],
            confidential=confidential,
            updated_at=now
        )
        self.repo.insert(document)
        if case_id:
            self.case_repo.adjust_counter(case_id, "total_documents", 1)

        logger.info(
            f"Document uploaded: {name}",
            extra={"document_id": document.document_id, "case_id": case_id}
        )
        self._log(document, actor, ActivityType.DOCUMENT_UPLOADED, f"Document uploaded: {name}")
        return document

    # =========================================================================
    # Reads
    # =========================================================================

    def get_document(self, actor: ActorContext, document_id: str) -> Document:
        document = self.repo.get_or_raise(document_id)
        if document.is_deleted and not actor.is_admin:
            raise DocumentNotFoundError(
                "Document not found", details={"document_id": document_id}
            )
        self.guard.require_document_view(actor, document)
        return document

    def record_download(self, actor: ActorContext, document_id: str) -> Document:
        document = self.get_document(actor, document_id)
        document.record_download(actor.user_id)
        self.repo.save(document)

        self._log(
            document, actor, ActivityType.DOCUMENT_DOWNLOADED,
            f"Document downloaded: {document.name}",
            importance=ActivityImportance.LOW
        )
        return document

    def list_case_documents(
        self,
        actor: ActorContext,
        case_id: str,
        category: Optional[DocumentCategory] = None
    ) -> List[Document]:
        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_view(actor, case)
        documents = self.repo.for_case(case_id, category=category.value if category else None)
        return [doc for doc in documents if self.guard.can_view_document(actor, doc)]

    def my_documents(self, actor: ActorContext) -> List[Document]:
        return self.repo.uploaded_by(actor.user_id)

    # =========================================================================
    # Mutations
    # =========================================================================

    def update_document(self, actor: ActorContext, document_id: str, updates: Dict[str, Any]) -> Document:
        document = self.get_document(actor, document_id)
        self.guard.require_document_edit(actor, document)

        updated, changes = apply_updates(document, updates, UPDATABLE_FIELDS)
        if not changes:
            return document
        updated.updated_at = utc_now()
        self.repo.save(updated)

        self._log(
            updated, actor, ActivityType.DOCUMENT_UPDATED,
            f"Document updated: {updated.name}", changes=changes
        )
        return updated

    def update_access_permissions(
        self,
        actor: ActorContext,
        document_id: str,
        access_permissions: AccessPermissions
    ) -> Document:
        document = self.get_document(actor, document_id)
        self.guard.require_document_edit(actor, document)

        document.access_permissions = access_permissions
        document.updated_at = utc_now()
        self.repo.save(document)

        self._log(
            document, actor, ActivityType.DOCUMENT_SHARED,
            f"Sharing updated: {document.name}",
            metadata={
                "is_public": access_permissions.is_public,
                "allowed_users": [grant.user_id for grant in access_permissions.allowed_users],
            }
        )
        return document

    def delete_document(self, actor: ActorContext, document_id: str, permanent: bool = False) -> None:
        """Soft delete; permanent removal only for admins"""
        document = self.get_document(actor, document_id)
        self.guard.require_document_delete(actor, document)

        if permanent:
            self.guard.require_admin(actor, "permanently delete documents")
            self.repo.delete(document_id)
            if document.case_id and not document.is_deleted:
                self.case_repo.adjust_counter(document.case_id, "total_documents", -1)
        else:
            if document.is_deleted:
                return
            document.soft_delete(actor.user_id)
            document.updated_at = utc_now()
            self.repo.save(document)
            if document.case_id:
                self.case_repo.adjust_counter(document.case_id, "total_documents", -1)

        logger.info(
            f"Document {'purged' if permanent else 'deleted'}",
            extra={"document_id": document_id, "actor_id": actor.user_id}
        )
        self._log(
            document, actor, ActivityType.DOCUMENT_DELETED,
            f"Document deleted: {document.name}",
            metadata={"permanent": permanent}
        )

    def restore_document(self, actor: ActorContext, document_id: str) -> Document:
        self.guard.require_admin(actor, "restore documents")
        document = self.repo.get_or_raise(document_id)
        if not document.is_deleted:
            raise ValidationError("Document is not deleted", details={"document_id": document_id})

        document.restore()
        document.updated_at = utc_now()
        self.repo.save(document)
        if document.case_id:
            self.case_repo.adjust_counter(document.case_id, "total_documents", 1)
        return document
