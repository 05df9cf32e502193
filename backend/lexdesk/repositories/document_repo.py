"""Document Repository - Data access for document metadata"""
from typing import List, Optional

from .base_repo import EntityRepository
from ..domain.models import Document
from ..domain.errors import DocumentNotFoundError


class DocumentRepository(EntityRepository[Document]):
    """Repository for document metadata"""

    COLLECTION_NAME = "documents"
    ID_FIELD = "document_id"
    MODEL = Document
    NOT_FOUND = DocumentNotFoundError
    ENTITY_LABEL = "Document"

    def for_case(
        self,
        case_id: str,
        category: Optional[str] = None,
        include_deleted: bool = False
    ) -> List[Document]:
        query = {"case_id": case_id}
        if not include_deleted:
            query["is_deleted"] = False
        if category:
            query["category"] = category
        return self.find(query, sort=[("uploaded_at", -1)])

    def uploaded_by(self, user_id: str) -> List[Document]:
        return self.find(
            {"uploaded_by": user_id, "is_deleted": False},
            sort=[("uploaded_at", -1)]
        )
