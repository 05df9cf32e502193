"""Base Repository - load/save plumbing shared by entity repositories"""
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar
from pydantic import BaseModel
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from .mongo_client import get_collection, to_document
from ..domain.errors import AlreadyExistsError, NotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class EntityRepository(Generic[ModelT]):
    """
    Stores one entity type per collection, keyed by the entity's id field.

    Writers follow load -> check -> mutate -> save; save replaces the whole
    document, which is atomic per document.
    """

    COLLECTION_NAME: str = ""
    ID_FIELD: str = ""
    MODEL: Type[ModelT]
    NOT_FOUND: Type[NotFoundError] = NotFoundError
    ENTITY_LABEL: str = "Entity"
    DUPLICATE_MESSAGE: str = ""

    def __init__(self, database: Optional[Database] = None):
        self._collection: Collection = get_collection(self.COLLECTION_NAME, database)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _to_model(self, doc: Dict[str, Any]) -> ModelT:
        doc.pop("_id", None)
        return self.MODEL.model_validate(doc)

    def _to_models(self, cursor) -> List[ModelT]:
        return [self._to_model(doc) for doc in cursor]

    # ------------------------------------------------------------------
    # Store contract
    # ------------------------------------------------------------------

    def insert(self, entity: ModelT) -> ModelT:
        try:
            self._collection.insert_one(to_document(entity, self.ID_FIELD))
        except DuplicateKeyError:
            # A unique index caught what the service-level check missed
            logger.warning(
                f"Duplicate {self.ENTITY_LABEL.lower()} rejected: {getattr(entity, self.ID_FIELD)}",
                extra={"action": "insert"}
            )
            raise AlreadyExistsError(
                self.DUPLICATE_MESSAGE or f"{self.ENTITY_LABEL} already exists",
                details={self.ID_FIELD: getattr(entity, self.ID_FIELD)}
            )
        logger.info(
            f"Created {self.ENTITY_LABEL.lower()}: {getattr(entity, self.ID_FIELD)}",
            extra={"action": "insert"}
        )
        return entity

    def get(self, entity_id: str) -> Optional[ModelT]:
        doc = self._collection.find_one({"_id": entity_id})
        if doc:
            return self._to_model(doc)
        return None

    def get_or_raise(self, entity_id: str) -> ModelT:
        entity = self.get(entity_id)
        if entity is None:
            raise self.NOT_FOUND(
                f"{self.ENTITY_LABEL} not found",
                details={self.ID_FIELD: entity_id}
            )
        return entity

    def save(self, entity: ModelT) -> ModelT:
        """Persist the full in-memory state of an already loaded entity"""
        entity_id = getattr(entity, self.ID_FIELD)
        result = self._collection.replace_one(
            {"_id": entity_id}, to_document(entity, self.ID_FIELD)
        )
        if result.matched_count == 0:
            raise self.NOT_FOUND(
                f"{self.ENTITY_LABEL} not found",
                details={self.ID_FIELD: entity_id}
            )
        return entity

    def delete(self, entity_id: str) -> bool:
        result = self._collection.delete_one({"_id": entity_id})
        return result.deleted_count > 0

    def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        return self._collection.count_documents(query or {})

    def find(
        self,
        query: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0
    ) -> List[ModelT]:
        cursor = self._collection.find(query)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return self._to_models(cursor)

    def find_page(
        self,
        query: Dict[str, Any],
        page: int = 1,
        limit: int = 20,
        sort_field: str = "created_at"
    ) -> Tuple[List[ModelT], int]:
        """One page of results plus the total match count"""
        page = max(page, 1)
        items = self.find(
            query,
            sort=[(sort_field, DESCENDING)],
            skip=(page - 1) * limit,
            limit=limit
        )
        return items, self.count(query)

    def count_by(self, field: str, query: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
        """Group matching documents by a field value"""
        pipeline = [
            {"$match": query or {}},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        ]
        return {
            str(row["_id"]): row["count"]
            for row in self._collection.aggregate(pipeline)
            if row["_id"] is not None
        }
