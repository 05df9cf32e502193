"""Message Repository - Data access for messages"""
from typing import Any, Dict, List, Optional, Tuple

from .base_repo import EntityRepository
from ..domain.models import Message
from ..domain.errors import MessageNotFoundError
from ..utils.time import utc_now


class MessageRepository(EntityRepository[Message]):
    """Repository for message operations"""

    COLLECTION_NAME = "messages"
    ID_FIELD = "message_id"
    MODEL = Message
    NOT_FOUND = MessageNotFoundError
    ENTITY_LABEL = "Message"

    def list_for_user(
        self,
        user_id: str,
        case_id: Optional[str] = None,
        connection_id: Optional[str] = None,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Message], int]:
        query: Dict[str, Any] = {
            "is_deleted": False,
            "$or": [{"sender_id": user_id}, {"receiver_id": user_id}],
        }
        if case_id:
            query["case_id"] = case_id
        if connection_id:
            query["connection_id"] = connection_id
        if unread_only:
            query["is_read"] = False
            query.pop("$or")
            query["receiver_id"] = user_id
        return self.find_page(query, page=page, limit=limit)

    def for_case(self, case_id: str, page: int = 1, limit: int = 50) -> Tuple[List[Message], int]:
        return self.find_page({"case_id": case_id, "is_deleted": False}, page=page, limit=limit)

    def for_connection(self, connection_id: str, page: int = 1, limit: int = 50) -> Tuple[List[Message], int]:
        return self.find_page(
            {"connection_id": connection_id, "is_deleted": False}, page=page, limit=limit
        )

    def conversation(
        self,
        user_a: str,
        user_b: str,
        case_id: Optional[str] = None,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[Message], int]:
        query: Dict[str, Any] = {
            "is_deleted": False,
            "$or": [
                {"sender_id": user_a, "receiver_id": user_b},
                {"sender_id": user_b, "receiver_id": user_a},
            ],
        }
        if case_id:
            query["case_id"] = case_id
        return self.find_page(query, page=page, limit=limit)

    def unread_count(self, user_id: str) -> int:
        return self.count({"receiver_id": user_id, "is_read": False, "is_deleted": False})

    def mark_all_read(self, user_id: str, case_id: Optional[str] = None) -> int:
        query: Dict[str, Any] = {"receiver_id": user_id, "is_read": False, "is_deleted": False}
        if case_id:
            query["case_id"] = case_id
        result = self._collection.update_many(
            query, {"$set": {"is_read": True, "read_at": utc_now()}}
        )
        return result.modified_count
