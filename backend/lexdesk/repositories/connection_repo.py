"""Connection Repository - Data access for client connections"""
from typing import List, Optional

from .base_repo import EntityRepository
from ..domain.models import Connection
from ..domain.enums import ConnectionStatus, ConnectionType
from ..domain.errors import ConnectionNotFoundError


class ConnectionRepository(EntityRepository[Connection]):
    """Repository for connection operations"""

    COLLECTION_NAME = "connections"
    ID_FIELD = "connection_id"
    MODEL = Connection
    NOT_FOUND = ConnectionNotFoundError
    ENTITY_LABEL = "Connection"
    DUPLICATE_MESSAGE = "A connection already exists between these users"

    def find_between(self, user_a: str, user_b: str) -> Optional[Connection]:
        """Connection between two users, in either direction"""
        doc = self._collection.find_one({
            "$or": [
                {"requester_id": user_a, "recipient_id": user_b},
                {"requester_id": user_b, "recipient_id": user_a},
            ]
        })
        if doc:
            return self._to_model(doc)
        return None

    def find_accepted(
        self,
        requester_id: str,
        recipient_id: str,
        connection_type: ConnectionType
    ) -> Optional[Connection]:
        """Accepted, active connection from requester to recipient"""
        doc = self._collection.find_one({
            "requester_id": requester_id,
            "recipient_id": recipient_id,
            "connection_type": connection_type.value,
            "status": ConnectionStatus.ACCEPTED.value,
            "is_active": True,
        })
        if doc:
            return self._to_model(doc)
        return None

    def has_accepted_between(self, user_a: str, user_b: str) -> bool:
        return self.count({
            "status": ConnectionStatus.ACCEPTED.value,
            "is_active": True,
            "$or": [
                {"requester_id": user_a, "recipient_id": user_b},
                {"requester_id": user_b, "recipient_id": user_a},
            ],
        }) > 0

    def list_received(self, user_id: str, status: ConnectionStatus = ConnectionStatus.PENDING) -> List[Connection]:
        return self.find(
            {"recipient_id": user_id, "status": status.value},
            sort=[("requested_at", -1)]
        )

    def list_sent(self, user_id: str, status: Optional[ConnectionStatus] = None) -> List[Connection]:
        query = {"requester_id": user_id}
        if status:
            query["status"] = status.value
        return self.find(query, sort=[("requested_at", -1)])

    def list_active(self, user_id: str, connection_type: Optional[ConnectionType] = None) -> List[Connection]:
        query = {
            "status": ConnectionStatus.ACCEPTED.value,
            "is_active": True,
            "$or": [{"requester_id": user_id}, {"recipient_id": user_id}],
        }
        if connection_type:
            query["connection_type"] = connection_type.value
        return self.find(query, sort=[("responded_at", -1)])

    def status_counts(self, user_id: str) -> dict:
        return self.count_by(
            "status",
            {"$or": [{"requester_id": user_id}, {"recipient_id": user_id}]}
        )
