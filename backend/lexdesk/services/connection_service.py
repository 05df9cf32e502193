"""Connection Service - Client connection requests and responses"""
from typing import Any, Dict, List, Optional
from pymongo.database import Database

from ..domain.models import ActorContext, Connection, User
from ..domain.enums import (
    ConnectionStatus, ConnectionType, UserRole, NotificationType, EntityType
)
from ..domain.errors import (
    ValidationError, PermissionDeniedError, UserNotFoundError, AlreadyExistsError,
    InvalidStateError
)
from ..engine.access_guard import AccessGuard
from ..repositories.connection_repo import ConnectionRepository
from ..repositories.user_repo import UserRepository
from .notification_service import NotificationService
from ..utils.idgen import generate_connection_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionService:
    """
    Service for connections between clients and advocates/paralegals.

    A (requester, recipient) pair is unique regardless of direction.
    """

    def __init__(self, database: Optional[Database] = None):
        self.repo = ConnectionRepository(database)
        self.user_repo = UserRepository(database)
        self.notifications = NotificationService(database)
        self.guard = AccessGuard()

    def request(
        self,
        actor: ActorContext,
        recipient_id: Optional[str],
        connection_type: Optional[str],
        message: Optional[str] = None
    ) -> Connection:
        """Send a connection request from a client"""
        if not recipient_id or not connection_type:
            raise ValidationError("Recipient and connection type are required")
        try:
            ctype = ConnectionType(connection_type)
        except ValueError:
            raise ValidationError(
                "Invalid connection type. Must be 'advocate' or 'paralegal'",
                details={"connection_type": connection_type}
            )
        if recipient_id == actor.user_id:
            raise ValidationError("You cannot send a connection request to yourself")

        if self.repo.find_between(actor.user_id, recipient_id) is not None:
            raise AlreadyExistsError(
                "A connection already exists between these users",
                details={"recipient_id": recipient_id}
            )

        if actor.role != UserRole.CLIENT:
            raise PermissionDeniedError("Only clients can send connection requests")

        recipient = self.user_repo.get(recipient_id)
        if recipient is None:
            raise UserNotFoundError("Recipient user not found", details={"user_id": recipient_id})
        if recipient.role.value != ctype.value:
            raise ValidationError(
                f"Recipient is not a {ctype.value}",
                details={"recipient_role": recipient.role.value}
            )

        connection = Connection(
            connection_id=generate_connection_id(),
            requester_id=actor.user_id,
            recipient_id=recipient_id,
            connection_type=ctype,
            request_message=message or "",
            requested_at=utc_now()
        )
        self.repo.insert(connection)
        logger.info(
            "Connection requested",
            extra={"connection_id": connection.connection_id, "actor_id": actor.user_id}
        )

        self.notifications.notify(
            recipient_id,
            NotificationType.CONNECTION_REQUEST,
            "New Connection Request",
            f"{actor.name} sent you a connection request",
            entity_type=EntityType.CONNECTION,
            entity_id=connection.connection_id,
            action_url="/connections/requests"
        )
        return connection

    def _load_pending_for_recipient(self, actor: ActorContext, connection_id: str) -> Connection:
        connection = self.repo.get_or_raise(connection_id)
        if connection.recipient_id != actor.user_id:
            raise PermissionDeniedError(
                "Only the recipient can respond to this request",
                details={"connection_id": connection_id}
            )
        if connection.status != ConnectionStatus.PENDING:
            raise InvalidStateError(
                f"Connection request has already been {connection.status.value}",
                details={"status": connection.status.value}
            )
        return connection

    def accept(self, actor: ActorContext, connection_id: str, message: Optional[str] = None) -> Connection:
        connection = self._load_pending_for_recipient(actor, connection_id)
        connection.accept(message)
        self.repo.save(connection)

        self.notifications.notify(
            connection.requester_id,
            NotificationType.CONNECTION_ACCEPTED,
            "Connection Accepted",
            f"{actor.name} accepted your connection request",
            entity_type=EntityType.CONNECTION,
            entity_id=connection.connection_id
        )
        return connection

    def reject(self, actor: ActorContext, connection_id: str, message: Optional[str] = None) -> Connection:
        connection = self._load_pending_for_recipient(actor, connection_id)
        connection.reject(message)
        self.repo.save(connection)

        self.notifications.notify(
            connection.requester_id,
            NotificationType.CONNECTION_REJECTED,
            "Connection Rejected",
            f"{actor.name} declined your connection request",
            entity_type=EntityType.CONNECTION,
            entity_id=connection.connection_id
        )
        return connection

    def remove(self, actor: ActorContext, connection_id: str) -> Connection:
        """Either party may end a connection; it is blocked, not deleted"""
        connection = self.repo.get_or_raise(connection_id)
        if not connection.involves(actor.user_id):
            raise PermissionDeniedError(
                "You are not part of this connection", details={"connection_id": connection_id}
            )
        if connection.status == ConnectionStatus.BLOCKED or not connection.is_active:
            raise InvalidStateError("Connection is already inactive")

        connection.block()
        return self.repo.save(connection)

    def details(self, actor: ActorContext, connection_id: str) -> Connection:
        connection = self.repo.get_or_raise(connection_id)
        self.guard.require_connection_party(actor, connection)
        return connection

    def received_requests(self, actor: ActorContext) -> List[Connection]:
        return self.repo.list_received(actor.user_id)

    def sent_requests(self, actor: ActorContext, status: Optional[ConnectionStatus] = None) -> List[Connection]:
        return self.repo.list_sent(actor.user_id, status)

    def my_connections(self, actor: ActorContext, connection_type: Optional[ConnectionType] = None) -> List[Connection]:
        return self.repo.list_active(actor.user_id, connection_type)

    def stats(self, actor: ActorContext) -> Dict[str, Any]:
        counts = self.repo.status_counts(actor.user_id)
        return {
            "total": sum(counts.values()),
            **{status.value: counts.get(status.value, 0) for status in ConnectionStatus},
        }

    def search_users(self, role: UserRole, text: Optional[str] = None, limit: int = 20) -> List[User]:
        """Directory search clients use to find someone to connect with"""
        if role not in (UserRole.ADVOCATE, UserRole.PARALEGAL):
            raise ValidationError(
                "Only advocates and paralegals can be searched", details={"role": role.value}
            )
        return self.user_repo.search(role, text, limit=limit)
