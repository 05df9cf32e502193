"""Message Service - Direct, case and connection messaging"""
from typing import List, Optional, Tuple
from pymongo.database import Database

from ..domain.models import ActorContext, Message
from ..domain.enums import (
    MessageType, Priority, ActivityType, ActivityImportance, NotificationType, EntityType
)
from ..domain.errors import ValidationError, PermissionDeniedError
from ..engine.access_guard import AccessGuard
from ..engine.activity_logger import ActivityLogger
from ..repositories.case_repo import CaseRepository
from ..repositories.connection_repo import ConnectionRepository
from ..repositories.message_repo import MessageRepository
from ..repositories.user_repo import UserRepository
from .notification_service import NotificationService
from ..utils.idgen import generate_message_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)

PREVIEW_LENGTH = 100


class MessageService:
    """
    Service for messages.

    A message carries exactly one context: a receiver, a case or a
    connection. Case and connection messages are visible to everyone
    participating in that context.
    """

    def __init__(self, database: Optional[Database] = None):
        self.repo = MessageRepository(database)
        self.case_repo = CaseRepository(database)
        self.connection_repo = ConnectionRepository(database)
        self.user_repo = UserRepository(database)
        self.activity = ActivityLogger(database)
        self.notifications = NotificationService(database)
        self.guard = AccessGuard(case_lookup=self.case_repo.get)

    def _can_view(self, actor: ActorContext, message: Message) -> bool:
        if self.guard.can_view_message(actor, message):
            return True
        if message.case_id:
            case = self.case_repo.get(message.case_id)
            return case is not None and self.guard.can_view_case(actor, case)
        if message.connection_id:
            connection = self.connection_repo.get(message.connection_id)
            return connection is not None and connection.involves(actor.user_id)
        return False

    # =========================================================================
    # Sending
    # =========================================================================

    def send_message(
        self,
        actor: ActorContext,
        content: str,
        receiver_id: Optional[str] = None,
        case_id: Optional[str] = None,
        connection_id: Optional[str] = None,
        reply_to: Optional[str] = None,
        message_type: MessageType = MessageType.TEXT,
        priority: Priority = Priority.NORMAL
    ) -> Message:
        if not content or not content.strip():
            raise ValidationError("Message content is required")

        contexts = [value for value in (receiver_id, case_id, connection_id) if value]
        if len(contexts) != 1:
            raise ValidationError(
                "Exactly one of receiver, case or connection is required",
                details={"receiver_id": receiver_id, "case_id": case_id, "connection_id": connection_id}
            )

        if receiver_id:
            self.user_repo.get_or_raise(receiver_id)
        elif case_id:
            case = self.case_repo.get_or_raise(case_id)
            self.guard.require_case_view(actor, case)
        else:
            connection = self.connection_repo.get_or_raise(connection_id)
            self.guard.require_connection_party(actor, connection)

        message_id = generate_message_id()
        thread_id = message_id
        if reply_to:
            parent = self.repo.get(reply_to)
            # hidden parents look the same as missing ones
            hidden = parent is None or (parent.is_deleted and not actor.is_admin)
            if hidden or not self._can_view(actor, parent):
                raise self.repo.NOT_FOUND("Message not found", details={"reply_to": reply_to})
            thread_id = parent.thread_id or parent.message_id

        message = Message(
            message_id=message_id,
            content=content.strip(),
            message_type=message_type,
            sender_id=actor.user_id,
            receiver_id=receiver_id,
            case_id=case_id,
            connection_id=connection_id,
            reply_to=reply_to,
            thread_id=thread_id,
            priority=priority,
            created_at=utc_now()
        )
        self.repo.insert(message)

        logger.info(
            "Message sent",
            extra={"message_id": message_id, "case_id": case_id, "actor_id": actor.user_id}
        )

        if case_id:
            self.activity.record_entity(
                case_id, actor.user_id, ActivityType.MESSAGE_SENT,
                f"Message sent by {actor.name}",
                EntityType.MESSAGE, message_id,
                importance=(
                    ActivityImportance.HIGH if priority == Priority.URGENT
                    else ActivityImportance.MEDIUM
                )
            )
        if receiver_id:
            self.notifications.notify(
                receiver_id,
                NotificationType.MESSAGE_RECEIVED,
                f"New message from {actor.name}",
                message.content[:PREVIEW_LENGTH],
                entity_type=EntityType.MESSAGE,
                entity_id=message_id,
                action_url=f"/messages/{message_id}",
                priority=priority
            )
        return message

    # =========================================================================
    # Reads
    # =========================================================================

    def get_message(self, actor: ActorContext, message_id: str) -> Message:
        message = self.repo.get_or_raise(message_id)
        if message.is_deleted and not actor.is_admin:
            raise self.repo.NOT_FOUND("Message not found", details={"message_id": message_id})
        if not self._can_view(actor, message):
            raise PermissionDeniedError(
                "You do not have access to this message", details={"message_id": message_id}
            )
        return message

    def list_messages(
        self,
        actor: ActorContext,
        case_id: Optional[str] = None,
        connection_id: Optional[str] = None,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Message], int]:
        return self.repo.list_for_user(
            actor.user_id,
            case_id=case_id,
            connection_id=connection_id,
            unread_only=unread_only,
            page=page,
            limit=limit
        )

    def case_messages(
        self,
        actor: ActorContext,
        case_id: str,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[Message], int]:
        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_view(actor, case)
        return self.repo.for_case(case_id, page=page, limit=limit)

    def connection_messages(
        self,
        actor: ActorContext,
        connection_id: str,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[Message], int]:
        connection = self.connection_repo.get_or_raise(connection_id)
        self.guard.require_connection_party(actor, connection)
        return self.repo.for_connection(connection_id, page=page, limit=limit)

    def conversation(
        self,
        actor: ActorContext,
        other_user_id: str,
        case_id: Optional[str] = None,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[Message], int]:
        if not actor.is_admin and not self.connection_repo.has_accepted_between(actor.user_id, other_user_id):
            raise PermissionDeniedError(
                "You can only view conversations with your connections",
                details={"user_id": other_user_id}
            )
        return self.repo.conversation(
            actor.user_id, other_user_id, case_id=case_id, page=page, limit=limit
        )

    def unread_count(self, actor: ActorContext) -> int:
        return self.repo.unread_count(actor.user_id)

    # =========================================================================
    # Mutations
    # =========================================================================

    def mark_read(self, actor: ActorContext, message_id: str) -> Message:
        message = self.get_message(actor, message_id)
        if message.receiver_id != actor.user_id:
            raise PermissionDeniedError(
                "Only the receiver can mark this message as read",
                details={"message_id": message_id}
            )
        message.mark_read()
        return self.repo.save(message)

    def mark_all_read(self, actor: ActorContext, case_id: Optional[str] = None) -> int:
        return self.repo.mark_all_read(actor.user_id, case_id=case_id)

    def delete_message(self, actor: ActorContext, message_id: str) -> None:
        message = self.get_message(actor, message_id)
        self.guard.require_message_delete(actor, message)

        message.soft_delete(actor.user_id)
        self.repo.save(message)

        if message.case_id:
            self.activity.record_entity(
                message.case_id, actor.user_id, ActivityType.MESSAGE_DELETED,
                "Message deleted",
                EntityType.MESSAGE, message_id,
                importance=ActivityImportance.LOW
            )
