"""Tests for MessageService"""
import pytest

from lexdesk.domain.enums import ActivityType, NotificationType, Priority
from lexdesk.domain.errors import (
    MessageNotFoundError, PermissionDeniedError, UserNotFoundError, ValidationError
)
from lexdesk.repositories.activity_repo import ActivityRepository
from lexdesk.repositories.notification_repo import NotificationRepository


@pytest.fixture
def direct(message_service, case, actors, users):
    return message_service.send_message(
        actors["client"], "  Can we meet on Friday?  ", receiver_id=users["advocate"].user_id
    )


# =============================================================================
# Sending
# =============================================================================

def test_direct_message_notifies_receiver(db, direct, users):
    assert direct.content == "Can we meet on Friday?"
    assert direct.thread_id == direct.message_id
    assert not direct.is_read

    feed = NotificationRepository(db).for_user(users["advocate"].user_id)
    received = [n for n in feed if n.notification_type == NotificationType.MESSAGE_RECEIVED]
    assert len(received) == 1
    assert received[0].title == "New message from Asha Rao"


def test_exactly_one_context(message_service, case, actors, users):
    with pytest.raises(ValidationError):
        message_service.send_message(actors["client"], "Hello")
    with pytest.raises(ValidationError):
        message_service.send_message(
            actors["client"], "Hello",
            receiver_id=users["advocate"].user_id, case_id=case.case_id
        )


def test_content_and_receiver_are_checked(message_service, actors):
    with pytest.raises(ValidationError):
        message_service.send_message(actors["client"], "   ", receiver_id="USR-x")
    with pytest.raises(UserNotFoundError):
        message_service.send_message(actors["client"], "Hello", receiver_id="USR-missing")


def test_case_message_logs_activity(db, message_service, case, actors):
    message_service.send_message(
        actors["advocate"], "Filing tomorrow", case_id=case.case_id, priority=Priority.URGENT
    )
    activities, _ = ActivityRepository(db).for_case(
        case.case_id, activity_type=ActivityType.MESSAGE_SENT.value
    )
    assert len(activities) == 1


def test_case_message_requires_case_access(message_service, case, actors):
    with pytest.raises(PermissionDeniedError):
        message_service.send_message(actors["client2"], "Hi", case_id=case.case_id)


def test_connection_message(message_service, actors, connect):
    connection = connect("client", "paralegal")
    sent = message_service.send_message(
        actors["paralegal"], "Documents received", connection_id=connection.connection_id
    )
    messages, total = message_service.connection_messages(actors["client"], connection.connection_id)
    assert total == 1 and messages[0].message_id == sent.message_id

    with pytest.raises(PermissionDeniedError):
        message_service.send_message(
            actors["client2"], "Hi", connection_id=connection.connection_id
        )


def test_reply_joins_parent_thread(message_service, direct, actors, users):
    reply = message_service.send_message(
        actors["advocate"], "Friday works", receiver_id=users["client"].user_id,
        reply_to=direct.message_id
    )
    second = message_service.send_message(
        actors["client"], "Great", receiver_id=users["advocate"].user_id,
        reply_to=reply.message_id
    )
    assert reply.thread_id == direct.message_id
    assert second.thread_id == direct.message_id


def test_reply_to_unseen_message_looks_missing(message_service, direct, actors, users):
    for parent_id in (direct.message_id, "MSG-missing"):
        with pytest.raises(MessageNotFoundError):
            message_service.send_message(
                actors["client2"], "Me too", receiver_id=users["advocate"].user_id,
                reply_to=parent_id
            )


# =============================================================================
# Reading
# =============================================================================

def test_case_parties_read_case_messages(message_service, staffed_case, actors):
    sent = message_service.send_message(actors["advocate"], "Brief ready", case_id=staffed_case.case_id)
    for key in ("client", "paralegal", "admin"):
        assert message_service.get_message(actors[key], sent.message_id).message_id == sent.message_id
    with pytest.raises(PermissionDeniedError):
        message_service.get_message(actors["client2"], sent.message_id)


def test_direct_message_visible_to_participants_only(message_service, direct, actors):
    message_service.get_message(actors["advocate"], direct.message_id)
    with pytest.raises(PermissionDeniedError):
        message_service.get_message(actors["advocate2"], direct.message_id)


def test_conversation_needs_accepted_connection(message_service, direct, actors, users):
    messages, total = message_service.conversation(actors["client"], users["advocate"].user_id)
    assert total == 1 and messages[0].message_id == direct.message_id

    with pytest.raises(PermissionDeniedError):
        message_service.conversation(actors["client"], users["advocate2"].user_id)
    message_service.conversation(actors["admin"], users["advocate"].user_id)


# =============================================================================
# Read receipts and deletion
# =============================================================================

def test_only_receiver_marks_read(message_service, direct, actors):
    assert message_service.unread_count(actors["advocate"]) == 1
    with pytest.raises(PermissionDeniedError):
        message_service.mark_read(actors["client"], direct.message_id)

    read = message_service.mark_read(actors["advocate"], direct.message_id)
    assert read.is_read and read.read_at is not None
    assert message_service.unread_count(actors["advocate"]) == 0


def test_mark_all_read(message_service, direct, actors, users):
    message_service.send_message(actors["client"], "One more", receiver_id=users["advocate"].user_id)
    assert message_service.mark_all_read(actors["advocate"]) == 2
    assert message_service.unread_count(actors["advocate"]) == 0


def test_sender_soft_deletes(message_service, direct, actors):
    with pytest.raises(PermissionDeniedError):
        message_service.delete_message(actors["advocate"], direct.message_id)

    message_service.delete_message(actors["client"], direct.message_id)
    with pytest.raises(MessageNotFoundError):
        message_service.get_message(actors["client"], direct.message_id)
    assert message_service.get_message(actors["admin"], direct.message_id).is_deleted

    items, total = message_service.list_messages(actors["client"])
    assert (items, total) == ([], 0)
