"""Tests for NotificationService"""
import pytest

from lexdesk.domain.enums import EntityType, NotificationType, Priority
from lexdesk.domain.errors import NotificationNotFoundError, PermissionDeniedError
from lexdesk.utils.time import add_days, utc_now

from tests.helpers import ago, in_days


@pytest.fixture
def notification(notification_service, users):
    return notification_service.create(
        user_id=users["client"].user_id,
        notification_type=NotificationType.HEARING_SCHEDULED,
        title="Hearing scheduled",
        message="Court Room 4 at 10:30",
        priority=Priority.HIGH
    )


# =============================================================================
# Creation
# =============================================================================

def test_create_fills_type_defaults(notification):
    assert notification.icon == "calendar"
    assert notification.color == "orange"
    assert notification.action_text == "View Hearing"
    assert not notification.is_read


def test_explicit_action_text_wins(notification_service, users):
    created = notification_service.create(
        user_id=users["client"].user_id,
        notification_type=NotificationType.SYSTEM_ANNOUNCEMENT,
        title="Maintenance",
        message="Down for ten minutes",
        action_text="Details"
    )
    assert created.action_text == "Details"


def test_notify_is_best_effort(notification_service, users, monkeypatch):
    ok = notification_service.notify(
        users["client"].user_id, NotificationType.CASE_CREATED, "Case created", "Welcome",
        entity_type=EntityType.CASE, entity_id="CASE-1"
    )
    assert ok.ok
    assert ok.value.related_entity.entity_id == "CASE-1"

    def broken_insert(entity):
        raise RuntimeError("write failed")

    monkeypatch.setattr(notification_service.repo, "insert", broken_insert)

    failed = notification_service.notify(
        users["client"].user_id, NotificationType.CASE_CREATED, "Case created", "Welcome"
    )
    assert not failed.ok
    assert failed.error == "RuntimeError: write failed"

    with pytest.raises(RuntimeError):
        notification_service.create(
            user_id=users["client"].user_id,
            notification_type=NotificationType.CASE_CREATED,
            title="Case created",
            message="Welcome"
        )


# =============================================================================
# Feed
# =============================================================================

def test_feed_is_owner_only(notification_service, notification, actors):
    assert notification_service.get_notification(actors["client"], notification.notification_id)
    assert notification_service.get_notification(actors["admin"], notification.notification_id)
    with pytest.raises(PermissionDeniedError):
        notification_service.get_notification(actors["client2"], notification.notification_id)


def test_list_reports_unread_count(notification_service, notification, actors):
    feed = notification_service.list_notifications(actors["client"])
    assert feed["total"] == 1
    assert feed["unread_count"] == 1
    assert feed["items"][0].notification_id == notification.notification_id

    by_priority = notification_service.list_notifications(actors["client"], priority=Priority.LOW)
    assert by_priority["total"] == 0


def test_expired_notifications_are_hidden(notification_service, actors, users):
    expired = notification_service.create(
        user_id=users["client"].user_id,
        notification_type=NotificationType.DEADLINE_APPROACHING,
        title="Deadline",
        message="Reply due",
        expires_at=ago(1)
    )
    notification_service.create(
        user_id=users["client"].user_id,
        notification_type=NotificationType.DEADLINE_APPROACHING,
        title="Deadline",
        message="Reply due",
        expires_at=in_days(1)
    )

    with pytest.raises(NotificationNotFoundError):
        notification_service.get_notification(actors["client"], expired.notification_id)
    assert notification_service.list_notifications(actors["client"])["total"] == 1
    assert notification_service.unread_count(actors["client"]) == 1

    with pytest.raises(PermissionDeniedError):
        notification_service.delete_expired(actors["client"])
    assert notification_service.delete_expired(actors["admin"]) == 1


def test_mark_read_and_mark_all(notification_service, notification, actors, users):
    read = notification_service.mark_read(actors["client"], notification.notification_id)
    assert read.is_read and read.read_at is not None

    notification_service.create(
        user_id=users["client"].user_id,
        notification_type=NotificationType.TASK_ASSIGNED,
        title="Task",
        message="Collect records"
    )
    assert notification_service.mark_all_read(actors["client"]) == 1
    assert notification_service.unread_count(actors["client"]) == 0


def test_delete_and_delete_read(notification_service, notification, actors, users):
    other = notification_service.create(
        user_id=users["client"].user_id,
        notification_type=NotificationType.TASK_ASSIGNED,
        title="Task",
        message="Collect records"
    )
    with pytest.raises(PermissionDeniedError):
        notification_service.delete_notification(actors["client2"], other.notification_id)
    notification_service.delete_notification(actors["client"], other.notification_id)

    notification_service.mark_read(actors["client"], notification.notification_id)
    assert notification_service.delete_all_read(actors["client"]) == 1
    assert notification_service.list_notifications(actors["client"])["total"] == 0


def test_delete_old_purges_read_only(db, notification_service, notification, actors):
    notification_service.mark_read(actors["client"], notification.notification_id)
    db["notifications"].update_one(
        {"_id": notification.notification_id},
        {"$set": {"created_at": add_days(utc_now(), -60)}}
    )

    with pytest.raises(PermissionDeniedError):
        notification_service.delete_old(actors["advocate"])
    assert notification_service.delete_old(actors["admin"], days=30) == 1
