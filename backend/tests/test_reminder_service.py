"""Tests for ReminderService"""
import pytest

from lexdesk.domain.enums import (
    ActivityType, EntityType, RecipientStatus, RecurrenceFrequency, ReminderStatus,
    ReminderType
)
from lexdesk.domain.errors import (
    InvalidStateError, PermissionDeniedError, ReminderNotFoundError, ValidationError
)
from lexdesk.domain.models import Recurrence, RelatedEntity
from lexdesk.repositories.activity_repo import ActivityRepository
from lexdesk.repositories.reminder_repo import ReminderRepository
from lexdesk.utils.time import add_days, utc_now

from tests.helpers import ago, in_days


@pytest.fixture
def reminder(reminder_service, case, actors, users):
    return reminder_service.create_reminder(
        actors["advocate"],
        title="Hearing tomorrow",
        message="Bring the original sale deed",
        reminder_type=ReminderType.HEARING_REMINDER,
        reminder_date=in_days(2),
        recipient_ids=[users["client"].user_id, users["advocate"].user_id],
        related_entity=RelatedEntity(entity_type=EntityType.CASE, entity_id=case.case_id)
    )


# =============================================================================
# Creation
# =============================================================================

def test_create_reminder(db, reminder, case, users):
    assert reminder.status == ReminderStatus.SCHEDULED
    assert [r.status for r in reminder.recipients] == [RecipientStatus.PENDING] * 2
    assert reminder.created_by == users["advocate"].user_id

    activities, _ = ActivityRepository(db).for_case(
        case.case_id, activity_type=ActivityType.REMINDER_CREATED.value
    )
    assert len(activities) == 1


def test_duplicate_recipients_collapse(reminder_service, actors, users):
    client_id = users["client"].user_id
    reminder = reminder_service.create_reminder(
        actors["advocate"], "Pay fees", "Court fee due", ReminderType.PAYMENT_REMINDER,
        in_days(1), [client_id, client_id]
    )
    assert [r.user_id for r in reminder.recipients] == [client_id]


def test_reminder_date_must_be_future(reminder_service, actors, users):
    with pytest.raises(ValidationError):
        reminder_service.create_reminder(
            actors["advocate"], "Late", "Too late", ReminderType.CUSTOM_REMINDER,
            ago(1), [users["client"].user_id]
        )


def test_required_fields(reminder_service, actors, users):
    with pytest.raises(ValidationError):
        reminder_service.create_reminder(
            actors["advocate"], "", "msg", ReminderType.CUSTOM_REMINDER,
            in_days(1), [users["client"].user_id]
        )
    with pytest.raises(ValidationError):
        reminder_service.create_reminder(
            actors["advocate"], "t", "msg", ReminderType.CUSTOM_REMINDER, in_days(1), []
        )


def test_recurring_needs_frequency(reminder_service, actors, users):
    with pytest.raises(ValidationError):
        reminder_service.create_reminder(
            actors["advocate"], "Weekly sync", "Status call", ReminderType.MEETING_REMINDER,
            in_days(1), [users["client"].user_id], is_recurring=True
        )

    reminder = reminder_service.create_reminder(
        actors["advocate"], "Weekly sync", "Status call", ReminderType.MEETING_REMINDER,
        in_days(1), [users["client"].user_id], is_recurring=True,
        recurrence=Recurrence(frequency=RecurrenceFrequency.WEEKLY, days_of_week=[1])
    )
    assert reminder.recurrence.frequency == RecurrenceFrequency.WEEKLY


# =============================================================================
# Visibility
# =============================================================================

def test_recipient_and_creator_can_view(reminder_service, reminder, actors):
    reminder_service.get_reminder(actors["client"], reminder.reminder_id)
    reminder_service.get_reminder(actors["advocate"], reminder.reminder_id)
    with pytest.raises(PermissionDeniedError):
        reminder_service.get_reminder(actors["client2"], reminder.reminder_id)


def test_list_and_upcoming(reminder_service, reminder, actors):
    items, total = reminder_service.list_reminders(actors["client"])
    assert total == 1 and items[0].reminder_id == reminder.reminder_id

    assert len(reminder_service.upcoming(actors["client"], days=7)) == 1
    assert reminder_service.upcoming(actors["client"], days=1) == []


def test_case_reminders(reminder_service, reminder, case, actors):
    assert len(reminder_service.case_reminders(actors["client"], case.case_id)) == 1
    with pytest.raises(PermissionDeniedError):
        reminder_service.case_reminders(actors["advocate2"], case.case_id)


# =============================================================================
# Updates
# =============================================================================

def test_only_creator_updates(reminder_service, reminder, actors):
    with pytest.raises(PermissionDeniedError):
        reminder_service.update_reminder(actors["client"], reminder.reminder_id, {"title": "x"})

    updated = reminder_service.update_reminder(
        actors["advocate"], reminder.reminder_id, {"title": "Hearing moved to 11:00"}
    )
    assert updated.title == "Hearing moved to 11:00"


def test_update_replaces_recipients_keeping_state(reminder_service, reminder, actors, users):
    client_id = users["client"].user_id
    reminder_service.dismiss(actors["client"], reminder.reminder_id)

    updated = reminder_service.update_reminder(
        actors["advocate"], reminder.reminder_id,
        {"recipients": [client_id, users["paralegal"].user_id]}
    )
    assert [r.user_id for r in updated.recipients] == [client_id, users["paralegal"].user_id]
    assert updated.get_recipient(client_id).status == RecipientStatus.DISMISSED
    assert updated.get_recipient(users["paralegal"].user_id).status == RecipientStatus.PENDING


def test_update_rejects_past_date_and_unknown_fields(reminder_service, reminder, actors):
    with pytest.raises(ValidationError):
        reminder_service.update_reminder(
            actors["advocate"], reminder.reminder_id, {"reminder_date": ago(5)}
        )
    with pytest.raises(ValidationError):
        reminder_service.update_reminder(
            actors["advocate"], reminder.reminder_id, {"status": "sent"}
        )


def test_cannot_update_once_not_scheduled(reminder_service, reminder, actors):
    reminder_service.cancel_reminder(actors["advocate"], reminder.reminder_id)
    with pytest.raises(InvalidStateError) as exc_info:
        reminder_service.update_reminder(
            actors["advocate"], reminder.reminder_id, {"title": "x"}
        )
    assert exc_info.value.message == "Cannot update reminder that is not scheduled"


def test_cancel_logs_case_activity(db, reminder_service, reminder, case, actors):
    cancelled = reminder_service.cancel_reminder(actors["advocate"], reminder.reminder_id)
    assert cancelled.status == ReminderStatus.CANCELLED

    activities, _ = ActivityRepository(db).for_case(
        case.case_id, activity_type=ActivityType.REMINDER_CANCELLED.value
    )
    assert len(activities) == 1


# =============================================================================
# Recipient actions
# =============================================================================

def test_snooze_and_dismiss_affect_only_actor(reminder_service, reminder, actors, users):
    snoozed = reminder_service.snooze(actors["client"], reminder.reminder_id, minutes=30)
    assert snoozed.get_recipient(users["client"].user_id).status == RecipientStatus.SNOOZED
    assert snoozed.get_recipient(users["advocate"].user_id).status == RecipientStatus.PENDING
    assert snoozed.status == ReminderStatus.SCHEDULED

    dismissed = reminder_service.dismiss(actors["advocate"], reminder.reminder_id)
    assert dismissed.get_recipient(users["advocate"].user_id).status == RecipientStatus.DISMISSED
    assert dismissed.get_recipient(users["client"].user_id).status == RecipientStatus.SNOOZED


def test_non_recipient_cannot_snooze(reminder_service, reminder, actors):
    with pytest.raises(PermissionDeniedError):
        reminder_service.snooze(actors["client2"], reminder.reminder_id)


def test_snooze_minutes_must_be_positive(reminder_service, reminder, actors):
    with pytest.raises(ValidationError):
        reminder_service.snooze(actors["client"], reminder.reminder_id, minutes=0)


def test_admin_snooze_is_noop(reminder_service, reminder, actors):
    snoozed = reminder_service.snooze(actors["admin"], reminder.reminder_id)
    assert all(r.status == RecipientStatus.PENDING for r in snoozed.recipients)


# =============================================================================
# Housekeeping
# =============================================================================

def test_delete_old_is_admin_only_and_keeps_scheduled(db, reminder_service, reminder, actors):
    repo = ReminderRepository(db)
    stored = repo.get(reminder.reminder_id)
    stored.cancel()
    stored.reminder_date = add_days(utc_now(), -200)
    repo.save(stored)

    with pytest.raises(PermissionDeniedError):
        reminder_service.delete_old(actors["advocate"])
    assert reminder_service.delete_old(actors["admin"], days=90) == 1
    with pytest.raises(ReminderNotFoundError):
        reminder_service.get_reminder(actors["admin"], reminder.reminder_id)


def test_cancel_by_entity_only_touches_scheduled(reminder_service, reminder, case):
    assert reminder_service.cancel_by_entity(EntityType.CASE, case.case_id) == 1
    assert reminder_service.cancel_by_entity(EntityType.CASE, case.case_id) == 0
