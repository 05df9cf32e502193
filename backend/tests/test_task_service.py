"""Tests for TaskService"""
import pytest

from lexdesk.domain.enums import (
    ActivityType, EntityType, NotificationType, ReminderStatus, ReminderType, TaskStatus
)
from lexdesk.domain.errors import (
    CaseNotFoundError, PermissionDeniedError, TaskNotFoundError, ValidationError
)
from lexdesk.repositories.activity_repo import ActivityRepository
from lexdesk.repositories.case_repo import CaseRepository
from lexdesk.repositories.notification_repo import NotificationRepository
from lexdesk.repositories.reminder_repo import ReminderRepository

from tests.helpers import ago, in_days


@pytest.fixture
def task(task_service, staffed_case, actors, users):
    return task_service.create_task(
        actors["advocate"], staffed_case.case_id, "Collect title deeds",
        assigned_to=users["paralegal"].user_id, due_date=in_days(5)
    )


def feed_types(db, user_id):
    return [n.notification_type for n in NotificationRepository(db).for_user(user_id)]


# =============================================================================
# Creation
# =============================================================================

def test_create_task_side_effects(db, task, staffed_case, users):
    assert task.status == TaskStatus.PENDING
    assert task.progress == 0

    case = CaseRepository(db).get(staffed_case.case_id)
    assert case.total_tasks == 1

    assert NotificationType.TASK_ASSIGNED in feed_types(db, users["paralegal"].user_id)

    reminders = ReminderRepository(db).for_entity(EntityType.TASK, task.task_id)
    assert len(reminders) == 1
    reminder = reminders[0]
    assert reminder.reminder_type == ReminderType.TASK_REMINDER
    assert [r.user_id for r in reminder.recipients] == [users["paralegal"].user_id]
    assert (task.due_date - reminder.reminder_date).days == 1

    activities, _ = ActivityRepository(db).for_case(
        staffed_case.case_id, activity_type=ActivityType.TASK_CREATED.value
    )
    assert len(activities) == 1


def test_no_reminder_when_due_within_a_day(db, task_service, staffed_case, actors, users):
    task = task_service.create_task(
        actors["advocate"], staffed_case.case_id, "Urgent filing",
        assigned_to=users["paralegal"].user_id, due_date=in_days(0.5)
    )
    assert ReminderRepository(db).for_entity(EntityType.TASK, task.task_id) == []


def test_due_date_must_be_future(task_service, staffed_case, actors, users):
    with pytest.raises(ValidationError):
        task_service.create_task(
            actors["advocate"], staffed_case.case_id, "Late",
            assigned_to=users["paralegal"].user_id, due_date=ago(5)
        )


def test_only_case_advocate_creates_tasks(task_service, staffed_case, actors, users):
    for key in ("client", "paralegal", "advocate2"):
        with pytest.raises(PermissionDeniedError):
            task_service.create_task(
                actors[key], staffed_case.case_id, "Nope",
                assigned_to=users["paralegal"].user_id, due_date=in_days(3)
            )


def test_assignee_must_be_paralegal(task_service, staffed_case, actors, users):
    with pytest.raises(ValidationError):
        task_service.create_task(
            actors["advocate"], staffed_case.case_id, "Nope",
            assigned_to=users["client"].user_id, due_date=in_days(3)
        )


def test_missing_case(task_service, actors, users):
    with pytest.raises(CaseNotFoundError):
        task_service.create_task(
            actors["advocate"], "CASE-missing", "Nope",
            assigned_to=users["paralegal"].user_id, due_date=in_days(3)
        )


# =============================================================================
# Progress and status
# =============================================================================

def test_progress_flow(db, task_service, task, actors, users):
    updated = task_service.update_progress(actors["paralegal"], task.task_id, 50)
    assert updated.status == TaskStatus.IN_PROGRESS
    assert updated.start_date is not None

    done = task_service.update_progress(actors["paralegal"], task.task_id, 100)
    assert done.status == TaskStatus.COMPLETED
    assert done.completed_date is not None

    # the assigning advocate hears about completion
    assert NotificationType.TASK_COMPLETED in feed_types(db, users["advocate"].user_id)


@pytest.mark.parametrize("progress", [-1, 101])
def test_progress_out_of_range_rejected(task_service, task, actors, progress):
    with pytest.raises(ValidationError):
        task_service.update_progress(actors["paralegal"], task.task_id, progress)


@pytest.mark.parametrize("progress", [0, 100])
def test_progress_boundaries_accepted(task_service, task, actors, progress):
    updated = task_service.update_progress(actors["paralegal"], task.task_id, progress)
    assert updated.progress == progress


def test_status_update_permissions(task_service, task, actors):
    with pytest.raises(PermissionDeniedError):
        task_service.update_status(actors["paralegal2"], task.task_id, TaskStatus.IN_PROGRESS)
    with pytest.raises(PermissionDeniedError):
        task_service.update_status(actors["client"], task.task_id, TaskStatus.IN_PROGRESS)

    updated = task_service.update_status(actors["paralegal"], task.task_id, TaskStatus.COMPLETED)
    assert updated.progress == 100


def test_status_change_logs_activity(db, task_service, task, actors):
    task_service.update_status(actors["paralegal"], task.task_id, TaskStatus.IN_PROGRESS)
    activities, _ = ActivityRepository(db).for_case(
        task.case_id, activity_type=ActivityType.TASK_STATUS_CHANGED.value
    )
    assert activities[0].metadata == {"from": "pending", "to": "in_progress"}


# =============================================================================
# Edits
# =============================================================================

def test_assignee_cannot_edit_details(task_service, task, actors):
    with pytest.raises(PermissionDeniedError):
        task_service.update_task(actors["paralegal"], task.task_id, {"title": "Renamed"})
    updated = task_service.update_task(actors["advocate"], task.task_id, {"title": "Renamed"})
    assert updated.title == "Renamed"


def test_update_rejects_protected_fields_and_past_due(task_service, task, actors):
    with pytest.raises(ValidationError):
        task_service.update_task(actors["advocate"], task.task_id, {"assigned_to": "someone"})
    with pytest.raises(ValidationError):
        task_service.update_task(actors["advocate"], task.task_id, {"due_date": ago(10)})


def test_comment_notifies_other_party(db, task_service, task, actors, users):
    entry = task_service.add_comment(actors["paralegal"], task.task_id, "  Deeds collected  ")
    assert entry.comment == "Deeds collected"
    assert NotificationType.TASK_COMMENT in feed_types(db, users["advocate"].user_id)

    with pytest.raises(ValidationError):
        task_service.add_comment(actors["paralegal"], task.task_id, "   ")


def test_outsider_cannot_comment(task_service, task, actors):
    with pytest.raises(PermissionDeniedError):
        task_service.add_comment(actors["paralegal2"], task.task_id, "hello")


def test_attachment(task_service, task, actors):
    attachment = task_service.add_attachment(
        actors["paralegal"], task.task_id, "deed.pdf", "https://files.lexdesk.in/deed.pdf"
    )
    assert attachment.uploaded_by == actors["paralegal"].user_id
    assert len(task_service.get_task(actors["advocate"], task.task_id).attachments) == 1


# =============================================================================
# Queries and deletion
# =============================================================================

def test_listing_scopes(task_service, task, actors):
    assert task_service.list_tasks(actors["advocate"])[1] == 1
    assert task_service.list_tasks(actors["paralegal"])[1] == 1
    assert task_service.list_tasks(actors["paralegal2"])[1] == 0
    assert task_service.list_tasks(actors["admin"])[1] == 1


def test_case_tasks_require_case_view(task_service, task, actors):
    assert len(task_service.case_tasks(actors["client"], task.case_id)) == 1
    with pytest.raises(PermissionDeniedError):
        task_service.case_tasks(actors["client2"], task.case_id)


def test_stats(task_service, task, actors):
    stats = task_service.stats(actors["advocate"])
    assert stats["total"] == 1
    assert stats["by_status"] == {"pending": 1}
    assert stats["overdue"] == 0


def test_delete_cancels_deadline_reminder(db, task_service, task, actors):
    task_service.delete_task(actors["advocate"], task.task_id)

    with pytest.raises(TaskNotFoundError):
        task_service.get_task(actors["advocate"], task.task_id)
    assert CaseRepository(db).get(task.case_id).total_tasks == 0

    reminders = ReminderRepository(db).for_entity(EntityType.TASK, task.task_id)
    assert [r.status for r in reminders] == [ReminderStatus.CANCELLED]
