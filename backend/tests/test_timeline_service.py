"""Tests for TimelineService"""
import pytest

from lexdesk.domain.enums import (
    ActivityType, HearingType, MilestoneType, NotificationType, TimelineEventStatus,
    TimelineEventType
)
from lexdesk.domain.errors import (
    InvalidStateError, PermissionDeniedError, TimelineEventNotFoundError, ValidationError
)
from lexdesk.repositories.activity_repo import ActivityRepository
from lexdesk.repositories.case_repo import CaseRepository
from lexdesk.repositories.notification_repo import NotificationRepository

from tests.helpers import in_days


@pytest.fixture
def hearing(timeline_service, staffed_case, actors):
    return timeline_service.add_hearing(
        actors["advocate"], staffed_case.case_id, in_days(10),
        hearing_type=HearingType.FIRST_HEARING, event_time="10:30"
    )


# =============================================================================
# Hearings
# =============================================================================

def test_scheduling_hearing_sets_next_hearing_date(db, hearing, staffed_case, users):
    assert hearing.event_type == TimelineEventType.HEARING_SCHEDULED
    assert hearing.title == "Court Hearing"
    assert hearing.hearing_details.hearing_type == HearingType.FIRST_HEARING

    case = CaseRepository(db).get(staffed_case.case_id)
    assert case.next_hearing_date == hearing.event_date

    feed = NotificationRepository(db).for_user(users["client"].user_id)
    assert NotificationType.HEARING_SCHEDULED in {n.notification_type for n in feed}


def test_only_case_advocate_authors(timeline_service, staffed_case, actors):
    for key in ("client", "paralegal", "advocate2"):
        with pytest.raises(PermissionDeniedError):
            timeline_service.add_hearing(actors[key], staffed_case.case_id, in_days(3))
    timeline_service.add_hearing(actors["admin"], staffed_case.case_id, in_days(3))


def test_complete_hearing_with_next_date(db, timeline_service, hearing, actors):
    next_date = in_days(40)
    completed = timeline_service.complete_hearing(
        actors["advocate"], hearing.event_id,
        outcome="Evidence admitted", actual_duration=45, next_hearing_date=next_date
    )

    assert completed.status == TimelineEventStatus.COMPLETED
    assert completed.hearing_details.is_completed
    assert completed.hearing_details.outcome == "Evidence admitted"
    assert completed.hearing_details.actual_duration == 45
    assert CaseRepository(db).get(hearing.case_id).next_hearing_date == next_date

    activities, _ = ActivityRepository(db).for_case(
        hearing.case_id, activity_type=ActivityType.HEARING_COMPLETED.value
    )
    assert activities[0].metadata == {"outcome": "Evidence admitted"}


def test_completing_cancelled_hearing_is_rejected(timeline_service, hearing, actors):
    timeline_service.cancel_event(actors["advocate"], hearing.event_id)
    with pytest.raises(InvalidStateError):
        timeline_service.complete_hearing(actors["advocate"], hearing.event_id)


def test_postpone_keeps_date_and_moves_case(db, timeline_service, hearing, actors):
    new_date = in_days(30)
    postponed = timeline_service.postpone_hearing(
        actors["advocate"], hearing.event_id, "  Judge on leave ", new_date
    )

    assert postponed.status == TimelineEventStatus.POSTPONED
    assert postponed.event_date == hearing.event_date
    assert postponed.hearing_details.postponement_reason == "Judge on leave"
    assert postponed.hearing_details.next_hearing_date == new_date
    assert CaseRepository(db).get(hearing.case_id).next_hearing_date == new_date


def test_postpone_requires_reason(timeline_service, hearing, actors):
    with pytest.raises(ValidationError):
        timeline_service.postpone_hearing(actors["advocate"], hearing.event_id, "   ")


def test_hearing_operations_reject_plain_events(timeline_service, staffed_case, actors):
    event = timeline_service.add_event(
        actors["advocate"], staffed_case.case_id, "Petition filed",
        TimelineEventType.CASE_FILED, in_days(-1)
    )
    with pytest.raises(ValidationError):
        timeline_service.complete_hearing(actors["advocate"], event.event_id)


# =============================================================================
# Events and milestones
# =============================================================================

def test_add_event_and_mark_milestone(timeline_service, staffed_case, actors):
    event = timeline_service.add_event(
        actors["advocate"], staffed_case.case_id, "Evidence closed",
        TimelineEventType.EVIDENCE_SUBMITTED, in_days(-2)
    )
    assert not event.is_milestone

    marked = timeline_service.mark_milestone(
        actors["advocate"], event.event_id, MilestoneType.EVIDENCE_COMPLETE
    )
    assert marked.is_milestone
    assert marked.milestone_type == MilestoneType.EVIDENCE_COMPLETE

    milestones = timeline_service.milestones(actors["client"], staffed_case.case_id)
    assert [m.event_id for m in milestones] == [event.event_id]


def test_update_event_whitelist(timeline_service, hearing, actors):
    updated = timeline_service.update_event(
        actors["advocate"], hearing.event_id, {"notes": "Carry originals"}
    )
    assert updated.notes == "Carry originals"
    assert updated.updated_by == actors["advocate"].user_id

    with pytest.raises(ValidationError):
        timeline_service.update_event(actors["advocate"], hearing.event_id, {"case_id": "x"})


def test_deleted_event_disappears(timeline_service, hearing, actors):
    timeline_service.delete_event(actors["advocate"], hearing.event_id)

    with pytest.raises(TimelineEventNotFoundError):
        timeline_service.get_event(actors["advocate"], hearing.event_id)
    with pytest.raises(TimelineEventNotFoundError):
        timeline_service.update_event(actors["advocate"], hearing.event_id, {"notes": "x"})
    assert timeline_service.case_timeline(actors["advocate"], hearing.case_id) == []


# =============================================================================
# Reads
# =============================================================================

def test_case_parties_read_timeline(timeline_service, hearing, actors):
    for key in ("client", "advocate", "paralegal", "admin"):
        timeline = timeline_service.case_timeline(actors[key], hearing.case_id)
        assert [e.event_id for e in timeline] == [hearing.event_id]
    with pytest.raises(PermissionDeniedError):
        timeline_service.case_timeline(actors["client2"], hearing.case_id)


def test_timeline_is_ordered_by_event_date(timeline_service, staffed_case, actors):
    later = timeline_service.add_event(
        actors["advocate"], staffed_case.case_id, "Later", TimelineEventType.NOTE, in_days(5)
    )
    earlier = timeline_service.add_event(
        actors["advocate"], staffed_case.case_id, "Earlier", TimelineEventType.NOTE, in_days(-5)
    )
    timeline = timeline_service.case_timeline(actors["client"], staffed_case.case_id)
    assert [e.event_id for e in timeline] == [earlier.event_id, later.event_id]


def test_upcoming_and_next_hearing(timeline_service, hearing, staffed_case, actors):
    soon = timeline_service.add_hearing(actors["advocate"], staffed_case.case_id, in_days(2))

    upcoming = timeline_service.upcoming(actors["client"], staffed_case.case_id)
    assert [e.event_id for e in upcoming] == [soon.event_id, hearing.event_id]

    assert timeline_service.next_hearing(actors["client"], staffed_case.case_id).event_id == soon.event_id
    assert len(timeline_service.hearings(actors["client"], staffed_case.case_id)) == 2
