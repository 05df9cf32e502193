"""Tests for ActivityService and the activity logger"""
import pytest

from lexdesk.domain.enums import ActivityType, CaseCategory
from lexdesk.domain.errors import ActivityNotFoundError, PermissionDeniedError
from lexdesk.engine.activity_logger import ActivityLogger


@pytest.fixture
def created_entry(activity_service, case, actors):
    items, _ = activity_service.case_activities(
        actors["advocate"], case.case_id, activity_type=ActivityType.CASE_CREATED
    )
    return items[0]


def test_case_creation_is_on_the_trail(created_entry, case, users):
    assert created_entry.case_id == case.case_id
    assert created_entry.user_id == users["advocate"].user_id


def test_case_parties_read_trail(activity_service, created_entry, case, actors):
    activity_service.get_activity(actors["client"], created_entry.activity_id)
    _, total = activity_service.case_activities(actors["client"], case.case_id)
    assert total >= 1
    with pytest.raises(PermissionDeniedError):
        activity_service.case_activities(actors["client2"], case.case_id)
    with pytest.raises(PermissionDeniedError):
        activity_service.get_activity(actors["client2"], created_entry.activity_id)


def test_hidden_entries_are_admin_only(activity_service, created_entry, case, actors):
    with pytest.raises(PermissionDeniedError):
        activity_service.hide_activity(actors["advocate"], created_entry.activity_id)

    hidden = activity_service.hide_activity(actors["admin"], created_entry.activity_id)
    assert not hidden.is_visible

    # even the author loses sight of it
    with pytest.raises(PermissionDeniedError):
        activity_service.get_activity(actors["advocate"], created_entry.activity_id)
    visible, _ = activity_service.case_activities(
        actors["advocate"], case.case_id, activity_type=ActivityType.CASE_CREATED
    )
    assert visible == []

    everything, _ = activity_service.case_activities(
        actors["admin"], case.case_id, activity_type=ActivityType.CASE_CREATED
    )
    assert [a.activity_id for a in everything] == [created_entry.activity_id]


def test_case_stats(activity_service, case_service, case, actors):
    case_service.close_case(actors["advocate"], case.case_id, "won")
    stats = activity_service.case_stats(actors["client"], case.case_id)
    assert stats["by_type"][ActivityType.CASE_CREATED.value] == 1
    assert stats["by_type"][ActivityType.CASE_CLOSED.value] == 1
    assert stats["total"] == sum(stats["by_type"].values())


def test_recent_is_scoped_to_visible_cases(activity_service, case_service, case, actors, connect):
    connect("client2", "advocate2")
    other = case_service.create_case(
        actors["advocate2"], "Tenancy", CaseCategory.CIVIL, client_id=actors["client2"].user_id
    )

    mine = {a.case_id for a in activity_service.recent(actors["client"])}
    assert mine == {case.case_id}
    everything = {a.case_id for a in activity_service.recent(actors["admin"])}
    assert everything == {case.case_id, other.case_id}


def test_my_activities(activity_service, case, actors):
    items, total = activity_service.my_activities(actors["advocate"])
    assert total >= 1
    assert all(a.user_id == actors["advocate"].user_id for a in items)
    assert activity_service.my_activities(actors["client2"]) == ([], 0)


def test_missing_activity(activity_service, actors):
    with pytest.raises(ActivityNotFoundError):
        activity_service.get_activity(actors["admin"], "ACT-missing")


def test_logger_swallows_storage_failures(db, case, monkeypatch):
    logger = ActivityLogger(db)

    def broken_insert(entity):
        raise RuntimeError("disk full")

    monkeypatch.setattr(logger.repo, "insert", broken_insert)
    result = logger.record(case.case_id, "USR-1", ActivityType.NOTE_CREATED, "Note created")
    assert not result.ok
