"""Tests for the seed script"""
from lexdesk.domain.enums import CaseStatus
from lexdesk.repositories.case_repo import CaseRepository
from lexdesk.repositories.connection_repo import ConnectionRepository

from scripts.seed_data import seed


def test_seed_creates_connected_case(db):
    summary = seed(db)

    assert summary["seeded"]
    case = CaseRepository(db).get(summary["case_id"])
    assert case.status == CaseStatus.ACTIVE
    assert case.client_id == summary["user_ids"]["client"]
    assert case.paralegal_ids == [summary["user_ids"]["paralegal"]]
    assert ConnectionRepository(db).has_accepted_between(
        summary["user_ids"]["client"], summary["user_ids"]["advocate"]
    )


def test_seed_is_skipped_when_users_exist(db, users):
    assert seed(db) == {"seeded": False}
