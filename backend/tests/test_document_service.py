"""Tests for DocumentService"""
import pytest

from lexdesk.domain.enums import ActivityType, DocumentCategory, DocumentPermission, UserRole
from lexdesk.domain.errors import (
    DocumentNotFoundError, PermissionDeniedError, ValidationError
)
from lexdesk.domain.models import AccessPermissions, UserGrant
from lexdesk.repositories.activity_repo import ActivityRepository
from lexdesk.repositories.case_repo import CaseRepository


@pytest.fixture
def document(document_service, staffed_case, actors):
    return document_service.upload(
        actors["advocate"], "sale-deed.pdf", DocumentCategory.PROPERTY_DOCUMENT,
        case_id=staffed_case.case_id, file_url="https://files.lexdesk.in/sale-deed.pdf",
        file_type="application/pdf", file_size=20480
    )


def total_documents(db, case_id):
    return CaseRepository(db).get(case_id).total_documents


# =============================================================================
# Upload and counters
# =============================================================================

def test_upload_bumps_case_counter_and_logs(db, document, staffed_case):
    assert total_documents(db, staffed_case.case_id) == 1
    activities, _ = ActivityRepository(db).for_case(
        staffed_case.case_id, activity_type=ActivityType.DOCUMENT_UPLOADED.value
    )
    assert len(activities) == 1


def test_upload_to_case_requires_case_view(document_service, staffed_case, actors):
    with pytest.raises(PermissionDeniedError):
        document_service.upload(
            actors["client2"], "x.pdf", DocumentCategory.OTHER, case_id=staffed_case.case_id
        )


def test_upload_to_own_note(document_service, note_service, actors):
    note = note_service.create_note(actors["client"], "Evidence list", "Photos of the wall")
    document = document_service.upload(
        actors["client"], "wall.jpg", DocumentCategory.EVIDENCE, note_id=note.note_id
    )
    assert document.note_id == note.note_id
    with pytest.raises(PermissionDeniedError):
        document_service.upload(
            actors["client2"], "wall.jpg", DocumentCategory.EVIDENCE, note_id=note.note_id
        )


def test_soft_delete_and_restore_keep_counter_in_step(db, document_service, document, actors):
    case_id = document.case_id
    document_service.delete_document(actors["advocate"], document.document_id)
    assert total_documents(db, case_id) == 0

    # hidden from everyone but admins
    with pytest.raises(DocumentNotFoundError):
        document_service.get_document(actors["advocate"], document.document_id)
    assert document_service.get_document(actors["admin"], document.document_id).is_deleted

    restored = document_service.restore_document(actors["admin"], document.document_id)
    assert not restored.is_deleted
    assert total_documents(db, case_id) == 1


def test_restore_rules(document_service, document, actors):
    with pytest.raises(PermissionDeniedError):
        document_service.restore_document(actors["advocate"], document.document_id)
    with pytest.raises(ValidationError):
        document_service.restore_document(actors["admin"], document.document_id)


def test_permanent_delete_is_admin_only(db, document_service, document, actors):
    with pytest.raises(PermissionDeniedError):
        document_service.delete_document(actors["advocate"], document.document_id, permanent=True)

    document_service.delete_document(actors["admin"], document.document_id, permanent=True)
    with pytest.raises(DocumentNotFoundError):
        document_service.get_document(actors["admin"], document.document_id)
    assert total_documents(db, document.case_id) == 0


# =============================================================================
# Access
# =============================================================================

def test_case_parties_see_case_documents(document_service, document, actors):
    for key in ("client", "paralegal", "admin"):
        document_service.get_document(actors[key], document.document_id)
    with pytest.raises(PermissionDeniedError):
        document_service.get_document(actors["client2"], document.document_id)


def test_grant_opens_document_to_outsider(document_service, document, actors, users):
    outsider = users["paralegal2"].user_id
    document_service.update_access_permissions(
        actors["advocate"], document.document_id,
        AccessPermissions(allowed_users=[UserGrant(user_id=outsider, permission=DocumentPermission.VIEW)])
    )
    document_service.get_document(actors["paralegal2"], document.document_id)

    with pytest.raises(PermissionDeniedError):
        document_service.update_document(actors["paralegal2"], document.document_id, {"name": "x"})


def test_role_grant(document_service, document, actors):
    document_service.update_access_permissions(
        actors["advocate"], document.document_id,
        AccessPermissions(allowed_roles=[UserRole.ADVOCATE])
    )
    document_service.get_document(actors["advocate2"], document.document_id)


def test_edit_grant_allows_edit_but_not_delete(document_service, document, actors, users):
    document_service.update_access_permissions(
        actors["advocate"], document.document_id,
        AccessPermissions(allowed_users=[
            UserGrant(user_id=users["paralegal"].user_id, permission=DocumentPermission.EDIT)
        ])
    )
    updated = document_service.update_document(
        actors["paralegal"], document.document_id, {"description": "Certified copy"}
    )
    assert updated.description == "Certified copy"
    with pytest.raises(PermissionDeniedError):
        document_service.delete_document(actors["paralegal"], document.document_id)


def test_case_party_without_grant_cannot_edit(document_service, document, actors):
    with pytest.raises(PermissionDeniedError):
        document_service.update_document(actors["client"], document.document_id, {"name": "x"})


def test_case_listing_filters_unviewable(document_service, document, staffed_case, actors):
    docs = document_service.list_case_documents(actors["client"], staffed_case.case_id)
    assert [d.document_id for d in docs] == [document.document_id]
    document_service.delete_document(actors["advocate"], document.document_id)
    assert document_service.list_case_documents(actors["client"], staffed_case.case_id) == []


def test_download_is_counted(document_service, document, actors):
    downloaded = document_service.record_download(actors["client"], document.document_id)
    assert downloaded.download_count == 1
    assert downloaded.last_downloaded_by == actors["client"].user_id


def test_update_whitelist(document_service, document, actors):
    with pytest.raises(ValidationError):
        document_service.update_document(actors["advocate"], document.document_id, {"uploaded_by": "x"})


def test_my_documents(document_service, document, actors):
    assert [d.document_id for d in document_service.my_documents(actors["advocate"])] == [
        document.document_id
    ]
    assert document_service.my_documents(actors["client"]) == []
