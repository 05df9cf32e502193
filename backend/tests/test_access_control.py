"""Tests for the per-entity access evaluators and the guard that enforces them"""
import pytest

from lexdesk.domain.enums import (
    ActivityType, CaseCategory, DocumentCategory, DocumentPermission, ReminderType,
    UserRole
)
from lexdesk.domain.errors import PermissionDeniedError
from lexdesk.domain.models import (
    AccessPermissions, ActorContext, Activity, Case, Document, Message, Note,
    Notification, Reminder, ReminderRecipient, Task, UserGrant
)
from lexdesk.engine import access_control as rules
from lexdesk.engine.access_control import AccessDecision
from lexdesk.engine.access_guard import AccessGuard
from lexdesk.utils.time import utc_now


NOW = utc_now()


def make_case(**overrides) -> Case:
    fields = dict(
        case_id="CASE-1", case_number="CASE/2024/000001", title="Test", category=CaseCategory.CIVIL,
        client_id="client-1", advocate_id="adv-1", paralegal_ids=["para-1"],
        created_by="adv-1", created_at=NOW, updated_at=NOW
    )
    fields.update(overrides)
    return Case(**fields)


def make_document(**overrides) -> Document:
    fields = dict(
        document_id="DOC-1", name="petition.pdf", category=DocumentCategory.PETITION,
        case_id="CASE-1", uploaded_by="adv-1", uploaded_at=NOW, updated_at=NOW
    )
    fields.update(overrides)
    return Document(**fields)


def make_activity(**overrides) -> Activity:
    fields = dict(
        activity_id="ACT-1", case_id="CASE-1", user_id="adv-1",
        activity_type=ActivityType.CASE_UPDATED, description="Updated", action="case updated",
        created_at=NOW
    )
    fields.update(overrides)
    return Activity(**fields)


def actor(user_id: str, role: UserRole) -> ActorContext:
    return ActorContext(user_id=user_id, email=f"{user_id}@lexdesk.in", name=user_id, role=role)


# =============================================================================
# Admin symmetry
# =============================================================================

ENTITIES = {
    "case": make_case(),
    "document": make_document(
        uploaded_by="someone", case_id=None
    ),
    "message": Message(
        message_id="MSG-1", content="hi", sender_id="a", receiver_id="b",
        thread_id="MSG-1", created_at=NOW
    ),
    "notification": Notification(
        notification_id="NTF-1", user_id="a", notification_type="custom", title="t",
        message="m", created_at=NOW
    ),
    "task": Task(
        task_id="TSK-1", case_id="CASE-1", title="t", assigned_by="a", assigned_to="b",
        due_date=NOW, created_at=NOW, updated_at=NOW
    ),
    "reminder": Reminder(
        reminder_id="RMD-1", title="t", message="m", reminder_type=ReminderType.CUSTOM_REMINDER,
        reminder_date=NOW, recipients=[ReminderRecipient(user_id="b")], created_by="a",
        created_at=NOW, updated_at=NOW
    ),
    "note": Note(
        note_id="NOTE-1", user_id="a", title="t", content="c", created_at=NOW, updated_at=NOW
    ),
}


@pytest.mark.parametrize("evaluator,entity_key", [
    (rules.can_view_case, "case"),
    (rules.can_edit_case, "case"),
    (rules.can_edit_document, "document"),
    (rules.can_delete_document, "document"),
    (rules.can_view_message, "message"),
    (rules.can_delete_message, "message"),
    (rules.can_view_notification, "notification"),
    (rules.can_view_task, "task"),
    (rules.can_edit_task, "task"),
    (rules.can_update_task_status, "task"),
    (rules.can_edit_reminder, "reminder"),
    (rules.is_reminder_recipient, "reminder"),
    (rules.can_view_reminder, "reminder"),
    (rules.can_edit_note, "note"),
])
def test_admin_passes_every_boolean_evaluator(evaluator, entity_key):
    """An unrelated admin is allowed; the same id as a client is not."""
    entity = ENTITIES[entity_key]
    assert evaluator(entity, "outsider", UserRole.ADMIN) is True
    assert evaluator(entity, "outsider", UserRole.CLIENT) is False


def test_admin_passes_deciding_evaluators():
    assert rules.can_view_document(ENTITIES["document"], "outsider", UserRole.ADMIN) is AccessDecision.ALLOWED
    hidden = make_activity(is_visible=False)
    assert rules.can_view_activity(hidden, "outsider", UserRole.ADMIN) is AccessDecision.ALLOWED


# =============================================================================
# Case
# =============================================================================

def test_case_parties_can_view():
    case = make_case()
    for user_id, role in [
        ("client-1", UserRole.CLIENT),
        ("adv-1", UserRole.ADVOCATE),
        ("para-1", UserRole.PARALEGAL),
    ]:
        assert rules.can_view_case(case, user_id, role)
    assert not rules.can_view_case(case, "adv-2", UserRole.ADVOCATE)


def test_case_edit_is_advocate_only():
    case = make_case()
    assert rules.can_edit_case(case, "adv-1", UserRole.ADVOCATE)
    assert not rules.can_edit_case(case, "client-1", UserRole.CLIENT)
    assert not rules.can_edit_case(case, "para-1", UserRole.PARALEGAL)


def test_check_case_view_tolerates_missing_case():
    assert rules.check_case_view(None, "adv-1", UserRole.ADVOCATE) is False
    assert rules.check_case_view(None, "root", UserRole.ADMIN) is True


# =============================================================================
# Document
# =============================================================================

def test_document_uploader_public_role_and_grant():
    assert rules.can_view_document(make_document(), "adv-1", UserRole.ADVOCATE) is AccessDecision.ALLOWED

    public = make_document(access_permissions=AccessPermissions(is_public=True))
    assert rules.can_view_document(public, "x", UserRole.CLIENT) is AccessDecision.ALLOWED

    by_role = make_document(access_permissions=AccessPermissions(allowed_roles=[UserRole.PARALEGAL]))
    assert rules.can_view_document(by_role, "x", UserRole.PARALEGAL) is AccessDecision.ALLOWED

    granted = make_document(access_permissions=AccessPermissions(
        allowed_users=[UserGrant(user_id="x", permission=DocumentPermission.VIEW)]
    ))
    assert rules.can_view_document(granted, "x", UserRole.CLIENT) is AccessDecision.ALLOWED


def test_document_defers_to_case_or_denies_without_one():
    assert rules.can_view_document(make_document(), "x", UserRole.CLIENT) is AccessDecision.DEFER_TO_CASE_ACCESS
    assert rules.can_view_document(make_document(case_id=None), "x", UserRole.CLIENT) is AccessDecision.DENIED


def test_resolve_only_consults_case_on_deferral():
    calls = []

    def case_check():
        calls.append(1)
        return True

    assert rules.resolve(AccessDecision.ALLOWED, case_check) is True
    assert rules.resolve(AccessDecision.DENIED, case_check) is False
    assert calls == []
    assert rules.resolve(AccessDecision.DEFER_TO_CASE_ACCESS, case_check) is True
    assert calls == [1]


@pytest.mark.parametrize("permission,can_edit,can_delete", [
    (DocumentPermission.VIEW, False, False),
    (DocumentPermission.DOWNLOAD, False, False),
    (DocumentPermission.EDIT, True, False),
    (DocumentPermission.DELETE, True, True),
])
def test_document_grants(permission, can_edit, can_delete):
    document = make_document(access_permissions=AccessPermissions(
        allowed_users=[UserGrant(user_id="x", permission=permission)]
    ))
    assert rules.can_edit_document(document, "x", UserRole.PARALEGAL) is can_edit
    assert rules.can_delete_document(document, "x", UserRole.PARALEGAL) is can_delete


# =============================================================================
# Activity
# =============================================================================

def test_hidden_activity_is_admin_only_even_for_its_author():
    hidden = make_activity(is_visible=False)
    assert rules.can_view_activity(hidden, "adv-1", UserRole.ADVOCATE) is AccessDecision.DENIED


def test_activity_author_allowed_others_defer():
    activity = make_activity()
    assert rules.can_view_activity(activity, "adv-1", UserRole.ADVOCATE) is AccessDecision.ALLOWED
    assert rules.can_view_activity(activity, "client-1", UserRole.CLIENT) is AccessDecision.DEFER_TO_CASE_ACCESS


# =============================================================================
# Guard
# =============================================================================

def test_guard_resolves_deferrals_through_case_lookup():
    case = make_case()
    guard = AccessGuard(case_lookup=lambda case_id: case if case_id == case.case_id else None)
    document = make_document(uploaded_by="adv-1")

    assert guard.can_view_document(actor("client-1", UserRole.CLIENT), document)
    assert not guard.can_view_document(actor("stranger", UserRole.CLIENT), document)

    dangling = make_document(case_id="CASE-GONE")
    assert not guard.can_view_document(actor("client-1", UserRole.CLIENT), dangling)


def test_guard_without_lookup_denies_deferrals():
    guard = AccessGuard()
    assert not guard.can_view_activity(actor("client-1", UserRole.CLIENT), make_activity())


def test_require_methods_raise_permission_denied():
    guard = AccessGuard()
    case = make_case()

    with pytest.raises(PermissionDeniedError):
        guard.require_case_edit(actor("client-1", UserRole.CLIENT), case)
    with pytest.raises(PermissionDeniedError):
        guard.require_case_advocate(actor("para-1", UserRole.PARALEGAL), case)
    with pytest.raises(PermissionDeniedError) as exc_info:
        guard.require_admin(actor("adv-1", UserRole.ADVOCATE), "delete cases")
    assert exc_info.value.http_status == 403
    assert "delete cases" in exc_info.value.message

    guard.require_case_advocate(actor("adv-1", UserRole.ADVOCATE), case)
    guard.require_case_advocate(actor("root", UserRole.ADMIN), case)


def test_reminder_recipient_cannot_edit():
    guard = AccessGuard()
    reminder = ENTITIES["reminder"]
    recipient = actor("b", UserRole.PARALEGAL)

    guard.require_reminder_view(recipient, reminder)
    guard.require_reminder_recipient(recipient, reminder)
    with pytest.raises(PermissionDeniedError):
        guard.require_reminder_creator(recipient, reminder)
