"""Tests for NoteService"""
import pytest

from lexdesk.domain.enums import NoteCategory, NotePriority, NoteStatus
from lexdesk.domain.errors import NoteNotFoundError, PermissionDeniedError, ValidationError


@pytest.fixture
def note(note_service, actors):
    return note_service.create_note(
        actors["client"], "Witnesses", "Neighbour saw the wall go up in March",
        category=NoteCategory.EVIDENCE, priority=NotePriority.HIGH, tags=["wall", "witness"]
    )


def test_create_note(note, users):
    assert note.user_id == users["client"].user_id
    assert note.status == NoteStatus.ACTIVE
    assert note.tags == ["wall", "witness"]


def test_create_validation(note_service, actors):
    with pytest.raises(ValidationError):
        note_service.create_note(actors["client"], "", "content")
    with pytest.raises(ValidationError):
        note_service.create_note(
            actors["client"], "Tags", "content", tags=[f"t{i}" for i in range(11)]
        )


def test_owner_or_admin_only(note_service, note, actors):
    assert note_service.get_note(actors["admin"], note.note_id).note_id == note.note_id
    with pytest.raises(PermissionDeniedError):
        note_service.get_note(actors["advocate"], note.note_id)
    with pytest.raises(PermissionDeniedError):
        note_service.delete_note(actors["client2"], note.note_id)


def test_list_and_search(note_service, note, actors):
    note_service.create_note(actors["client"], "Groceries", "Milk")
    items, total = note_service.list_notes(actors["client"], search="NEIGHBOUR")
    assert total == 1 and items[0].note_id == note.note_id

    items, total = note_service.list_notes(actors["client"], category=NoteCategory.PERSONAL)
    assert [n.title for n in items] == ["Groceries"]

    assert note_service.list_notes(actors["client2"]) == ([], 0)


def test_update_whitelist(note_service, note, actors):
    updated = note_service.update_note(actors["client"], note.note_id, {"title": "Witness list"})
    assert updated.title == "Witness list"
    assert updated.updated_at >= note.updated_at

    with pytest.raises(ValidationError):
        note_service.update_note(actors["client"], note.note_id, {"user_id": "USR-x"})
    with pytest.raises(ValidationError):
        note_service.update_note(actors["client"], note.note_id, {"priority": "urgent"})


def test_archive_and_delete(note_service, note, actors):
    archived = note_service.archive_note(actors["client"], note.note_id)
    assert archived.status == NoteStatus.ARCHIVED

    note_service.delete_note(actors["client"], note.note_id)
    with pytest.raises(NoteNotFoundError):
        note_service.get_note(actors["client"], note.note_id)
