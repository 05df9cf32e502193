"""Note Service - Personal notes"""
from typing import Any, Dict, List, Optional, Tuple
from pymongo.database import Database

from ..domain.models import ActorContext, Note
from ..domain.enums import NoteCategory, NotePriority, NoteStatus
from ..domain.errors import ValidationError
from ..engine.access_guard import AccessGuard
from ..repositories.note_repo import NoteRepository
from .common import apply_updates
from ..utils.idgen import generate_note_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)

UPDATABLE_FIELDS = ("title", "content", "category", "priority", "tags", "status")


class NoteService:
    """Service for notes; every operation is owner-or-admin"""

    def __init__(self, database: Optional[Database] = None):
        self.repo = NoteRepository(database)
        self.guard = AccessGuard()

    def create_note(
        self,
        actor: ActorContext,
        title: str,
        content: str,
        category: NoteCategory = NoteCategory.PERSONAL,
        priority: NotePriority = NotePriority.MEDIUM,
        tags: Optional[List[str]] = None,
        status: NoteStatus = NoteStatus.ACTIVE
    ) -> Note:
        if not title or not content:
            raise ValidationError("Title and content are required")
        if tags and len(tags) > 10:
            raise ValidationError("A note can have at most 10 tags")

        now = utc_now()
        note = Note(
            note_id=generate_note_id(),
            user_id=actor.user_id,
            title=title,
            content=content,
            category=category,
            priority=priority,
            tags=tags or [],
            status=status,
            created_at=now,
            updated_at=now
        )
        self.repo.insert(note)
        logger.info("Note created", extra={"user_id": actor.user_id})
        return note

    def list_notes(
        self,
        actor: ActorContext,
        category: Optional[NoteCategory] = None,
        status: Optional[NoteStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Note], int]:
        return self.repo.list_for_user(
            actor.user_id,
            category=category.value if category else None,
            status=status.value if status else None,
            search=search,
            page=page,
            limit=limit
        )

    def get_note(self, actor: ActorContext, note_id: str) -> Note:
        note = self.repo.get_or_raise(note_id)
        self.guard.require_note_owner(actor, note)
        return note

    def update_note(self, actor: ActorContext, note_id: str, updates: Dict[str, Any]) -> Note:
        note = self.get_note(actor, note_id)
        updated, changes = apply_updates(note, updates, UPDATABLE_FIELDS)
        if not changes:
            return note
        updated.updated_at = utc_now()
        return self.repo.save(updated)

    def archive_note(self, actor: ActorContext, note_id: str) -> Note:
        note = self.get_note(actor, note_id)
        note.archive()
        note.updated_at = utc_now()
        return self.repo.save(note)

    def delete_note(self, actor: ActorContext, note_id: str) -> None:
        note = self.get_note(actor, note_id)
        self.repo.delete(note.note_id)
