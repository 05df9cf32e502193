"""Note Repository - Data access for personal notes"""
import re
from typing import Any, Dict, List, Optional, Tuple

from .base_repo import EntityRepository
from ..domain.models import Note
from ..domain.errors import NoteNotFoundError


class NoteRepository(EntityRepository[Note]):
    """Repository for notes"""

    COLLECTION_NAME = "notes"
    ID_FIELD = "note_id"
    MODEL = Note
    NOT_FOUND = NoteNotFoundError
    ENTITY_LABEL = "Note"

    def list_for_user(
        self,
        user_id: Optional[str],
        category: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Note], int]:
        """Notes of one owner; user_id None lists every owner's notes"""
        query: Dict[str, Any] = {}
        if user_id is not None:
            query["user_id"] = user_id
        if category:
            query["category"] = category
        if status:
            query["status"] = status
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"title": {"$regex": pattern, "$options": "i"}},
                {"content": {"$regex": pattern, "$options": "i"}},
            ]
        return self.find_page(query, page=page, limit=limit, sort_field="updated_at")
