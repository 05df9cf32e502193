"""Activity Repository - Data access for the case activity trail"""
from typing import Any, Dict, List, Optional, Tuple

from .base_repo import EntityRepository
from ..domain.models import Activity
from ..domain.errors import ActivityNotFoundError


class ActivityRepository(EntityRepository[Activity]):
    """Repository for activity entries (append-only, visibility toggle aside)"""

    COLLECTION_NAME = "activities"
    ID_FIELD = "activity_id"
    MODEL = Activity
    NOT_FOUND = ActivityNotFoundError
    ENTITY_LABEL = "Activity"

    def for_case(
        self,
        case_id: str,
        activity_type: Optional[str] = None,
        include_hidden: bool = False,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[Activity], int]:
        query: Dict[str, Any] = {"case_id": case_id}
        if not include_hidden:
            query["is_visible"] = True
        if activity_type:
            query["activity_type"] = activity_type
        return self.find_page(query, page=page, limit=limit)

    def for_user(self, user_id: str, page: int = 1, limit: int = 50) -> Tuple[List[Activity], int]:
        return self.find_page({"user_id": user_id, "is_visible": True}, page=page, limit=limit)

    def recent_for_cases(self, case_ids: Optional[List[str]], limit: int = 20) -> List[Activity]:
        """Latest visible activity; case_ids None means every case"""
        query: Dict[str, Any] = {"is_visible": True}
        if case_ids is not None:
            query["case_id"] = {"$in": case_ids}
        return self.find(query, sort=[("created_at", -1)], limit=limit)

    def type_counts(self, case_id: str) -> Dict[str, int]:
        return self.count_by("activity_type", {"case_id": case_id, "is_visible": True})
