"""Activity Service - Case activity trail queries"""
from typing import Any, Dict, List, Optional, Tuple
from pymongo.database import Database

from ..domain.models import ActorContext, Activity
from ..domain.enums import ActivityType
from ..engine.access_guard import AccessGuard
from ..repositories.activity_repo import ActivityRepository
from ..repositories.case_repo import CaseRepository
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ActivityService:
    """Read side of the activity trail; writes go through ActivityLogger"""

    def __init__(self, database: Optional[Database] = None):
        self.repo = ActivityRepository(database)
        self.case_repo = CaseRepository(database)
        self.guard = AccessGuard(case_lookup=self.case_repo.get)

    def case_activities(
        self,
        actor: ActorContext,
        case_id: str,
        activity_type: Optional[ActivityType] = None,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[Activity], int]:
        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_view(actor, case)
        return self.repo.for_case(
            case_id,
            activity_type=activity_type.value if activity_type else None,
            include_hidden=actor.is_admin,
            page=page,
            limit=limit
        )

    def case_stats(self, actor: ActorContext, case_id: str) -> Dict[str, Any]:
        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_view(actor, case)
        counts = self.repo.type_counts(case_id)
        return {"total": sum(counts.values()), "by_type": counts}

    def my_activities(self, actor: ActorContext, page: int = 1, limit: int = 50) -> Tuple[List[Activity], int]:
        return self.repo.for_user(actor.user_id, page=page, limit=limit)

    def recent(self, actor: ActorContext, limit: int = 20) -> List[Activity]:
        """Latest activity across every case the actor can see"""
        case_ids = None if actor.is_admin else self.case_repo.case_ids_for(actor.user_id, actor.role)
        return self.repo.recent_for_cases(case_ids, limit=limit)

    def get_activity(self, actor: ActorContext, activity_id: str) -> Activity:
        activity = self.repo.get_or_raise(activity_id)
        self.guard.require_activity_view(actor, activity)
        return activity

    def hide_activity(self, actor: ActorContext, activity_id: str) -> Activity:
        self.guard.require_admin(actor, "hide activity entries")
        activity = self.repo.get_or_raise(activity_id)
        activity.is_visible = False
        self.repo.save(activity)
        logger.info("Activity hidden", extra={"actor_id": actor.user_id})
        return activity
