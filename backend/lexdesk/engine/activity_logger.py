"""Activity Logger - Append-only case activity trail"""
from typing import Any, Dict, List, Optional
from pymongo.database import Database

from ..domain.models import Activity, FieldChange, RelatedEntity
from ..domain.enums import ActivityType, ActivityImportance, EntityType
from ..domain.results import BestEffortResult
from ..repositories.activity_repo import ActivityRepository
from ..utils.idgen import generate_activity_id
from ..utils.time import utc_now
from ..utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)


class ActivityLogger:
    """
    Record activity entries for mutating operations.

    record() never raises: a storage failure is logged and returned as a
    failed BestEffortResult, and the operation that triggered it stands.
    """

    def __init__(self, database: Optional[Database] = None):
        self.repo = ActivityRepository(database)

    def record(
        self,
        case_id: str,
        user_id: str,
        activity_type: ActivityType,
        description: str,
        action: Optional[str] = None,
        related_entity: Optional[RelatedEntity] = None,
        changes: Optional[List[FieldChange]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        importance: ActivityImportance = ActivityImportance.MEDIUM
    ) -> BestEffortResult:
        """Write a single activity entry"""
        try:
            activity = Activity(
                activity_id=generate_activity_id(),
                case_id=case_id,
                user_id=user_id,
                activity_type=activity_type,
                description=description,
                action=action or activity_type.value.replace("_", " "),
                related_entity=related_entity,
                changes=changes or [],
                metadata=metadata or {},
                importance=importance,
                correlation_id=get_correlation_id(),
                created_at=utc_now()
            )
            self.repo.insert(activity)
        except Exception as e:
            logger.warning(
                f"Activity logging failed: {e}",
                extra={"case_id": case_id, "activity_type": activity_type.value}
            )
            return BestEffortResult.failed(e)

        return BestEffortResult.succeeded(activity)

    def record_entity(
        self,
        case_id: str,
        user_id: str,
        activity_type: ActivityType,
        description: str,
        entity_type: EntityType,
        entity_id: str,
        **kwargs: Any
    ) -> BestEffortResult:
        """record() with a related entity reference"""
        return self.record(
            case_id=case_id,
            user_id=user_id,
            activity_type=activity_type,
            description=description,
            related_entity=RelatedEntity(entity_type=entity_type, entity_id=entity_id),
            **kwargs
        )
