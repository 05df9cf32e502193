"""Timeline Repository - Data access for case timeline events"""
from datetime import datetime
from typing import List, Optional

from .base_repo import EntityRepository
from ..domain.models import TimelineEvent
from ..domain.enums import TimelineEventStatus
from ..domain.errors import TimelineEventNotFoundError


class TimelineRepository(EntityRepository[TimelineEvent]):
    """Repository for timeline events (soft-deleted events are hidden, never removed)"""

    COLLECTION_NAME = "timeline_events"
    ID_FIELD = "event_id"
    MODEL = TimelineEvent
    NOT_FOUND = TimelineEventNotFoundError
    ENTITY_LABEL = "Timeline event"

    def visible_for_case(
        self,
        case_id: str,
        event_type: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[TimelineEvent]:
        query = {"case_id": case_id, "is_visible": True}
        if event_type:
            query["event_type"] = event_type
        if status:
            query["status"] = status
        return self.find(query, sort=[("event_date", 1)])

    def hearings(self, case_id: str) -> List[TimelineEvent]:
        return self.find(
            {"case_id": case_id, "is_visible": True, "hearing_details": {"$ne": None}},
            sort=[("event_date", 1)]
        )

    def milestones(self, case_id: str) -> List[TimelineEvent]:
        return self.find(
            {"case_id": case_id, "is_visible": True, "is_milestone": True},
            sort=[("event_date", 1)]
        )

    def upcoming(self, case_id: str, now: datetime, limit: int = 10) -> List[TimelineEvent]:
        return self.find(
            {
                "case_id": case_id,
                "is_visible": True,
                "status": TimelineEventStatus.SCHEDULED.value,
                "event_date": {"$gte": now},
            },
            sort=[("event_date", 1)],
            limit=limit
        )

    def next_hearing(self, case_id: str, now: datetime) -> Optional[TimelineEvent]:
        events = self.find(
            {
                "case_id": case_id,
                "is_visible": True,
                "status": TimelineEventStatus.SCHEDULED.value,
                "hearing_details": {"$ne": None},
                "event_date": {"$gte": now},
            },
            sort=[("event_date", 1)],
            limit=1
        )
        return events[0] if events else None
