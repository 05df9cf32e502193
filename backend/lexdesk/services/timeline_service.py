"""Timeline Service - Case events, hearings and milestones"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pymongo.database import Database

from ..domain.models import (
    ActorContext, Case, TimelineEvent, HearingDetails, EventLocation, EventParticipant
)
from ..domain.enums import (
    TimelineEventType, TimelineEventStatus, HearingType, MilestoneType, CasePriority, Priority,
    ActivityType, ActivityImportance, NotificationType, EntityType
)
from ..domain.errors import ValidationError, InvalidStateError, TimelineEventNotFoundError
from ..engine.access_guard import AccessGuard
from ..engine.activity_logger import ActivityLogger
from ..repositories.case_repo import CaseRepository
from ..repositories.timeline_repo import TimelineRepository
from .notification_service import NotificationService
from .common import apply_updates
from ..utils.idgen import generate_timeline_event_id
from ..utils.time import utc_now, ensure_utc
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_HEARING_TITLE = "Court Hearing"

UPDATABLE_FIELDS = (
    "title", "description", "event_date", "event_time", "location", "priority",
    "participants", "notes", "hearing_details",
)


class TimelineService:
    """
    Service for case timeline events.

    Authoring is limited to the case's advocate (or an admin); reads need
    case view. Deleting an event hides it.
    """

    def __init__(self, database: Optional[Database] = None):
        self.repo = TimelineRepository(database)
        self.case_repo = CaseRepository(database)
        self.activity = ActivityLogger(database)
        self.notifications = NotificationService(database)
        self.guard = AccessGuard(case_lookup=self.case_repo.get)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _case_for_author(self, actor: ActorContext, case_id: str) -> Case:
        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_advocate(actor, case)
        return case

    def _case_for_reader(self, actor: ActorContext, case_id: str) -> Case:
        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_view(actor, case)
        return case

    def _visible_event(self, event_id: str) -> TimelineEvent:
        event = self.repo.get_or_raise(event_id)
        if not event.is_visible:
            raise TimelineEventNotFoundError(
                "Timeline event not found", details={"event_id": event_id}
            )
        return event

    def _hearing_for_author(self, actor: ActorContext, event_id: str):
        event = self._visible_event(event_id)
        case = self._case_for_author(actor, event.case_id)
        if not event.is_hearing:
            raise ValidationError("Event is not a hearing", details={"event_id": event_id})
        return event, case

    def _set_next_hearing(self, case: Case, when: Optional[datetime]) -> None:
        case.next_hearing_date = ensure_utc(when)
        case.updated_at = utc_now()
        self.case_repo.save(case)

    # =========================================================================
    # Authoring
    # =========================================================================

    def add_event(
        self,
        actor: ActorContext,
        case_id: str,
        title: str,
        event_type: TimelineEventType,
        event_date: datetime,
        description: str = "",
        event_time: Optional[str] = None,
        location: Optional[EventLocation] = None,
        is_milestone: bool = False,
        milestone_type: Optional[MilestoneType] = None,
        priority: CasePriority = CasePriority.MEDIUM,
        participants: Optional[List[EventParticipant]] = None,
        notes: Optional[str] = None,
        hearing_details: Optional[HearingDetails] = None
    ) -> TimelineEvent:
        if not title or event_type is None or event_date is None:
            raise ValidationError("Title, event type and event date are required")

        self._case_for_author(actor, case_id)

        now = utc_now()
        event = TimelineEvent(
            event_id=generate_timeline_event_id(),
            case_id=case_id,
            title=title,
            description=description,
            event_type=event_type,
            event_date=event_date,
            event_time=event_time,
            location=location,
            hearing_details=hearing_details,
            is_milestone=is_milestone,
            milestone_type=milestone_type,
            priority=priority,
            participants=participants or [],
            notes=notes,
            created_by=actor.user_id,
            created_at=now,
            updated_at=now
        )
        self.repo.insert(event)

        self.activity.record_entity(
            case_id, actor.user_id, ActivityType.TIMELINE_EVENT_ADDED,
            f"Timeline event added: {event.title}",
            EntityType.TIMELINE, event.event_id,
            metadata={"event_type": event.event_type.value}
        )
        return event

    def add_hearing(
        self,
        actor: ActorContext,
        case_id: str,
        event_date: datetime,
        title: Optional[str] = None,
        hearing_type: HearingType = HearingType.REGULAR_HEARING,
        judge_assigned: Optional[str] = None,
        expected_duration: Optional[int] = None,
        event_time: Optional[str] = None,
        location: Optional[EventLocation] = None,
        description: str = "",
        priority: CasePriority = CasePriority.HIGH,
        participants: Optional[List[EventParticipant]] = None
    ) -> TimelineEvent:
        """Schedule a hearing and make it the case's next hearing date"""
        if event_date is None:
            raise ValidationError("Hearing date is required")

        case = self._case_for_author(actor, case_id)

        now = utc_now()
        event = TimelineEvent(
            event_id=generate_timeline_event_id(),
            case_id=case_id,
            title=title or DEFAULT_HEARING_TITLE,
            description=description,
            event_type=TimelineEventType.HEARING_SCHEDULED,
            event_date=event_date,
            event_time=event_time,
            location=location,
            hearing_details=HearingDetails(
                hearing_type=hearing_type,
                judge_assigned=judge_assigned or case.judge_assigned,
                expected_duration=expected_duration
            ),
            priority=priority,
            participants=participants or [],
            created_by=actor.user_id,
            created_at=now,
            updated_at=now
        )
        self.repo.insert(event)
        self._set_next_hearing(case, event.event_date)

        logger.info(
            f"Hearing scheduled for {event.event_date.isoformat()}",
            extra={"case_id": case_id, "actor_id": actor.user_id}
        )
        self.activity.record_entity(
            case_id, actor.user_id, ActivityType.HEARING_SCHEDULED,
            f"Hearing scheduled: {event.title}",
            EntityType.HEARING, event.event_id,
            importance=ActivityImportance.HIGH
        )
        self.notifications.notify(
            case.client_id,
            NotificationType.HEARING_SCHEDULED,
            "Hearing Scheduled",
            f"A hearing for case {case.case_number} is scheduled on {event.event_date:%Y-%m-%d}",
            entity_type=EntityType.CASE,
            entity_id=case_id,
            action_url=f"/cases/{case_id}/timeline",
            priority=Priority.HIGH
        )
        return event

    def update_event(self, actor: ActorContext, event_id: str, updates: Dict[str, Any]) -> TimelineEvent:
        event = self._visible_event(event_id)
        self._case_for_author(actor, event.case_id)

        updated, changes = apply_updates(event, updates, UPDATABLE_FIELDS)
        if not changes:
            return event
        updated.updated_by = actor.user_id
        updated.updated_at = utc_now()
        self.repo.save(updated)

        self.activity.record_entity(
            event.case_id, actor.user_id,
            ActivityType.HEARING_UPDATED if updated.is_hearing else ActivityType.TIMELINE_EVENT_UPDATED,
            f"Timeline event updated: {updated.title}",
            EntityType.TIMELINE, event_id,
            changes=changes
        )
        return updated

    def complete_hearing(
        self,
        actor: ActorContext,
        event_id: str,
        outcome: Optional[str] = None,
        actual_duration: Optional[int] = None,
        next_hearing_date: Optional[datetime] = None,
        notes: Optional[str] = None
    ) -> TimelineEvent:
        event, case = self._hearing_for_author(actor, event_id)
        if event.status == TimelineEventStatus.CANCELLED:
            raise InvalidStateError("Cannot complete a cancelled hearing")

        event.mark_completed(outcome, actual_duration, next_hearing_date)
        if notes:
            event.notes = notes
        event.updated_by = actor.user_id
        event.updated_at = utc_now()
        self.repo.save(event)

        if next_hearing_date is not None:
            self._set_next_hearing(case, next_hearing_date)

        self.activity.record_entity(
            case.case_id, actor.user_id, ActivityType.HEARING_COMPLETED,
            f"Hearing completed: {event.title}",
            EntityType.HEARING, event_id,
            metadata={"outcome": outcome} if outcome else None,
            importance=ActivityImportance.HIGH
        )
        self.notifications.notify(
            case.client_id,
            NotificationType.HEARING_COMPLETED,
            "Hearing Completed",
            f"The hearing for case {case.case_number} has been completed",
            entity_type=EntityType.CASE,
            entity_id=case.case_id,
            action_url=f"/cases/{case.case_id}/timeline"
        )
        return event

    def postpone_hearing(
        self,
        actor: ActorContext,
        event_id: str,
        reason: Optional[str],
        new_date: Optional[datetime] = None
    ) -> TimelineEvent:
        """Record a postponement; the original event_date stays as scheduled"""
        if not reason or not reason.strip():
            raise ValidationError("Postponement reason is required")

        event, case = self._hearing_for_author(actor, event_id)
        event.mark_postponed(reason.strip(), new_date)
        event.updated_by = actor.user_id
        event.updated_at = utc_now()
        self.repo.save(event)

        if new_date is not None:
            self._set_next_hearing(case, new_date)

        self.activity.record_entity(
            case.case_id, actor.user_id, ActivityType.HEARING_POSTPONED,
            f"Hearing postponed: {reason.strip()}",
            EntityType.HEARING, event_id,
            metadata={"new_date": new_date.isoformat() if new_date else None}
        )
        return event

    def cancel_event(self, actor: ActorContext, event_id: str) -> TimelineEvent:
        event = self._visible_event(event_id)
        self._case_for_author(actor, event.case_id)

        event.cancel()
        event.updated_by = actor.user_id
        event.updated_at = utc_now()
        self.repo.save(event)

        if event.is_hearing:
            self.activity.record_entity(
                event.case_id, actor.user_id, ActivityType.HEARING_CANCELLED,
                f"Hearing cancelled: {event.title}",
                EntityType.HEARING, event_id
            )
        return event

    def mark_milestone(
        self,
        actor: ActorContext,
        event_id: str,
        milestone_type: MilestoneType = MilestoneType.OTHER
    ) -> TimelineEvent:
        event = self._visible_event(event_id)
        self._case_for_author(actor, event.case_id)

        event.is_milestone = True
        event.milestone_type = milestone_type
        event.updated_by = actor.user_id
        event.updated_at = utc_now()
        self.repo.save(event)

        self.activity.record_entity(
            event.case_id, actor.user_id, ActivityType.MILESTONE_MARKED,
            f"Milestone marked: {event.title}",
            EntityType.TIMELINE, event_id,
            metadata={"milestone_type": milestone_type.value}
        )
        return event

    def delete_event(self, actor: ActorContext, event_id: str) -> None:
        event = self._visible_event(event_id)
        self._case_for_author(actor, event.case_id)

        event.hide()
        event.updated_by = actor.user_id
        event.updated_at = utc_now()
        self.repo.save(event)

        self.activity.record_entity(
            event.case_id, actor.user_id, ActivityType.TIMELINE_EVENT_DELETED,
            f"Timeline event deleted: {event.title}",
            EntityType.TIMELINE, event_id
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_event(self, actor: ActorContext, event_id: str) -> TimelineEvent:
        event = self._visible_event(event_id)
        self._case_for_reader(actor, event.case_id)
        return event

    def case_timeline(
        self,
        actor: ActorContext,
        case_id: str,
        event_type: Optional[TimelineEventType] = None,
        status: Optional[TimelineEventStatus] = None
    ) -> List[TimelineEvent]:
        self._case_for_reader(actor, case_id)
        return self.repo.visible_for_case(
            case_id,
            event_type=event_type.value if event_type else None,
            status=status.value if status else None
        )

    def hearings(self, actor: ActorContext, case_id: str) -> List[TimelineEvent]:
        self._case_for_reader(actor, case_id)
        return self.repo.hearings(case_id)

    def milestones(self, actor: ActorContext, case_id: str) -> List[TimelineEvent]:
        self._case_for_reader(actor, case_id)
        return self.repo.milestones(case_id)

    def upcoming(self, actor: ActorContext, case_id: str, limit: int = 10) -> List[TimelineEvent]:
        self._case_for_reader(actor, case_id)
        return self.repo.upcoming(case_id, utc_now(), limit=limit)

    def next_hearing(self, actor: ActorContext, case_id: str) -> Optional[TimelineEvent]:
        self._case_for_reader(actor, case_id)
        return self.repo.next_hearing(case_id, utc_now())
