"""Case Service - Case management business logic"""
from typing import Any, Dict, List, Optional, Tuple
from pymongo.database import Database

from ..domain.models import ActorContext, Case
from ..domain.enums import (
    UserRole, CaseStatus, CaseCategory, CasePriority, ConnectionType, CLOSE_OUTCOMES,
    ActivityType, ActivityImportance, NotificationType, EntityType
)
from ..domain.errors import (
    ValidationError, PermissionDeniedError, UserNotFoundError, AlreadyExistsError,
    NotFoundError
)
from ..engine.access_guard import AccessGuard
from ..engine.activity_logger import ActivityLogger
from ..repositories.case_repo import CaseRepository
from ..repositories.connection_repo import ConnectionRepository
from ..repositories.user_repo import UserRepository
from .notification_service import NotificationService
from .common import apply_updates
from ..utils.idgen import generate_case_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)

UPDATABLE_FIELDS = (
    "title", "description", "category", "sub_category", "status", "priority",
    "court_name", "court_location", "judge_assigned", "opposing_party", "case_value",
    "tags", "filing_date", "next_hearing_date",
)


class CaseService:
    """Service for case operations"""

    def __init__(self, database: Optional[Database] = None):
        self.case_repo = CaseRepository(database)
        self.user_repo = UserRepository(database)
        self.connection_repo = ConnectionRepository(database)
        self.activity = ActivityLogger(database)
        self.notifications = NotificationService(database)
        self.guard = AccessGuard(case_lookup=self.case_repo.get)

    # =========================================================================
    # Creation
    # =========================================================================

    def _resolve_parties(
        self,
        actor: ActorContext,
        client_id: Optional[str],
        advocate_id: Optional[str]
    ) -> Tuple[str, str]:
        """Pick client and advocate ids for the actor's role and check the connection"""
        if actor.role == UserRole.CLIENT:
            if not advocate_id:
                raise ValidationError("Advocate is required")
            client_id = actor.user_id
        elif actor.role == UserRole.ADVOCATE:
            if not client_id:
                raise ValidationError("Client is required")
            advocate_id = actor.user_id
        elif actor.role == UserRole.ADMIN:
            if not client_id or not advocate_id:
                raise ValidationError("Client and advocate are required")
        else:
            raise PermissionDeniedError("Only clients, advocates and admins can create cases")

        if self.user_repo.get_with_role(client_id, UserRole.CLIENT) is None:
            raise UserNotFoundError("Client not found", details={"client_id": client_id})
        if self.user_repo.get_with_role(advocate_id, UserRole.ADVOCATE) is None:
            raise UserNotFoundError("Advocate not found", details={"advocate_id": advocate_id})

        if not actor.is_admin:
            connection = self.connection_repo.find_accepted(
                client_id, advocate_id, ConnectionType.ADVOCATE
            )
            if connection is None:
                raise PermissionDeniedError(
                    "An accepted connection between client and advocate is required",
                    details={"client_id": client_id, "advocate_id": advocate_id}
                )
        return client_id, advocate_id

    def create_case(
        self,
        actor: ActorContext,
        title: str,
        category: CaseCategory,
        client_id: Optional[str] = None,
        advocate_id: Optional[str] = None,
        paralegal_ids: Optional[List[str]] = None,
        description: str = "",
        priority: CasePriority = CasePriority.MEDIUM,
        **details: Any
    ) -> Case:
        """Open a new case between a client and an advocate"""
        if not title or not title.strip():
            raise ValidationError("Title is required")

        client_id, advocate_id = self._resolve_parties(actor, client_id, advocate_id)

        paralegal_ids = list(dict.fromkeys(paralegal_ids or []))
        if paralegal_ids and self.user_repo.count_with_role(paralegal_ids, UserRole.PARALEGAL) != len(paralegal_ids):
            raise ValidationError(
                "One or more paralegals are invalid", details={"paralegal_ids": paralegal_ids}
            )

        now = utc_now()
        case = Case(
            case_id=generate_case_id(),
            case_number=self.case_repo.next_case_number(),
            title=title.strip(),
            description=description,
            category=category,
            status=CaseStatus.ACTIVE,
            priority=priority,
            client_id=client_id,
            advocate_id=advocate_id,
            paralegal_ids=paralegal_ids,
            created_by=actor.user_id,
            created_at=now,
            updated_at=now,
            **details
        )
        self.case_repo.insert(case)

        logger.info(
            f"Case created: {case.case_number}",
            extra={"case_id": case.case_id, "actor_id": actor.user_id}
        )

        self.activity.record_entity(
            case.case_id, actor.user_id, ActivityType.CASE_CREATED,
            f"Case {case.case_number} created",
            EntityType.CASE, case.case_id,
            importance=ActivityImportance.HIGH
        )
        counterparty = advocate_id if actor.user_id == client_id else client_id
        self.notifications.notify(
            counterparty,
            NotificationType.CASE_CREATED,
            "New Case Created",
            f"Case {case.case_number}: {case.title}",
            entity_type=EntityType.CASE,
            entity_id=case.case_id,
            action_url=f"/cases/{case.case_id}"
        )
        return case

    # =========================================================================
    # Queries
    # =========================================================================

    def list_cases(
        self,
        actor: ActorContext,
        status: Optional[CaseStatus] = None,
        category: Optional[CaseCategory] = None,
        priority: Optional[CasePriority] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Case], int]:
        return self.case_repo.list_cases(
            actor.user_id,
            actor.role,
            status=status.value if status else None,
            category=category.value if category else None,
            priority=priority.value if priority else None,
            search=search,
            page=page,
            limit=limit
        )

    def get_case(self, actor: ActorContext, case_id: str) -> Case:
        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_view(actor, case)
        return case

    def stats(self, actor: ActorContext) -> Dict[str, Any]:
        scope = CaseRepository.scope_query(actor.user_id, actor.role)
        return {
            "total": self.case_repo.count(scope),
            "by_status": self.case_repo.count_by("status", scope),
            "by_priority": self.case_repo.count_by("priority", scope),
            "by_category": self.case_repo.count_by("category", scope),
        }

    # =========================================================================
    # Mutations
    # =========================================================================

    def _load_for_edit(self, actor: ActorContext, case_id: str) -> Case:
        case = self.case_repo.get_or_raise(case_id)
        self.guard.require_case_edit(actor, case)
        return case

    def update_case(self, actor: ActorContext, case_id: str, updates: Dict[str, Any]) -> Case:
        case = self._load_for_edit(actor, case_id)
        updated, changes = apply_updates(case, updates, UPDATABLE_FIELDS)
        if not changes:
            return case

        updated.updated_at = utc_now()
        self.case_repo.save(updated)

        status_changed = any(change.field == "status" for change in changes)
        self.activity.record_entity(
            case_id, actor.user_id,
            ActivityType.CASE_STATUS_CHANGED if status_changed else ActivityType.CASE_UPDATED,
            f"Case {updated.case_number} updated",
            EntityType.CASE, case_id,
            changes=changes
        )
        if status_changed:
            self.notifications.notify(
                updated.client_id,
                NotificationType.CASE_STATUS_CHANGED,
                "Case Status Changed",
                f"Case {updated.case_number} is now {updated.status.value}",
                entity_type=EntityType.CASE,
                entity_id=case_id,
                action_url=f"/cases/{case_id}"
            )
        return updated

    def assign_paralegal(self, actor: ActorContext, case_id: str, paralegal_id: str) -> Case:
        case = self._load_for_edit(actor, case_id)

        paralegal = self.user_repo.get_with_role(paralegal_id, UserRole.PARALEGAL)
        if paralegal is None:
            raise UserNotFoundError("Paralegal not found", details={"paralegal_id": paralegal_id})
        if case.has_paralegal(paralegal_id):
            raise AlreadyExistsError(
                "Paralegal is already assigned to this case",
                details={"case_id": case_id, "paralegal_id": paralegal_id}
            )

        case.paralegal_ids.append(paralegal_id)
        case.updated_at = utc_now()
        self.case_repo.save(case)

        self.activity.record_entity(
            case_id, actor.user_id, ActivityType.PARALEGAL_ASSIGNED,
            f"{paralegal.name} assigned to case",
            EntityType.USER, paralegal_id
        )
        self.notifications.notify(
            paralegal_id,
            NotificationType.PARALEGAL_ASSIGNED,
            "Assigned to Case",
            f"You have been assigned to case {case.case_number}",
            entity_type=EntityType.CASE,
            entity_id=case_id,
            action_url=f"/cases/{case_id}"
        )
        return case

    def remove_paralegal(self, actor: ActorContext, case_id: str, paralegal_id: str) -> Case:
        case = self._load_for_edit(actor, case_id)
        if not case.has_paralegal(paralegal_id):
            raise NotFoundError(
                "Paralegal is not assigned to this case",
                details={"case_id": case_id, "paralegal_id": paralegal_id}
            )

        case.paralegal_ids.remove(paralegal_id)
        case.updated_at = utc_now()
        self.case_repo.save(case)

        self.activity.record_entity(
            case_id, actor.user_id, ActivityType.PARALEGAL_REMOVED,
            "Paralegal removed from case",
            EntityType.USER, paralegal_id
        )
        return case

    def close_case(self, actor: ActorContext, case_id: str, outcome: Any) -> Case:
        """Close with won, lost or closed; re-closing re-stamps closed_date"""
        try:
            outcome = CaseStatus(outcome)
        except ValueError:
            outcome = None
        if outcome not in CLOSE_OUTCOMES:
            raise ValidationError(
                "Outcome must be one of: won, lost, closed",
                details={"allowed": [o.value for o in CLOSE_OUTCOMES]}
            )

        case = self._load_for_edit(actor, case_id)
        case.close(outcome)
        case.updated_at = utc_now()
        self.case_repo.save(case)

        logger.info(
            f"Case closed as {outcome.value}",
            extra={"case_id": case_id, "status": outcome.value}
        )
        self.activity.record_entity(
            case_id, actor.user_id, ActivityType.CASE_CLOSED,
            f"Case closed as {outcome.value}",
            EntityType.CASE, case_id,
            importance=ActivityImportance.HIGH
        )
        self.notifications.notify(
            case.client_id,
            NotificationType.CASE_CLOSED,
            "Case Closed",
            f"Case {case.case_number} has been closed ({outcome.value})",
            entity_type=EntityType.CASE,
            entity_id=case_id,
            action_url=f"/cases/{case_id}"
        )
        return case

    def set_archived(self, actor: ActorContext, case_id: str, archived: bool) -> Case:
        case = self._load_for_edit(actor, case_id)
        if archived:
            case.archive()
        else:
            case.unarchive()
        case.updated_at = utc_now()
        self.case_repo.save(case)

        self.activity.record_entity(
            case_id, actor.user_id, ActivityType.CASE_ARCHIVED,
            "Case archived" if archived else "Case unarchived",
            EntityType.CASE, case_id,
            metadata={"archived": archived}
        )
        return case

    def delete_case(self, actor: ActorContext, case_id: str) -> None:
        self.guard.require_admin(actor, "delete cases")
        case = self.case_repo.get_or_raise(case_id)
        self.case_repo.delete(case.case_id)

        logger.info(f"Case deleted: {case.case_number}", extra={"case_id": case_id})
        self.activity.record_entity(
            case_id, actor.user_id, ActivityType.CASE_DELETED,
            f"Case {case.case_number} deleted",
            EntityType.CASE, case_id,
            importance=ActivityImportance.CRITICAL
        )
