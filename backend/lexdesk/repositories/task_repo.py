"""Task Repository - Data access for case tasks"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .base_repo import EntityRepository
from ..domain.models import Task
from ..domain.enums import TaskStatus, UserRole
from ..domain.errors import TaskNotFoundError

CLOSED_STATUSES = [TaskStatus.COMPLETED.value, TaskStatus.CANCELLED.value]


class TaskRepository(EntityRepository[Task]):
    """Repository for task operations"""

    COLLECTION_NAME = "tasks"
    ID_FIELD = "task_id"
    MODEL = Task
    NOT_FOUND = TaskNotFoundError
    ENTITY_LABEL = "Task"

    @staticmethod
    def scope_query(user_id: str, role: UserRole) -> Dict[str, Any]:
        """Tasks visible in listings: assigned to a paralegal, assigned by anyone else"""
        if role == UserRole.ADMIN:
            return {}
        if role == UserRole.PARALEGAL:
            return {"assigned_to": user_id}
        return {"assigned_by": user_id}

    def list_tasks(
        self,
        user_id: str,
        role: UserRole,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        case_id: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Task], int]:
        query = self.scope_query(user_id, role)
        if status:
            query["status"] = status
        if priority:
            query["priority"] = priority
        if case_id:
            query["case_id"] = case_id
        return self.find_page(query, page=page, limit=limit)

    def for_case(self, case_id: str) -> List[Task]:
        return self.find({"case_id": case_id}, sort=[("due_date", 1)])

    def overdue(self, user_id: str, role: UserRole, now: datetime) -> List[Task]:
        query = self.scope_query(user_id, role)
        query["due_date"] = {"$lt": now}
        query["status"] = {"$nin": CLOSED_STATUSES}
        return self.find(query, sort=[("due_date", 1)])
