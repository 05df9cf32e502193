"""Case Repository - Data access for cases"""
import re
from typing import Any, Dict, List, Optional, Tuple
from pymongo.database import Database

from .base_repo import EntityRepository
from .counter_repo import CounterRepository
from ..config.settings import settings
from ..domain.models import Case
from ..domain.enums import UserRole
from ..domain.errors import CaseNotFoundError
from ..utils.idgen import format_case_number
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)

CASE_NUMBER_SEQUENCE = "case_number"


class CaseRepository(EntityRepository[Case]):
    """Repository for case operations"""

    COLLECTION_NAME = "cases"
    ID_FIELD = "case_id"
    MODEL = Case
    NOT_FOUND = CaseNotFoundError
    ENTITY_LABEL = "Case"
    DUPLICATE_MESSAGE = "Case number is already taken"

    def __init__(self, database: Optional[Database] = None):
        super().__init__(database)
        self._counters = CounterRepository(database)

    def next_case_number(self) -> str:
        """Allocate the next human readable case number"""
        sequence = self._counters.next_value(
            CASE_NUMBER_SEQUENCE, seed=lambda: self.count()
        )
        return format_case_number(settings.case_number_prefix, utc_now().year, sequence)

    @staticmethod
    def scope_query(user_id: str, role: UserRole) -> Dict[str, Any]:
        """Cases visible to a role: own cases for parties, everything for admin"""
        if role == UserRole.CLIENT:
            return {"client_id": user_id}
        if role == UserRole.ADVOCATE:
            return {"advocate_id": user_id}
        if role == UserRole.PARALEGAL:
            return {"paralegal_ids": user_id}
        return {}

    def list_cases(
        self,
        user_id: str,
        role: UserRole,
        status: Optional[str] = None,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Case], int]:
        query = self.scope_query(user_id, role)
        if status:
            query["status"] = status
        if category:
            query["category"] = category
        if priority:
            query["priority"] = priority
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"title": {"$regex": pattern, "$options": "i"}},
                {"case_number": {"$regex": pattern, "$options": "i"}},
                {"description": {"$regex": pattern, "$options": "i"}},
            ]
        return self.find_page(query, page=page, limit=limit)

    def case_ids_for(self, user_id: str, role: UserRole) -> List[str]:
        return [
            doc["_id"]
            for doc in self._collection.find(self.scope_query(user_id, role), {"_id": 1})
        ]

    def adjust_counter(self, case_id: str, field: str, delta: int) -> None:
        """Atomically bump total_documents / total_tasks"""
        self._collection.update_one(
            {"_id": case_id},
            {"$inc": {field: delta}, "$set": {"updated_at": utc_now()}}
        )
        logger.debug(f"Adjusted {field} by {delta}", extra={"case_id": case_id})
