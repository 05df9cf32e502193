"""User Repository - Data access for user profiles"""
import re
from typing import List, Optional

from .base_repo import EntityRepository
from ..domain.models import User
from ..domain.enums import UserRole
from ..domain.errors import UserNotFoundError


class UserRepository(EntityRepository[User]):
    """Repository for user profiles"""

    COLLECTION_NAME = "users"
    ID_FIELD = "user_id"
    MODEL = User
    NOT_FOUND = UserNotFoundError
    ENTITY_LABEL = "User"
    DUPLICATE_MESSAGE = "A user with this email already exists"

    def get_by_email(self, email: str) -> Optional[User]:
        doc = self._collection.find_one({"email": email.lower()})
        if doc:
            return self._to_model(doc)
        return None

    def get_with_role(self, user_id: str, role: UserRole) -> Optional[User]:
        """User with the given id, only if it holds the given role"""
        doc = self._collection.find_one({"_id": user_id, "role": role.value})
        if doc:
            return self._to_model(doc)
        return None

    def count_with_role(self, user_ids: List[str], role: UserRole) -> int:
        return self.count({"_id": {"$in": list(user_ids)}, "role": role.value})

    def search(self, role: UserRole, text: Optional[str] = None, limit: int = 20) -> List[User]:
        """Active users of a role, optionally matching name or email"""
        query = {"role": role.value, "is_active": True}
        if text:
            pattern = re.escape(text)
            query["$or"] = [
                {"name": {"$regex": pattern, "$options": "i"}},
                {"email": {"$regex": pattern, "$options": "i"}},
            ]
        return self.find(query, sort=[("name", 1)], limit=limit)
