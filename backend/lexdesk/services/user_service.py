"""User Service - Profile registration"""
from typing import Optional
from pymongo.database import Database

from ..domain.models import User
from ..domain.enums import UserRole
from ..domain.errors import AlreadyExistsError
from ..repositories.user_repo import UserRepository
from ..utils.idgen import generate_user_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class UserService:
    """Service for user profiles (credentials are handled elsewhere)"""

    def __init__(self, database: Optional[Database] = None):
        self.repo = UserRepository(database)

    def register(
        self,
        name: str,
        email: str,
        role: UserRole,
        phone: Optional[str] = None,
        specialization: Optional[str] = None
    ) -> User:
        email = email.strip().lower()
        if self.repo.get_by_email(email) is not None:
            raise AlreadyExistsError("A user with this email already exists", details={"email": email})

        user = User(
            user_id=generate_user_id(),
            name=name.strip(),
            email=email,
            role=role,
            phone=phone,
            specialization=specialization,
            created_at=utc_now()
        )
        self.repo.insert(user)
        logger.info(f"Registered {role.value}", extra={"user_id": user.user_id})
        return user

    def get_user(self, user_id: str) -> User:
        return self.repo.get_or_raise(user_id)

