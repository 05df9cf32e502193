"""
Seed Data Script - Creates sample users, a connection and a case for local testing
Run (from backend/): python -m scripts.seed_data
"""
from typing import Any, Dict, Optional

from pymongo.database import Database

from lexdesk.domain.enums import CaseCategory, CasePriority, UserRole
from lexdesk.domain.models import ActorContext, User
from lexdesk.repositories.mongo_client import create_indexes
from lexdesk.repositories.user_repo import UserRepository
from lexdesk.services.case_service import CaseService
from lexdesk.services.connection_service import ConnectionService
from lexdesk.services.user_service import UserService


SAMPLE_USERS = [
    ("Asha Rao", "asha.rao@lexdesk.in", UserRole.CLIENT, None),
    ("Meera Iyer", "meera.iyer@lexdesk.in", UserRole.ADVOCATE, "civil"),
    ("Priya Nair", "priya.nair@lexdesk.in", UserRole.PARALEGAL, None),
    ("Site Admin", "admin@lexdesk.in", UserRole.ADMIN, None),
]


def _actor(user: User) -> ActorContext:
    return ActorContext(user_id=user.user_id, email=user.email, name=user.name, role=user.role)


def seed(database: Optional[Database] = None) -> Dict[str, Any]:
    """
    Register one user per role, connect the client to the advocate and
    open a sample case. Does nothing when users already exist.
    """
    create_indexes(database)

    if UserRepository(database).count({}) > 0:
        print("Database already has users. Skipping seed.")
        return {"seeded": False}

    users = UserService(database)
    created = {
        role: users.register(name, email, role, specialization=specialization)
        for name, email, role, specialization in SAMPLE_USERS
    }
    client = _actor(created[UserRole.CLIENT])
    advocate = _actor(created[UserRole.ADVOCATE])
    paralegal = _actor(created[UserRole.PARALEGAL])

    connections = ConnectionService(database)
    request = connections.request(
        client, advocate.user_id, UserRole.ADVOCATE.value,
        message="I need help with a property boundary dispute"
    )
    connections.accept(advocate, request.connection_id, "Happy to help")

    case = CaseService(database).create_case(
        advocate,
        title="Boundary dispute with neighbour",
        category=CaseCategory.PROPERTY,
        client_id=client.user_id,
        paralegal_ids=[paralegal.user_id],
        description="Neighbour's compound wall encroaches two feet onto the plot",
        priority=CasePriority.HIGH,
        court_name="City Civil Court"
    )

    print(f"Created {len(created)} users")
    for role, user in created.items():
        print(f"  - {role.value}: {user.email} ({user.user_id})")
    print(f"Created case {case.case_number} ({case.case_id})")

    return {
        "seeded": True,
        "user_ids": {role.value: user.user_id for role, user in created.items()},
        "case_id": case.case_id,
    }


if __name__ == "__main__":
    seed()
