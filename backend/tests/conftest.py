"""
Pytest Configuration and Fixtures

Every test gets a fresh in-memory MongoDB (mongomock) with one user per
role already registered. Services are built directly on that database.
"""

from typing import Callable

import mongomock
import pytest

from lexdesk.domain.enums import CaseCategory, UserRole
from lexdesk.domain.models import ActorContext, User
from lexdesk.repositories.mongo_client import create_indexes
from lexdesk.services.case_service import CaseService
from lexdesk.services.connection_service import ConnectionService
from lexdesk.services.document_service import DocumentService
from lexdesk.services.message_service import MessageService
from lexdesk.services.note_service import NoteService
from lexdesk.services.notification_service import NotificationService
from lexdesk.services.reminder_service import ReminderService
from lexdesk.services.task_service import TaskService
from lexdesk.services.timeline_service import TimelineService
from lexdesk.services.user_service import UserService
from lexdesk.services.activity_service import ActivityService


# =============================================================================
# Storage
# =============================================================================

@pytest.fixture
def db():
    """Provide an isolated in-memory database with production indexes."""
    database = mongomock.MongoClient(tz_aware=True)["lexdesk_test"]
    create_indexes(database)
    return database


def as_actor(user: User) -> ActorContext:
    return ActorContext(
        user_id=user.user_id, email=user.email, name=user.name, role=user.role
    )


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def users(db):
    """One registered user per role, plus a second client/advocate/paralegal."""
    service = UserService(db)
    return {
        "client": service.register("Asha Rao", "asha@lexdesk.in", UserRole.CLIENT),
        "client2": service.register("Bilal Khan", "bilal@lexdesk.in", UserRole.CLIENT),
        "advocate": service.register(
            "Meera Iyer", "meera@lexdesk.in", UserRole.ADVOCATE, specialization="civil"
        ),
        "advocate2": service.register("Rohan Das", "rohan@lexdesk.in", UserRole.ADVOCATE),
        "paralegal": service.register("Priya Nair", "priya@lexdesk.in", UserRole.PARALEGAL),
        "paralegal2": service.register("Karan Shah", "karan@lexdesk.in", UserRole.PARALEGAL),
        "admin": service.register("Site Admin", "admin@lexdesk.in", UserRole.ADMIN),
    }


@pytest.fixture
def actors(users):
    return {key: as_actor(user) for key, user in users.items()}


# =============================================================================
# Services
# =============================================================================

@pytest.fixture
def case_service(db):
    return CaseService(db)


@pytest.fixture
def connection_service(db):
    return ConnectionService(db)


@pytest.fixture
def task_service(db):
    return TaskService(db)


@pytest.fixture
def reminder_service(db):
    return ReminderService(db)


@pytest.fixture
def timeline_service(db):
    return TimelineService(db)


@pytest.fixture
def document_service(db):
    return DocumentService(db)


@pytest.fixture
def message_service(db):
    return MessageService(db)


@pytest.fixture
def notification_service(db):
    return NotificationService(db)


@pytest.fixture
def note_service(db):
    return NoteService(db)


@pytest.fixture
def activity_service(db):
    return ActivityService(db)


# =============================================================================
# Scenario helpers
# =============================================================================

@pytest.fixture
def connect(connection_service, actors) -> Callable:
    """Request and accept a connection from a client to an advocate or paralegal."""
    def _connect(client_key: str, other_key: str):
        other = actors[other_key]
        connection = connection_service.request(
            actors[client_key], other.user_id, other.role.value
        )
        return connection_service.accept(other, connection.connection_id)
    return _connect


@pytest.fixture
def case(case_service, actors, connect):
    """An active case between client and advocate, opened by the advocate."""
    connect("client", "advocate")
    return case_service.create_case(
        actors["advocate"],
        title="Boundary dispute",
        category=CaseCategory.PROPERTY,
        client_id=actors["client"].user_id,
    )


@pytest.fixture
def staffed_case(case, case_service, actors):
    """The case with the first paralegal assigned."""
    return case_service.assign_paralegal(
        actors["advocate"], case.case_id, actors["paralegal"].user_id
    )

