"""MongoDB Client - Connection and Collection Management"""
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel
from pymongo import MongoClient as PyMongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure, PyMongoError

from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Global client instance
_client: Optional[PyMongoClient] = None
_database: Optional[Database] = None


def get_client() -> PyMongoClient:
    """Get or create MongoDB client"""
    global _client
    if _client is None:
        logger.info(f"Connecting to MongoDB: {settings.mongo_uri}")
        _client = PyMongoClient(
            settings.mongo_uri,
            tz_aware=True,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
        )
        try:
            _client.admin.command("ping")
            logger.info("MongoDB connection successful")
        except ConnectionFailure as e:
            logger.error(f"MongoDB connection failed: {e}")
            raise
    return _client


def get_database() -> Database:
    """Get the application database"""
    global _database
    if _database is None:
        client = get_client()
        _database = client[settings.mongo_db]
        logger.info(f"Using database: {settings.mongo_db}")
    return _database


def get_collection(name: str, database: Optional[Database] = None) -> Collection:
    """Get a collection from the given database, or the application database"""
    db = database if database is not None else get_database()
    return db[name]


def close_connection() -> None:
    """Close MongoDB connection"""
    global _client, _database
    if _client is not None:
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


def encode_value(value: Any) -> Any:
    """Convert enums to their raw values, recursing into containers"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def to_document(model: BaseModel, id_field: str) -> Dict[str, Any]:
    """Serialize a model for storage, keyed by its id field"""
    doc = encode_value(model.model_dump())
    doc["_id"] = doc[id_field]
    return doc


def create_indexes(database: Optional[Database] = None) -> None:
    """Create all required indexes"""
    db = database if database is not None else get_database()
    logger.info("Creating MongoDB indexes...")

    users = db["users"]
    users.create_index("email", unique=True)
    users.create_index("role")

    cases = db["cases"]
    cases.create_index("case_number", unique=True)
    cases.create_index("client_id")
    cases.create_index("advocate_id")
    cases.create_index("paralegal_ids")
    cases.create_index([("status", ASCENDING), ("created_at", DESCENDING)])

    connections = db["connections"]
    connections.create_index([("requester_id", ASCENDING), ("recipient_id", ASCENDING)], unique=True)
    connections.create_index([("recipient_id", ASCENDING), ("status", ASCENDING)])

    tasks = db["tasks"]
    tasks.create_index("case_id")
    tasks.create_index([("assigned_to", ASCENDING), ("status", ASCENDING)])
    tasks.create_index([("assigned_by", ASCENDING), ("status", ASCENDING)])
    tasks.create_index("due_date")

    reminders = db["reminders"]
    reminders.create_index([("status", ASCENDING), ("reminder_date", ASCENDING)])
    reminders.create_index("recipients.user_id")
    reminders.create_index("created_by")
    reminders.create_index([("related_entity.entity_type", ASCENDING), ("related_entity.entity_id", ASCENDING)])

    timeline_events = db["timeline_events"]
    timeline_events.create_index([("case_id", ASCENDING), ("event_date", ASCENDING)])
    timeline_events.create_index("is_milestone")

    documents = db["documents"]
    documents.create_index("case_id")
    documents.create_index("uploaded_by")

    messages = db["messages"]
    messages.create_index([("receiver_id", ASCENDING), ("is_read", ASCENDING)])
    messages.create_index([("case_id", ASCENDING), ("created_at", DESCENDING)])
    messages.create_index("connection_id")
    messages.create_index("thread_id")

    notifications = db["notifications"]
    notifications.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    notifications.create_index([("user_id", ASCENDING), ("is_read", ASCENDING)])
    notifications.create_index("expires_at")

    activities = db["activities"]
    activities.create_index([("case_id", ASCENDING), ("created_at", DESCENDING)])
    activities.create_index("user_id")
    activities.create_index("activity_type")

    notes = db["notes"]
    notes.create_index([("user_id", ASCENDING), ("updated_at", DESCENDING)])

    logger.info("MongoDB indexes created successfully")


def health_check() -> Dict[str, Any]:
    """Check MongoDB health"""
    try:
        client = get_client()
        client.admin.command("ping")
        return {
            "status": "healthy",
            "database": settings.mongo_db,
            "connection": "ok"
        }
    except PyMongoError as e:
        logger.error(f"MongoDB health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": settings.mongo_db,
            "error": str(e)
        }
