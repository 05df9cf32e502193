"""Counter Repository - Atomic named sequences"""
from typing import Callable, Optional
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from .mongo_client import get_collection
from ..utils.logger import get_logger

logger = get_logger(__name__)


class CounterRepository:
    """Named monotonically increasing sequences stored in the counters collection"""

    COLLECTION_NAME = "counters"

    def __init__(self, database: Optional[Database] = None):
        self._collection: Collection = get_collection(self.COLLECTION_NAME, database)

    def next_value(self, name: str, seed: Optional[Callable[[], int]] = None) -> int:
        """
        Increment and return the sequence.

        When the counter does not exist yet it is first created holding
        seed() (default 0), so an existing data set keeps counting where it is.
        """
        if seed is not None and self._collection.find_one({"_id": name}) is None:
            self._collection.update_one(
                {"_id": name},
                {"$setOnInsert": {"seq": seed()}},
                upsert=True
            )

        doc = self._collection.find_one_and_update(
            {"_id": name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        logger.debug(f"Sequence {name} advanced to {doc['seq']}")
        return doc["seq"]
