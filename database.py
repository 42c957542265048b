"""
MongoDB access for the booking service.

Each collection is wrapped in a ``DocumentStore``; the request handlers only
ever talk to a store, never to pymongo directly, so tests can hand them an
in-memory replacement.
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bson import ObjectId
from loguru import logger
from pymongo import MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from exceptions import InvalidIdError
from settings import settings

Document = Dict[str, Any]
SortSpec = Sequence[Tuple[str, int]]


@lru_cache(maxsize=1)
def get_client() -> MongoClient:
    logger.info(f"Connecting to MongoDB database '{settings.DATABASE_NAME}'")
    return MongoClient(
        settings.DATABASE_URL,
        serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS,
        tz_aware=True,
    )


def close_client() -> None:
    if get_client.cache_info().currsize:
        logger.info("Closing MongoDB client")
        get_client().close()
        get_client.cache_clear()


def get_db() -> Database:
    return get_client()[settings.DATABASE_NAME]


def utc_now() -> datetime:
    """Current UTC time truncated to the millisecond precision BSON dates keep."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def to_object_id(value: Any, message: str = "Invalid id") -> ObjectId:
    """Parse a path identifier; anything that is not a 24-hex ObjectId is rejected."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidIdError(message)
    return ObjectId(value)


def oid_str(oid):
    return str(oid) if isinstance(oid, ObjectId) else oid


def serialize(doc: Document) -> Document:
    """Expose ``_id`` as a string ``id`` for JSON responses."""
    data = dict(doc)
    data["id"] = oid_str(data.pop("_id", None))
    return data


class DocumentStore:
    def __init__(self, collection: Collection, invalid_id_message: str = "Invalid id") -> None:
        self.collection = collection
        self.invalid_id_message = invalid_id_message

    def _oid(self, doc_id: Any) -> ObjectId:
        return to_object_id(doc_id, self.invalid_id_message)

    def find_all(self, query: Optional[Document] = None, sort: Optional[SortSpec] = None) -> List[Document]:
        cursor = self.collection.find(query or {})
        if sort:
            cursor = cursor.sort(list(sort))
        return list(cursor)

    def find_by_id(self, doc_id: Any) -> Optional[Document]:
        return self.collection.find_one({"_id": self._oid(doc_id)})

    def insert(self, doc: Document) -> Document:
        data = dict(doc)
        result = self.collection.insert_one(data)
        data["_id"] = result.inserted_id
        return data

    def update_by_id(self, doc_id: Any, fields: Document) -> Optional[Document]:
        return self.collection.find_one_and_update(
            {"_id": self._oid(doc_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    def delete_by_id(self, doc_id: Any) -> Optional[Document]:
        return self.collection.find_one_and_delete({"_id": self._oid(doc_id)})

    def insert_many(self, docs: Sequence[Document]) -> int:
        result = self.collection.insert_many([dict(d) for d in docs])
        return len(result.inserted_ids)


def get_booking_store() -> DocumentStore:
    return DocumentStore(get_db()["booking"], invalid_id_message="Invalid booking id")


def get_event_store() -> DocumentStore:
    return DocumentStore(get_db()["event"], invalid_id_message="Invalid event id")
