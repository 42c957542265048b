import copy
from datetime import datetime

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from database import get_booking_store, get_event_store, to_object_id
from main import app


def to_bson_precision(value):
    """MongoDB keeps datetimes to the millisecond; mimic that on write."""
    if isinstance(value, datetime):
        return value.replace(microsecond=value.microsecond // 1000 * 1000)
    return value


class InMemoryStore:
    """DocumentStore stand-in; keeps documents in insertion order."""

    def __init__(self, invalid_id_message='Invalid id'):
        self.docs = []
        self.invalid_id_message = invalid_id_message

    def _index(self, doc_id):
        oid = to_object_id(doc_id, self.invalid_id_message)
        for i, doc in enumerate(self.docs):
            if doc['_id'] == oid:
                return i
        return None

    def find_all(self, query=None, sort=None):
        query = query or {}
        result = [
            copy.deepcopy(d) for d in self.docs if all(d.get(k) == v for k, v in query.items())
        ]
        for field, direction in reversed(list(sort or [])):
            result.sort(key=lambda d: d.get(field), reverse=direction < 0)
        return result

    def find_by_id(self, doc_id):
        index = self._index(doc_id)
        return None if index is None else copy.deepcopy(self.docs[index])

    def insert(self, doc):
        data = {**copy.deepcopy(doc), '_id': ObjectId()}
        self.docs.append({k: to_bson_precision(v) for k, v in data.items()})
        return data

    def update_by_id(self, doc_id, fields):
        index = self._index(doc_id)
        if index is None:
            return None
        self.docs[index].update(copy.deepcopy(fields))
        return copy.deepcopy(self.docs[index])

    def delete_by_id(self, doc_id):
        index = self._index(doc_id)
        if index is None:
            return None
        return self.docs.pop(index)

    def insert_many(self, docs):
        for doc in docs:
            self.insert(doc)
        return len(docs)


class FailingStore:
    """Every call behaves like an unreachable MongoDB server."""

    def _fail(self, *args, **kwargs):
        raise ServerSelectionTimeoutError('localhost:27017: connection refused')

    find_all = find_by_id = insert = update_by_id = delete_by_id = insert_many = _fail


@pytest.fixture
def booking_store():
    return InMemoryStore('Invalid booking id')


@pytest.fixture
def event_store():
    return InMemoryStore('Invalid event id')


@pytest.fixture
def client(booking_store, event_store):
    app.dependency_overrides[get_booking_store] = lambda: booking_store
    app.dependency_overrides[get_event_store] = lambda: event_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def failing_client():
    app.dependency_overrides[get_booking_store] = FailingStore
    app.dependency_overrides[get_event_store] = FailingStore

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def valid_booking():
    return {'name': 'Asha', 'email': 'asha@x.com', 'event': 'Synergia'}
