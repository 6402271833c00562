"""
In-memory Firestore stand-in for local development and tests (USE_MOCK_DB=true).

Mirrors the subset of the google-cloud-firestore client API this service uses:
collection/document references, set/get/update, where/order_by/limit/select
queries and stream(). SERVER_TIMESTAMP sentinels are resolved to the current
UTC time on write.

If MOCK_DB_PATH points to an existing JSON file shaped like
{"collection": {"doc_id": {...}}}, it is loaded as the initial state.
"""

import copy
import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from firebase_admin import firestore

logger = logging.getLogger(__name__)

DESCENDING = firestore.Query.DESCENDING


def _resolve_sentinels(data: Dict) -> Dict:
    resolved = {}
    for key, value in data.items():
        if value is firestore.SERVER_TIMESTAMP:
            value = datetime.now(timezone.utc)
        elif isinstance(value, dict):
            value = _resolve_sentinels(value)
        resolved[key] = value
    return resolved


def _matches(value: Any, op: str, expected: Any) -> bool:
    if op == "==":
        return value == expected
    if op == "!=":
        return value != expected
    if op == "in":
        return value in expected
    if op == "not-in":
        return value not in expected
    if op == "array-contains":
        return isinstance(value, list) and expected in value
    if value is None:
        return False
    if op == "<":
        return value < expected
    if op == "<=":
        return value <= expected
    if op == ">":
        return value > expected
    if op == ">=":
        return value >= expected
    raise ValueError(f"Unsupported operator: {op}")


class MockDocumentSnapshot:
    def __init__(self, reference: "MockDocumentReference", data: Optional[Dict]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict]:
        if self._data is None:
            return None
        return copy.deepcopy(self._data)

    def get(self, field: str) -> Any:
        return (self._data or {}).get(field)


class MockDocumentReference:
    def __init__(self, store: "MockFirestore", collection: str, doc_id: str):
        self._store = store
        self._collection = collection
        self.id = doc_id

    @property
    def path(self) -> str:
        return f"{self._collection}/{self.id}"

    def set(self, data: Dict, merge: bool = False) -> None:
        with self._store.lock:
            docs = self._store.data.setdefault(self._collection, {})
            resolved = _resolve_sentinels(data)
            if merge and self.id in docs:
                docs[self.id].update(resolved)
            else:
                docs[self.id] = resolved

    def update(self, data: Dict) -> None:
        with self._store.lock:
            docs = self._store.data.get(self._collection, {})
            if self.id not in docs:
                raise KeyError(f"No document to update: {self.path}")
            docs[self.id].update(_resolve_sentinels(data))

    def get(self) -> MockDocumentSnapshot:
        with self._store.lock:
            data = self._store.data.get(self._collection, {}).get(self.id)
            return MockDocumentSnapshot(self, copy.deepcopy(data) if data is not None else None)


class MockQuery:
    def __init__(self, store: "MockFirestore", collection: str):
        self._store = store
        self._collection = collection
        self._filters: List[tuple] = []
        self._orders: List[tuple] = []
        self._limit: Optional[int] = None
        self._fields: Optional[List[str]] = None

    def _copy(self) -> "MockQuery":
        query = MockQuery(self._store, self._collection)
        query._filters = list(self._filters)
        query._orders = list(self._orders)
        query._limit = self._limit
        query._fields = list(self._fields) if self._fields is not None else None
        return query

    def where(self, field_path: str, op_string: str, value: Any) -> "MockQuery":
        query = self._copy()
        query._filters.append((field_path, op_string, value))
        return query

    def order_by(self, field_path: str, direction: str = firestore.Query.ASCENDING) -> "MockQuery":
        query = self._copy()
        query._orders.append((field_path, direction))
        return query

    def limit(self, count: int) -> "MockQuery":
        query = self._copy()
        query._limit = count
        return query

    def select(self, field_paths) -> "MockQuery":
        query = self._copy()
        query._fields = list(field_paths)
        return query

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        with self._store.lock:
            items = list(self._store.data.get(self._collection, {}).items())

        results = [
            (doc_id, data) for doc_id, data in items
            if all(_matches(data.get(field), op, value) for field, op, value in self._filters)
        ]

        # Stable sorts applied from the least significant key
        for field, direction in reversed(self._orders):
            present = [item for item in results if item[1].get(field) is not None]
            missing = [item for item in results if item[1].get(field) is None]
            present.sort(key=lambda item: item[1][field], reverse=(direction == DESCENDING))
            results = present + missing

        if self._limit is not None:
            results = results[:self._limit]

        for doc_id, data in results:
            data = copy.deepcopy(data)
            if self._fields is not None:
                data = {key: data[key] for key in self._fields if key in data}
            reference = MockDocumentReference(self._store, self._collection, doc_id)
            yield MockDocumentSnapshot(reference, data)

    def get(self) -> List[MockDocumentSnapshot]:
        return list(self.stream())


class MockCollectionReference(MockQuery):
    def __init__(self, store: "MockFirestore", name: str):
        super().__init__(store, name)
        self.id = name

    def document(self, document_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._store, self._collection, document_id or uuid.uuid4().hex)


class MockFirestore:
    """Minimal in-memory Firestore client."""

    def __init__(self, initial: Optional[Dict[str, Dict[str, Dict]]] = None):
        self.lock = threading.RLock()
        self.data: Dict[str, Dict[str, Dict]] = copy.deepcopy(initial) if initial else {}

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def collections(self) -> List[MockCollectionReference]:
        with self.lock:
            return [MockCollectionReference(self, name) for name in self.data]

    def reset(self) -> None:
        with self.lock:
            self.data.clear()


def get_mock_db(path: Optional[str] = None) -> MockFirestore:
    initial = None
    if path and os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            initial = json.load(f)
        logger.info(f"[MOCK FIRESTORE] Loaded initial data from {path}")
    return MockFirestore(initial)
