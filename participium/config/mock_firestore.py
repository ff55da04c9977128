"""
In-memory stand-in for the Firestore client, enabled with USE_MOCK_DB=true.

Implements the subset of the client API the repositories rely on:
collection / document references, set / get / update / delete,
where() with the common operators, limit() and stream().
Data lives only for the lifetime of the process.
"""

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from firebase_admin import firestore


def _resolve_sentinels(data: Dict[str, Any]) -> Dict[str, Any]:
    resolved = {}
    for key, value in data.items():
        if value is firestore.SERVER_TIMESTAMP:
            value = datetime.now(timezone.utc)
        elif isinstance(value, dict):
            value = _resolve_sentinels(value)
        resolved[key] = value
    return resolved


def _matches(value: Any, op: str, expected: Any) -> bool:
    try:
        if op == "==":
            return value == expected
        if op == "!=":
            return value != expected
        if op == "in":
            return value in expected
        if op == "not-in":
            return value not in expected
        if op == "array_contains":
            return isinstance(value, list) and expected in value
        if op == "array_contains_any":
            return isinstance(value, list) and any(item in value for item in expected)
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
    except TypeError:
        return False
    raise ValueError(f"Unsupported operator in mock Firestore: {op}")


class MockDocumentSnapshot:
    def __init__(self, reference: "MockDocumentReference", data: Optional[Dict[str, Any]]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        if self._data is None:
            return None
        return copy.deepcopy(self._data)

    def get(self, field_path: str) -> Any:
        return (self._data or {}).get(field_path)


class MockDocumentReference:
    def __init__(self, store: Dict[str, Dict[str, Any]], doc_id: str):
        self._store = store
        self.id = doc_id

    def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        resolved = _resolve_sentinels(copy.deepcopy(data))
        if merge and self.id in self._store:
            self._store[self.id].update(resolved)
        else:
            self._store[self.id] = resolved

    def get(self) -> MockDocumentSnapshot:
        return MockDocumentSnapshot(self, self._store.get(self.id))

    def update(self, data: Dict[str, Any]) -> None:
        if self.id not in self._store:
            raise KeyError(f"No document to update: {self.id}")
        self._store[self.id].update(_resolve_sentinels(copy.deepcopy(data)))

    def delete(self) -> None:
        self._store.pop(self.id, None)


class MockQuery:
    def __init__(self, store: Dict[str, Dict[str, Any]], filters=None, limit_count=None):
        self._store = store
        self._filters = filters or []
        self._limit = limit_count

    def _copy(self, **changes) -> "MockQuery":
        params = {
            "filters": list(self._filters),
            "limit_count": self._limit,
        }
        params.update(changes)
        return MockQuery(self._store, **params)

    def where(self, field_path: str, op_string: str, value: Any) -> "MockQuery":
        return self._copy(filters=self._filters + [(field_path, op_string, value)])

    def limit(self, count: int) -> "MockQuery":
        return self._copy(limit_count=count)

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        rows = [
            (doc_id, data)
            for doc_id, data in list(self._store.items())
            if all(_matches(data.get(field), op, value) for field, op, value in self._filters)
        ]

        if self._limit is not None:
            rows = rows[: self._limit]

        for doc_id, _ in rows:
            ref = MockDocumentReference(self._store, doc_id)
            yield ref.get()


class MockCollectionReference(MockQuery):
    def __init__(self, name: str, store: Dict[str, Dict[str, Any]]):
        super().__init__(store)
        self.id = name

    def document(self, doc_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._store, doc_id or uuid.uuid4().hex[:20])


class MockFirestore:
    """Process-local database with the Firestore client surface."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def collection(self, name: str) -> MockCollectionReference:
        store = self._collections.setdefault(name, {})
        return MockCollectionReference(name, store)

    def collections(self) -> List[MockCollectionReference]:
        return [MockCollectionReference(name, store) for name, store in self._collections.items()]

    def reset(self) -> None:
        self._collections.clear()


_mock_db: Optional[MockFirestore] = None


def get_mock_db() -> MockFirestore:
    global _mock_db
    if _mock_db is None:
        _mock_db = MockFirestore()
    return _mock_db
