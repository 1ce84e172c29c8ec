"""
In-memory stand-in for the Firestore client.

Implements the subset of the Firestore API the services use:
collection().document().set/get, order_by(), limit(), stream() and
collections(). Enabled with USE_MOCK_DB=true. If MOCK_DB_PATH points to a JSON
file shaped like {collection: {doc_id: data}} it is loaded at startup;
writes stay in memory.
"""

import copy
import json
import logging
import os
import threading
import uuid
from typing import Any, Dict, Iterator, List, Optional, Tuple

from app.utils.firestore_helpers import revive_datetimes

logger = logging.getLogger(__name__)


class MockDocumentSnapshot:
    def __init__(self, reference: "MockDocumentReference", data: Optional[Dict[str, Any]]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data)


class MockDocumentReference:
    def __init__(self, db: "MockFirestore", collection: str, doc_id: str):
        self._db = db
        self._collection = collection
        self.id = doc_id

    def set(self, data: Dict[str, Any]) -> None:
        with self._db._lock:
            self._db._collection_data(self._collection)[self.id] = copy.deepcopy(data)

    def get(self) -> MockDocumentSnapshot:
        with self._db._lock:
            data = self._db._collection_data(self._collection).get(self.id)
            return MockDocumentSnapshot(self, copy.deepcopy(data))


class MockQuery:
    DESCENDING = "DESCENDING"

    def __init__(
        self,
        db: "MockFirestore",
        collection: str,
        orders: Tuple = (),
        max_results: Optional[int] = None,
    ):
        self._db = db
        self._collection = collection
        self._orders = orders
        self._limit = max_results

    def order_by(self, field_path: str, direction: str = "ASCENDING") -> "MockQuery":
        return MockQuery(self._db, self._collection, self._orders + ((field_path, direction),), self._limit)

    def limit(self, count: int) -> "MockQuery":
        return MockQuery(self._db, self._collection, self._orders, count)

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        with self._db._lock:
            items = list(self._db._collection_data(self._collection).items())
            items = copy.deepcopy(items)

        # Apply orderings last-to-first so the first order_by is the primary key
        for field_path, direction in reversed(self._orders):
            items.sort(
                key=lambda item: (item[1].get(field_path) is not None, item[1].get(field_path)),
                reverse=direction == self.DESCENDING,
            )

        if self._limit is not None:
            items = items[: self._limit]

        for doc_id, data in items:
            yield MockDocumentSnapshot(MockDocumentReference(self._db, self._collection, doc_id), data)


class MockCollectionReference(MockQuery):
    def __init__(self, db: "MockFirestore", name: str):
        super().__init__(db, name)
        self.id = name

    def document(self, doc_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._db, self.id, doc_id or uuid.uuid4().hex[:20])


class MockFirestore:
    """Process-local document store shaped like `firestore.Client`."""

    def __init__(self, seed: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None):
        self._lock = threading.RLock()
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = copy.deepcopy(seed) if seed else {}

    def _collection_data(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._data.setdefault(name, {})

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def collections(self) -> List[MockCollectionReference]:
        with self._lock:
            return [MockCollectionReference(self, name) for name in self._data]

    def reset(self) -> None:
        with self._lock:
            self._data = {}


def get_mock_db(path: Optional[str] = None) -> MockFirestore:
    """Build the mock store, seeding it from `path` when the file exists."""
    if path and os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            seed = revive_datetimes(json.load(f))
        logger.info(f"[MOCK DB] Loaded seed data from {path}")
        return MockFirestore(seed)
    return MockFirestore()
