"""
In-memory entity store.

The store replaces a database for this application: users, trips and
sessions live in insertion-ordered collections held by a single
``EntityStore`` object.  The object is created once per application
(see ``main.create_app``), kept on ``app.state`` and handed to every
service, so tests can build a fresh store per test case.

Every collection operation runs under the store lock and is therefore
atomic; concurrent writers to the same record are last-write-wins.
Paths that read a record and write a value derived from it (trip count
adjustments, the session sweep) wrap the whole sequence in
``EntityStore.atomic()`` to avoid lost updates.
"""

import logging
import secrets
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel

from ..schemas.session import Session
from ..schemas.trip import Trip
from ..schemas.user import UserRecord

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """Return a process-unique identifier.

    Millisecond timestamp followed by a random hex suffix.  Not a
    security boundary, only collision resistant.
    """
    return f"{int(time.time() * 1000)}{secrets.token_hex(5)}"


class Collection(Generic[ModelT]):
    """Keyed collection of pydantic records.

    ``create`` assigns identity and timestamps, ``update`` merges the
    given fields and refreshes ``updated_at``.  Records are immutable
    from the caller's point of view: every write stores a new copy, so
    no component ever shares a mutable reference with the store.
    """

    def __init__(
        self,
        name: str,
        model: Type[ModelT],
        lock: threading.RLock,
        key_field: str = "id",
        id_factory: Callable[[], str] = generate_id,
    ) -> None:
        self.name = name
        self.model = model
        self.key_field = key_field
        self._lock = lock
        self._id_factory = id_factory
        self._items: Dict[str, ModelT] = {}

    def create(self, **fields: Any) -> ModelT:
        now = utcnow()
        with self._lock:
            record_id = self._id_factory()
            while record_id in self._items:
                record_id = self._id_factory()
            record = self.model(**{self.key_field: record_id, "created_at": now, "updated_at": now, **fields})
            self._items[record_id] = record
        return record

    def insert(self, record: ModelT) -> ModelT:
        """Store a record whose key is already set (e.g. a session token)."""
        key = getattr(record, self.key_field)
        with self._lock:
            self._items[key] = record
        return record

    def get(self, key: str) -> Optional[ModelT]:
        with self._lock:
            return self._items.get(key)

    def find_by(self, **criteria: Any) -> List[ModelT]:
        with self._lock:
            return [
                record
                for record in self._items.values()
                if all(getattr(record, field) == value for field, value in criteria.items())
            ]

    def find_one_by(self, **criteria: Any) -> Optional[ModelT]:
        matches = self.find_by(**criteria)
        return matches[0] if matches else None

    def update(self, key: str, changes: Dict[str, Any]) -> Optional[ModelT]:
        with self._lock:
            record = self._items.get(key)
            if record is None:
                return None
            merged = {**record.model_dump(), **changes}
            if "updated_at" in self.model.model_fields:
                merged["updated_at"] = utcnow()
            updated = self.model.model_validate(merged)
            self._items[key] = updated
            return updated

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._items.pop(key, None) is not None

    def all(self) -> List[ModelT]:
        with self._lock:
            return list(self._items.values())

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class EntityStore:
    """Process-wide container of the users, trips and sessions collections."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.users: Collection[UserRecord] = Collection("users", UserRecord, self._lock)
        self.trips: Collection[Trip] = Collection("trips", Trip, self._lock)
        self.sessions: Collection[Session] = Collection("sessions", Session, self._lock, key_field="token")
        self.is_open = False

    def open(self) -> "EntityStore":
        self.is_open = True
        logger.info("Entity store opened")
        return self

    def close(self) -> None:
        for collection in (self.sessions, self.trips, self.users):
            collection.clear()
        self.is_open = False
        logger.info("Entity store closed")

    @contextmanager
    def atomic(self) -> Iterator["EntityStore"]:
        """Serialise a read-modify-write sequence across collections."""
        with self._lock:
            yield self

    def stats(self) -> Dict[str, int]:
        return {"users": len(self.users), "trips": len(self.trips), "sessions": len(self.sessions)}


def get_store(request: Request) -> EntityStore:
    """FastAPI dependency returning the application's store."""
    return request.app.state.store
