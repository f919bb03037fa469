from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from threading import RLock
from typing import Dict, List, Optional, Tuple

from .models import TodoEntity
from .results import ErrorKind, Ok, Result, err
from .schemas import SortOrder, TodoPayload
from .settings import get_settings
from .utils import Clock, IdGenerator, MonotonicClock, new_todo_id

logger = logging.getLogger(__name__)

# Widest page window list_by_tag will scan in one call.
MAX_PAGE_SIZE = 2


# PUBLIC_INTERFACE
class OrderedStorage(ABC):
    """
    Ordered key-value map contract backing the store.

    Iteration order is insertion order of keys. Replacing the value of an
    existing key keeps its position.
    """

    @abstractmethod
    def __len__(self) -> int:
        """Return the number of stored records."""

    @abstractmethod
    def get(self, key: str) -> Optional[TodoEntity]:
        """Return a copy of the record for key, or None if absent."""

    @abstractmethod
    def insert(self, key: str, value: TodoEntity) -> None:
        """Store value under key, appending new keys and replacing existing ones in place."""

    @abstractmethod
    def remove(self, key: str) -> Optional[TodoEntity]:
        """Remove key and return its record, or None if absent."""

    @abstractmethod
    def items(self) -> List[Tuple[str, TodoEntity]]:
        """Return (key, record) pairs in iteration order."""

    def values(self) -> List[TodoEntity]:
        return [v for _, v in self.items()]


class InMemoryStorage(OrderedStorage):
    """
    Dict-backed storage; lives as long as the process.
    """

    def __init__(self) -> None:
        self._items: Dict[str, TodoEntity] = {}

    def __len__(self) -> int:
        return len(self._items)

    def get(self, key: str) -> Optional[TodoEntity]:
        item = self._items.get(key)
        return None if item is None else item.copy()

    def insert(self, key: str, value: TodoEntity) -> None:
        self._items[key] = value.copy()

    def remove(self, key: str) -> Optional[TodoEntity]:
        return self._items.pop(key, None)

    def items(self) -> List[Tuple[str, TodoEntity]]:
        return [(k, v.copy()) for k, v in self._items.items()]


def check_payload(payload: TodoPayload) -> Optional[str]:
    """Return the validation error message for payload, or None when it is valid."""
    if len(payload.title) == 0:
        return "Empty title"
    if len(payload.body) == 0:
        return "Empty body"
    return None


# PUBLIC_INTERFACE
class ToDoStore:
    """
    Query and mutation operations over an ordered storage of to-do records.

    Every fallible operation returns Ok(value) or Err(TodoError); checks run
    before any write, so a failed call leaves storage untouched. Operations
    are serialized with a lock since FastAPI runs sync endpoints on a
    thread pool.
    """

    def __init__(
        self,
        storage: Optional[OrderedStorage] = None,
        clock: Optional[Clock] = None,
        id_factory: IdGenerator = new_todo_id,
    ) -> None:
        self._storage = storage if storage is not None else InMemoryStorage()
        self._now = clock if clock is not None else MonotonicClock()
        self._new_id = id_factory
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)

    def list_all(self) -> List[TodoEntity]:
        with self._lock:
            return self._storage.values()

    def list_by_tag(self, tag: str, start_index: int, end_index: int) -> Result[List[TodoEntity]]:
        """
        Return records tagged `tag` among store positions [start_index, end_index).

        Positions refer to the whole store rather than to the tag matches, so a
        window may yield zero, one or two records.
        """
        with self._lock:
            length = len(self._storage)
            if start_index > length or end_index > length:
                return err(ErrorKind.INDEX_OUT_OF_BOUNDS, "One of the indexes are out of bounds.")
            if start_index > end_index:
                return err(
                    ErrorKind.INVALID_RANGE,
                    f"The startIndex: {start_index} can't be greater than the endingIndex: {end_index}.",
                )
            if end_index - start_index > MAX_PAGE_SIZE:
                return err(ErrorKind.RANGE_TOO_LARGE, "You can only fetch two items at a time")

            window = self._storage.items()[start_index:end_index]
            return Ok([todo for _, todo in window if todo["tag"] == tag])

    def get(self, todo_id: str) -> Result[TodoEntity]:
        with self._lock:
            todo = self._storage.get(todo_id)
            if todo is None:
                return err(ErrorKind.NOT_FOUND, f"a todo with id={todo_id} not found")
            return Ok(todo)

    def search(self, query: str) -> List[TodoEntity]:
        """Case-insensitive substring match on title or body."""
        q = query.lower()
        with self._lock:
            return [
                t for t in self._storage.values()
                if q in t["title"].lower() or q in t["body"].lower()
            ]

    def sort_by_date(self, order: SortOrder) -> List[TodoEntity]:
        with self._lock:
            items = sorted(self._storage.values(), key=lambda t: t["created_at"])
        if SortOrder(order) is SortOrder.descending:
            # exact reverse of ascending, ties included
            items.reverse()
        return items

    def add(self, payload: TodoPayload) -> Result[TodoEntity]:
        problem = check_payload(payload)
        if problem:
            logger.info("Rejected new todo: %s", problem)
            return err(ErrorKind.VALIDATION, problem)

        with self._lock:
            todo: TodoEntity = {
                "id": self._new_id(),
                "title": payload.title,
                "body": payload.body,
                "tag": payload.tag,
                "completed": False,
                "created_at": self._now(),
                "updated_at": None,
            }
            self._storage.insert(todo["id"], todo)
        logger.info("Added todo id=%s tag=%r", todo["id"], todo["tag"])
        return Ok(todo.copy())

    def update(self, todo_id: str, payload: TodoPayload) -> Result[TodoEntity]:
        problem = check_payload(payload)
        if problem:
            logger.info("Rejected update of todo id=%s: %s", todo_id, problem)
            return err(ErrorKind.VALIDATION, problem)

        with self._lock:
            existing = self._storage.get(todo_id)
            if existing is None:
                return err(
                    ErrorKind.NOT_FOUND, f"couldn't update a todo with id={todo_id}. todo not found"
                )
            updated = existing.copy()
            updated["title"] = payload.title
            updated["body"] = payload.body
            updated["tag"] = payload.tag
            updated["updated_at"] = self._now()
            self._storage.insert(todo_id, updated)
        logger.info("Updated todo id=%s", todo_id)
        return Ok(updated.copy())

    def delete(self, todo_id: str) -> Result[TodoEntity]:
        with self._lock:
            removed = self._storage.remove(todo_id)
        if removed is None:
            return err(
                ErrorKind.NOT_FOUND, f"couldn't delete a todo with id={todo_id}. todo not found."
            )
        logger.info("Deleted todo id=%s", todo_id)
        return Ok(removed)

    def complete(self, todo_id: str) -> Result[TodoEntity]:
        with self._lock:
            existing = self._storage.get(todo_id)
            if existing is None:
                return err(
                    ErrorKind.NOT_FOUND, f"couldn't update a todo with id={todo_id}. todo not found"
                )
            if existing["completed"]:
                logger.debug("Todo id=%s already completed", todo_id)
                return err(
                    ErrorKind.ALREADY_COMPLETED, f"To-do with {todo_id} has already been completed."
                )
            updated = existing.copy()
            updated["completed"] = True
            updated["updated_at"] = self._now()
            self._storage.insert(todo_id, updated)
        logger.info("Completed todo id=%s", todo_id)
        return Ok(updated.copy())


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_store() -> ToDoStore:
    """
    Return the process-wide store, built on first call from settings.
    - memory: InMemoryStorage
    - sqlite: SQLiteStorage at settings.sqlite_db_path
    The instance lives until the process exits; get_store.cache_clear() drops it.
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteStorage

        storage: OrderedStorage = SQLiteStorage(settings.sqlite_db_path)
    else:
        storage = InMemoryStorage()
    logger.info("Todo store ready backend=%s", settings.persistence_backend)
    return ToDoStore(storage)
