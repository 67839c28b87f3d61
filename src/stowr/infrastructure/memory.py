"""List-backed reference repository.

One component owns the backing list; every read and write goes through the
same lock.  No await happens while the lock is held, so the adapter is safe
to share between threads and event loops.  Lookup is a linear scan.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from stowr.domain.repository import EntityT, IdT, Repository

logger = logging.getLogger(__name__)


class InMemoryRepository(Repository[EntityT, IdT]):
    """In-process test double for any generated ``{Entity}Repository``.

    Combine it with a generated port to get a typed, entity-checked store::

        class MemoryFooRepository(InMemoryRepository[Foo, FooId], FooRepository):
            pass
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: list[EntityT] = []

    async def create(self, entity: EntityT) -> EntityT:
        self.check_entity(entity)
        stored = _copy(entity)
        with self._lock:
            self._items.append(stored)
            count = len(self._items)
        logger.debug("Stored %s (%d records)", type(entity).__name__, count)
        return _copy(stored)

    async def fetch(self, id: IdT) -> EntityT | None:
        self.check_id(id)
        with self._lock:
            found = next((item for item in self._items if _id_of(item) == id), None)
        return None if found is None else _copy(found)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


def _id_of(entity: Any) -> Any:
    return getattr(entity, "id", None)


def _copy(entity: EntityT) -> EntityT:
    clone = getattr(entity, "clone", None)
    return clone() if callable(clone) else entity
