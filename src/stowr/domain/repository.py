"""Repository port — the create/fetch capability every store implements.

Generated code binds the port per entity::

    class FooRepository(Repository[Foo, FooId]):
        entity_type = Foo
        id_type = FooId

Adapters own their locking; the port carries only the signatures.  Adapter
failures propagate to the caller unchanged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

EntityT = TypeVar("EntityT")
IdT = TypeVar("IdT")


class Repository(ABC, Generic[EntityT, IdT]):
    """Abstract store of ``EntityT`` records keyed by ``IdT``.

    Attributes:
        entity_type: Concrete entity class accepted by :meth:`create`, or
            None when the repository is not bound to an entity.
        id_type: Concrete identifier class accepted by :meth:`fetch`.
    """

    entity_type: ClassVar[type[Any] | None] = None
    id_type: ClassVar[type[Any] | None] = None

    @abstractmethod
    async def create(self, entity: EntityT) -> EntityT:
        """Store *entity* and return the stored record.

        Callers must not assume the returned object is *entity* itself.
        """

    @abstractmethod
    async def fetch(self, id: IdT) -> EntityT | None:
        """Return the record with *id*, or None when absent."""

    def check_entity(self, entity: object) -> None:
        """Reject records of another entity type."""
        expected = type(self).entity_type
        if expected is not None and not isinstance(entity, expected):
            msg = f"{type(self).__name__} stores {expected.__name__}, got {type(entity).__name__}"
            raise TypeError(msg)

    def check_id(self, id: object) -> None:
        """Reject identifiers tagged for another entity."""
        expected = type(self).id_type
        if expected is not None and not isinstance(id, expected):
            msg = f"{type(self).__name__} is keyed by {expected.__name__}, got {type(id).__name__}"
            raise TypeError(msg)
