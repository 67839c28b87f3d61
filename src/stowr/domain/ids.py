"""Tagged identifiers shared by every generated entity.

Each entity gets a nominal ``{Entity}Id`` subclass of :class:`RepositoryId`
parameterized by an uninhabited ``{Entity}Tag``.  The runtime value is always
a v4 UUID (122 random bits); uniqueness is probabilistic.

INVARIANT: The tag never reaches the serialized form.  Only the UUID string
is written, so a ``FooId`` payload deserializes as a ``BarId`` without error.
Identifiers of different entities are kept apart by the type checker and by
:meth:`RepositoryId.__eq__`, never by the data layer.
"""

from __future__ import annotations

import uuid
from typing import Any, ClassVar, Generic, Self, TypeVar

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema


class Tag:
    """Marker base for entity tags.  Tags are never instantiated."""

    __slots__ = ()

    def __new__(cls, *args: Any, **kwargs: Any) -> Self:
        msg = f"{cls.__name__} is a marker type and cannot be instantiated"
        raise TypeError(msg)


TagT = TypeVar("TagT", bound=Tag)


class RepositoryId(Generic[TagT]):
    """Opaque v4 UUID identifier for the entity named by ``TagT``.

    Usage::

        foo_id = FooId.new()
        assert FooId.parse(str(foo_id)) == foo_id
    """

    __slots__ = ("_value",)

    tag: ClassVar[type[Tag] | None] = None

    def __init__(self, value: uuid.UUID) -> None:
        if not isinstance(value, uuid.UUID):
            msg = f"{type(self).__name__} wraps uuid.UUID, got {type(value).__name__}"
            raise TypeError(msg)
        self._value = value

    @classmethod
    def new(cls) -> Self:
        """Draw a fresh random identifier."""
        return cls(uuid.uuid4())

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse the canonical UUID text form.

        Raises:
            ValueError: *text* is not a valid UUID.
        """
        return cls(uuid.UUID(text))

    @property
    def value(self) -> uuid.UUID:
        return self._value

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self._value}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RepositoryId):
            return NotImplemented
        return type(self) is type(other) and self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self

    # -- pydantic integration ---------------------------------------------

    @classmethod
    def _coerce(cls, value: Any) -> Self:
        if isinstance(value, cls):
            return value
        if isinstance(value, RepositoryId):
            msg = f"expected {cls.__name__}, got {type(value).__name__}"
            raise ValueError(msg)
        if isinstance(value, uuid.UUID):
            return cls(value)
        if isinstance(value, str):
            return cls.parse(value)
        msg = f"cannot convert {type(value).__name__} to {cls.__name__}"
        raise ValueError(msg)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )
