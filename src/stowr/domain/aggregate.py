"""Entity, command/event variants, and the Aggregate contract.

Generated code builds on these bases:

- ``class Foo(Entity)`` for plain records, ``class Foo(Aggregate)`` when an
  implementation block declares commands.
- ``class FooCommand(SumType)`` / ``class FooEvent(SumType)`` namespaces whose
  nested classes are the variants (``FooCommand.Rename``).

INVARIANT: ``handle_command`` never mutates the live state; ``apply_event``
is the only path that does.
"""

from __future__ import annotations

import copy
from abc import abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict


class AggregateError(Exception):
    """Raised by a command method to reject a command.

    ``handle_command`` runs the method on a copy of the state, so a rejected
    command leaves the aggregate untouched and produces no event.
    """


class UnknownVariantError(AggregateError, LookupError):
    """A command or event that is not a variant of the aggregate's sum types."""


class Entity(BaseModel):
    """Base for generated entity records.

    Fields are mutable so ``apply_event`` can change state in place; the
    field set itself is fixed (``extra="forbid"``).
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    def clone(self) -> Self:
        """Deep copy of the record."""
        return self.model_copy(deep=True)


class _Variant(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    variant: ClassVar[str] = ""

    def payload(self) -> dict[str, Any]:
        """Field values as deep copies, in declaration order."""
        return {name: copy.deepcopy(getattr(self, name)) for name in type(self).model_fields}


class Command(_Variant):
    """Base for one command variant (a requested mutation)."""


class Event(_Variant):
    """Base for one event variant (a mutation that happened)."""


class SumType:
    """Namespace of variant classes declared in the class body.

    Subclasses list their variants as nested classes whose ``variant`` class
    attribute matches the attribute name; the order of the body is the order
    of :attr:`variants`.
    """

    variants: ClassVar[Mapping[str, type[_Variant]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        found: dict[str, type[_Variant]] = {}
        for name, value in vars(cls).items():
            if isinstance(value, type) and issubclass(value, _Variant):
                if value.variant != name:
                    msg = f"{cls.__name__}.{name} declares variant {value.variant!r}"
                    raise TypeError(msg)
                found[name] = value
        cls.variants = found

    def __new__(cls, *args: Any, **kwargs: Any) -> Self:
        msg = f"{cls.__name__} is a namespace; instantiate one of its variants"
        raise TypeError(msg)

    @classmethod
    def is_variant(cls, value: object) -> bool:
        return isinstance(value, tuple(cls.variants.values()))

    @classmethod
    def dump(cls, value: _Variant) -> dict[str, Any]:
        """Serialize a variant as ``{"kind": <variant>, "data": {...}}``."""
        if not cls.is_variant(value):
            msg = f"{type(value).__name__} is not a variant of {cls.__name__}"
            raise UnknownVariantError(msg)
        return {"kind": value.variant, "data": value.model_dump(mode="json")}

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> _Variant:
        """Inverse of :meth:`dump`."""
        kind = data.get("kind")
        variant_cls = cls.variants.get(kind) if isinstance(kind, str) else None
        if variant_cls is None:
            msg = f"{kind!r} is not a variant of {cls.__name__}"
            raise UnknownVariantError(msg)
        return variant_cls.model_validate(data.get("data", {}))


class Aggregate(Entity):
    """An entity whose transitions are driven by commands and events.

    Generated subclasses implement both methods with one ``match`` arm per
    command method.  Validation is not generated: ``handle_command`` always
    returns exactly one event unless the underlying method raises.
    """

    @abstractmethod
    def handle_command(self, command: Command) -> list[Event]:
        """Events *command* produces against the current state."""

    @abstractmethod
    def apply_event(self, event: Event) -> None:
        """Apply *event* to this state in place."""

    def replay(self, events: Iterable[Event]) -> Self:
        """Apply *events* in order to this state and return it."""
        for event in events:
            self.apply_event(event)
        return self
