"""Aggregate generator — command/event sum types and their dispatcher.

Every command method of an implementation block becomes one variant of
``{Entity}Command`` and one variant of ``{Entity}Event`` with the same
PascalCase name and the same fields.  The generated dispatcher maps:

- ``handle_command``: command variant -> method on a copy -> one event
- ``apply_event``:    event variant   -> method on the live state

Events currently mirror commands 1:1.  Non-command methods are carried into
the entity class unchanged and take no part in dispatch.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from stowr.generator import naming
from stowr.generator.declarations import ImplDeclaration, MethodDeclaration, ParamDeclaration
from stowr.generator.entity import EntityPlan, check_member_name
from stowr.generator.errors import (
    DuplicateVariantError,
    NotACommandError,
    ReservedNameError,
    UnknownEntityError,
    UnknownMethodError,
    UnsupportedShapeError,
)


# Attributes of every command/event variant class.
_RESERVED_PARAMS = frozenset({"variant", "payload"})


@dataclass(frozen=True)
class VariantPlan:
    """One command/event variant pair."""

    name: str
    method: str
    params: tuple[ParamDeclaration, ...]

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.params)


@dataclass(frozen=True)
class AggregatePlan:
    entity: str
    command_type: str
    event_type: str
    variants: tuple[VariantPlan, ...]
    methods: tuple[MethodDeclaration, ...]

    @property
    def generated_names(self) -> tuple[str, ...]:
        return (self.command_type, self.event_type)


def plan_aggregate(entities: Mapping[str, EntityPlan], impl: ImplDeclaration) -> AggregatePlan:
    """Validate *impl* against its entity and derive the variants.

    Raises:
        UnknownEntityError: ``impl.owner`` is not a planned entity.
        UnknownMethodError: A command names a method the block lacks.
        NotACommandError: A command names a method without the flag.
        DuplicateVariantError: Two commands share a PascalCase name.
        UnsupportedShapeError: A command signature cannot be dispatched.
        ReservedNameError: A method or parameter clashes with generated names.
    """
    entity = entities.get(impl.owner)
    if entity is None:
        msg = f"@domain_impl({impl.owner}) does not name a declared entity"
        raise UnknownEntityError(msg, entity=impl.owner, line=impl.line)

    _check_methods(entity, impl)

    variants: list[VariantPlan] = []
    by_variant: dict[str, str] = {}
    for name in impl.commands:
        method = impl.method(name)
        if method is None:
            msg = f"{entity.name}: command {name!r} does not match any method of the block"
            raise UnknownMethodError(msg, entity=entity.name, method=name)
        if not method.is_command:
            msg = f"{entity.name}: method {name!r} is not flagged as a command"
            raise NotACommandError(msg, entity=entity.name, method=name)
        _check_command_signature(entity, method)

        variant = naming.to_pascal_case(name)
        if not naming.is_identifier(variant):
            msg = f"{entity.name}: command {name!r} has no usable variant name"
            raise UnsupportedShapeError(msg, entity=entity.name, method=name)
        if variant in by_variant:
            msg = (
                f"{entity.name}: commands {by_variant[variant]!r} and {name!r}"
                f" both map to variant {variant!r}"
            )
            raise DuplicateVariantError(
                msg, entity=entity.name, variant=variant, methods=[by_variant[variant], name]
            )
        by_variant[variant] = name
        variants.append(VariantPlan(name=variant, method=name, params=method.params))

    return AggregatePlan(
        entity=entity.name,
        command_type=naming.command_type_name(entity.name),
        event_type=naming.event_type_name(entity.name),
        variants=tuple(variants),
        methods=impl.methods,
    )


def _check_methods(entity: EntityPlan, impl: ImplDeclaration) -> None:
    seen: set[str] = set()
    for method in impl.methods:
        if method.name in entity.field_names:
            msg = f"{entity.name}: method {method.name!r} shadows a field"
            raise ReservedNameError(msg, entity=entity.name, method=method.name)
        if method.name in seen:
            msg = f"{entity.name}: method {method.name!r} is defined twice"
            raise UnsupportedShapeError(msg, entity=entity.name, method=method.name)
        if not method.name.startswith("_"):
            check_member_name(method.name, owner=entity.name, kind="method")
        seen.add(method.name)


def _check_command_signature(entity: EntityPlan, method: MethodDeclaration) -> None:
    where = f"{entity.name}.{method.name}"
    if method.unsupported:
        msg = f"{where}: {method.unsupported}"
        raise UnsupportedShapeError(msg, entity=entity.name, method=method.name)
    if not method.has_receiver:
        msg = f"{where}: command methods must take self"
        raise UnsupportedShapeError(msg, entity=entity.name, method=method.name)
    for param in method.params:
        if not naming.is_identifier(param.name):
            msg = f"{where}: parameter {param.name!r} is not a valid identifier"
            raise UnsupportedShapeError(msg, entity=entity.name, method=method.name)
        if param.name in _RESERVED_PARAMS or param.name.startswith(("_", "model_")):
            msg = f"{where}: parameter {param.name!r} clashes with variant internals"
            raise ReservedNameError(msg, entity=entity.name, method=method.name)
        if not param.type.strip():
            msg = f"{where}: parameter {param.name!r} needs a type annotation"
            raise UnsupportedShapeError(msg, entity=entity.name, method=method.name)
