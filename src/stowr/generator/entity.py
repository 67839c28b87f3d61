"""Entity generator — validates a record and derives its artifact names.

For an entity ``Foo`` the plan names five artifact families:

- ``FooTag``         uninhabited marker type
- ``FooId``          identifier bound to ``FooTag``
- ``Foo``            the record, ``id`` first, then declared fields in order
- ``Foo.new``        field-converting constructor
- ``FooRepository``  repository port for (``Foo``, ``FooId``), and ``FooRepo``
  as its handle alias
"""

from __future__ import annotations

from dataclasses import dataclass

from stowr.generator import naming
from stowr.generator.declarations import FieldDeclaration, RecordDeclaration
from stowr.generator.errors import DuplicateFieldError, ReservedNameError, UnsupportedShapeError

ID_FIELD = "id"

# Members every generated record already has.
RESERVED_MEMBERS = frozenset({ID_FIELD, "new", "clone", "replay", "handle_command", "apply_event"})


def check_member_name(name: str, *, owner: str, kind: str) -> None:
    """Reject names that clash with generated members or pydantic internals."""
    if not naming.is_identifier(name):
        msg = f"{owner}: {kind} name {name!r} is not a valid identifier"
        raise UnsupportedShapeError(msg, entity=owner, name=name)
    if name in RESERVED_MEMBERS:
        msg = f"{owner}: {kind} name {name!r} is reserved by the generator"
        raise ReservedNameError(msg, entity=owner, name=name)
    if name.startswith(("_", "model_")):
        msg = f"{owner}: {kind} name {name!r} must not start with '_' or 'model_'"
        raise ReservedNameError(msg, entity=owner, name=name)


@dataclass(frozen=True)
class EntityPlan:
    """Validated record plus every name derived from it."""

    name: str
    tag: str
    id: str
    repository: str
    repo_alias: str
    fields: tuple[FieldDeclaration, ...]
    docstring: str | None = None

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def generated_names(self) -> tuple[str, ...]:
        """Top-level names this entity adds to the generated module."""
        return (self.tag, self.id, self.name, self.repository, self.repo_alias)


def plan_entity(record: RecordDeclaration) -> EntityPlan:
    """Validate *record* and derive its artifact names.

    Raises:
        UnsupportedShapeError: The name or a field type is unusable.
        ReservedNameError: A field is named ``id`` or another generated member.
        DuplicateFieldError: Two fields share a name.
    """
    name = record.name
    if not naming.is_identifier(name) or name.startswith("_"):
        msg = f"Entity name {name!r} is not a valid public class name"
        raise UnsupportedShapeError(msg, entity=name)

    seen: set[str] = set()
    for field in record.fields:
        check_member_name(field.name, owner=name, kind="field")
        if field.name in seen:
            msg = f"{name}: field {field.name!r} is declared twice"
            raise DuplicateFieldError(msg, entity=name, field=field.name, line=field.line)
        if not field.type.strip():
            msg = f"{name}: field {field.name!r} has no type"
            raise UnsupportedShapeError(msg, entity=name, field=field.name)
        seen.add(field.name)

    return EntityPlan(
        name=name,
        tag=naming.tag_name(name),
        id=naming.id_name(name),
        repository=naming.repository_name(name),
        repo_alias=naming.repo_alias_name(name),
        fields=record.fields,
        docstring=record.docstring,
    )
