"""Declaration AST — the in-memory input of the generator.

Parsers build these models from Python source or from TOML/YAML mappings;
planners consume them.  Type annotations are carried as source text and
re-emitted verbatim, so the generator never evaluates user types.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FieldDeclaration(BaseModel):
    """One named, typed field of a record."""

    model_config = {"frozen": True}

    name: str
    type: str
    line: int | None = None


class RecordDeclaration(BaseModel):
    """An entity declaration: a name and its ordered fields.

    The ``id`` field is never declared; the generator injects it.
    """

    model_config = {"frozen": True}

    name: str
    fields: tuple[FieldDeclaration, ...] = ()
    docstring: str | None = None
    line: int | None = None


class ParamDeclaration(BaseModel):
    """One named, typed parameter of a method (receiver excluded).

    ``default`` is the source text of the default expression, if any.
    """

    model_config = {"frozen": True}

    name: str
    type: str
    keyword_only: bool = False
    default: str | None = None


class MethodDeclaration(BaseModel):
    """A method of an implementation block.

    Attributes:
        params: Parameters after the receiver, in order.
        is_command: Whether the method carries the command flag.
        has_receiver: Whether the first parameter is ``self``.
        source: Method source without its command marker, re-emitted into
            the generated entity class.
        unsupported: Reason the signature cannot be dispatched as a
            command (``*args``, ``**kwargs``), or None.
    """

    model_config = {"frozen": True}

    name: str
    params: tuple[ParamDeclaration, ...] = ()
    is_command: bool = False
    has_receiver: bool = True
    source: str = ""
    unsupported: str | None = None
    line: int | None = None


class ImplDeclaration(BaseModel):
    """An implementation block attached to an entity.

    Attributes:
        owner: Entity name the block extends.
        methods: All methods of the block, in order.
        commands: Names of the methods dispatched as commands, in variant
            order.  Parsers default it to every command-flagged method.
    """

    model_config = {"frozen": True}

    owner: str
    methods: tuple[MethodDeclaration, ...] = ()
    commands: tuple[str, ...] = ()
    line: int | None = None

    def method(self, name: str) -> MethodDeclaration | None:
        return next((m for m in self.methods if m.name == name), None)


class DeclarationSet(BaseModel):
    """Everything declared in one source file.

    Attributes:
        imports: Import statements the generated module repeats.
        definitions: Module-level statements (constants, helpers) copied
            ahead of the generated types.
        defined_names: Names bound by *definitions*.
    """

    model_config = {"frozen": True}

    source_name: str = "<declarations>"
    imports: tuple[str, ...] = ()
    definitions: tuple[str, ...] = ()
    defined_names: tuple[str, ...] = ()
    records: tuple[RecordDeclaration, ...] = ()
    impls: tuple[ImplDeclaration, ...] = Field(default=())
