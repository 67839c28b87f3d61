"""Generation-time errors.

INVARIANT: Every error is raised before generation returns any text.  A
failed generation produces no output at all.
"""

from __future__ import annotations

from typing import Any


class GenerationError(Exception):
    """Base for all fatal generation errors.

    Attributes:
        code: Stable machine-readable error code.
        detail: Structured context (entity, method, line, ...).
    """

    code = "GENERATION_FAILED"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class DeclarationSyntaxError(GenerationError):
    """The declaration source could not be read or parsed."""

    code = "DECLARATION_SYNTAX"


class UnsupportedShapeError(GenerationError):
    """A declaration uses a shape the generator cannot expand."""

    code = "UNSUPPORTED_SHAPE"


class DuplicateFieldError(GenerationError):
    code = "DUPLICATE_FIELD"


class ReservedNameError(GenerationError):
    """A field or parameter uses a name the generated code needs."""

    code = "RESERVED_NAME"


class DuplicateVariantError(GenerationError):
    """Two commands map to the same PascalCase variant name."""

    code = "DUPLICATE_VARIANT"


class UnknownEntityError(GenerationError):
    """An implementation block names an owner that is not a declared entity."""

    code = "UNKNOWN_ENTITY"


class UnknownMethodError(GenerationError):
    code = "UNKNOWN_METHOD"


class NotACommandError(GenerationError):
    """A command list references a method without the command flag."""

    code = "NOT_A_COMMAND"


class NameCollisionError(GenerationError):
    """Two generated top-level names coincide."""

    code = "NAME_COLLISION"
