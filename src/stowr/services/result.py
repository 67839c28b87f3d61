"""ServiceResult — what every service call hands back to the CLI.

A result is either a success carrying ``data`` or a failure carrying an
``error``, never both.  Generator failures keep their error ``code``
(``DUPLICATE_VARIANT``, ``NAME_COLLISION``, ...) so ``--json`` consumers
can branch on it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from stowr.generator.errors import GenerationError


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name (``generate``, ``check``, ``inspect``).
        data: Operation payload; empty on failure.
        warnings: Non-fatal notes, printed to stderr by the CLI.
        error: Set exactly when ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @model_validator(mode="after")
    def _error_iff_failed(self) -> ServiceResult:
        if self.ok and self.error is not None:
            raise ValueError("a successful result cannot carry an error")
        if not self.ok and self.error is None:
            raise ValueError("a failed result needs an error")
        return self

    @classmethod
    def success(cls, op: str, **data: Any) -> ServiceResult:
        return cls(ok=True, op=op, data=data)

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    @classmethod
    def from_error(cls, op: str, exc: GenerationError) -> ServiceResult:
        """Failed result carrying a generator error's code and detail."""
        return cls.failure(op, exc.code, exc.message, **exc.detail)
