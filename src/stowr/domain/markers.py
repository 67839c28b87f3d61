"""Declaration markers.

``@domain``, ``@domain_impl(Owner)`` and ``@command`` only tag a
declaration source so ``stowr generate`` can find its entities and commands.
At runtime they return their target unchanged, which keeps declaration files
importable and type-checkable.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")


def domain(cls: type[T]) -> type[T]:
    """Mark a class of annotated fields as an entity declaration."""
    return cls


def domain_impl(owner: type[Any]) -> Callable[[type[T]], type[T]]:
    """Mark a class as the implementation block of entity *owner*."""

    def decorator(cls: type[T]) -> type[T]:
        return cls

    return decorator


def command(method: T) -> T:
    """Mark a method of an implementation block as a command."""
    return method
