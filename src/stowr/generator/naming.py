"""Name derivation for generated artifacts.

All names are plain concatenations of the entity name with a fixed suffix;
none of them is configurable.  Variant names use :func:`to_pascal_case`,
which follows the word-splitting rules of Rust's ``heck`` crate
(``ToUpperCamelCase``) so generated names agree with other tooling.
"""

from __future__ import annotations

import keyword
import re

# Boundaries inside an alphanumeric run:
#   "fooBar"     -> "foo" | "Bar"      (lower/digit followed by upper)
#   "HTTPServer" -> "HTTP" | "Server"  (upper followed by upper+lower)
_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+|[0-9]+")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def split_words(name: str) -> list[str]:
    """Split *name* into words on separators and case boundaries."""
    words: list[str] = []
    for chunk in _SEPARATORS.split(name):
        words.extend(_WORD.findall(chunk))
    return words


def to_pascal_case(name: str) -> str:
    """``rename`` -> ``Rename``, ``set_http_port`` -> ``SetHttpPort``."""
    return "".join(word[:1].upper() + word[1:].lower() for word in split_words(name))


def is_identifier(name: str) -> bool:
    """True if *name* is a usable, non-keyword Python identifier."""
    return bool(_IDENTIFIER.match(name)) and not keyword.iskeyword(name)


def tag_name(entity: str) -> str:
    return f"{entity}Tag"


def id_name(entity: str) -> str:
    return f"{entity}Id"


def repository_name(entity: str) -> str:
    return f"{entity}Repository"


def repo_alias_name(entity: str) -> str:
    return f"{entity}Repo"


def command_type_name(entity: str) -> str:
    return f"{entity}Command"


def event_type_name(entity: str) -> str:
    return f"{entity}Event"
