"""Load declarations from TOML or YAML mappings.

Data-only alternative to Python declaration sources::

    imports = ["from decimal import Decimal"]

    [entities.Account]
    fields = [
        { name = "owner", type = "str" },
        { name = "balance", type = "Decimal" },
    ]
    commands = ["deposit"]          # optional; defaults to flagged methods

    [[entities.Account.methods]]
    name = "deposit"
    command = true
    params = [{ name = "amount", type = "Decimal" }]
    body = "self.balance += amount"

``fields`` and ``params`` may also be tables (``{ owner = "str" }``); both
TOML and YAML keep key order.  A list of bare types is a positional record
and is rejected.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from io import StringIO
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from stowr.generator.blocks import indent_block
from stowr.generator.declarations import (
    DeclarationSet,
    FieldDeclaration,
    ImplDeclaration,
    MethodDeclaration,
    ParamDeclaration,
    RecordDeclaration,
)
from stowr.generator.errors import DeclarationSyntaxError, UnsupportedShapeError


def load_toml(text: str, *, filename: str = "<declarations.toml>") -> DeclarationSet:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {filename}: {exc}"
        raise DeclarationSyntaxError(msg, source=filename) from exc
    return declarations_from_mapping(data, filename=filename)


def load_yaml(text: str, *, filename: str = "<declarations.yaml>") -> DeclarationSet:
    yaml = YAML(typ="safe", pure=True)
    try:
        data = yaml.load(StringIO(text))
    except YAMLError as exc:
        msg = f"Invalid YAML in {filename}: {exc}"
        raise DeclarationSyntaxError(msg, source=filename) from exc
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        msg = f"{filename}: top level must be a mapping"
        raise DeclarationSyntaxError(msg, source=filename)
    return declarations_from_mapping(data, filename=filename)


def load_path(path: Path) -> DeclarationSet:
    """Dispatch on suffix: ``.toml``, ``.yaml``/``.yml``, otherwise Python."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read {path}: {exc.strerror or exc}"
        raise DeclarationSyntaxError(msg, source=str(path)) from exc

    suffix = path.suffix.lower()
    if suffix == ".toml":
        return load_toml(text, filename=str(path))
    if suffix in {".yaml", ".yml"}:
        return load_yaml(text, filename=str(path))

    from stowr.generator.parser import parse_declarations

    return parse_declarations(text, filename=str(path))


def declarations_from_mapping(
    data: Mapping[str, Any], *, filename: str = "<declarations>"
) -> DeclarationSet:
    """Build a :class:`DeclarationSet` from already-decoded data."""
    entities = data.get("entities", {})
    if not isinstance(entities, Mapping):
        msg = f"{filename}: 'entities' must be a table of entity declarations"
        raise UnsupportedShapeError(msg, source=filename)

    imports = data.get("imports", [])
    if not isinstance(imports, list) or not all(isinstance(i, str) for i in imports):
        msg = f"{filename}: 'imports' must be a list of import statements"
        raise UnsupportedShapeError(msg, source=filename)

    records: list[RecordDeclaration] = []
    impls: list[ImplDeclaration] = []
    for name, body in entities.items():
        if not isinstance(body, Mapping):
            msg = f"{filename}: entity {name!r} must be a table"
            raise UnsupportedShapeError(msg, entity=name)
        records.append(
            RecordDeclaration(
                name=str(name),
                fields=tuple(
                    FieldDeclaration(name=n, type=t)
                    for n, t in _named_pairs(body.get("fields", []), f"{name}.fields")
                ),
                docstring=body.get("doc"),
            )
        )
        impl = _impl_from_mapping(str(name), body)
        if impl is not None:
            impls.append(impl)

    return DeclarationSet(
        source_name=filename,
        imports=tuple(imports),
        records=tuple(records),
        impls=tuple(impls),
    )


def _named_pairs(value: Any, where: str) -> list[tuple[str, str]]:
    """Normalize a table or a list of ``{name, type}`` tables to pairs."""
    if isinstance(value, Mapping):
        items = list(value.items())
    elif isinstance(value, list):
        items = []
        for entry in value:
            if not isinstance(entry, Mapping) or "name" not in entry or "type" not in entry:
                msg = (
                    f"{where}: every entry needs a 'name' and a 'type'"
                    " (positional entries are not supported)"
                )
                raise UnsupportedShapeError(msg, location=where)
            items.append((entry["name"], entry["type"]))
    else:
        msg = f"{where}: expected a table or a list of tables"
        raise UnsupportedShapeError(msg, location=where)

    for name, type_ in items:
        if not isinstance(name, str) or not isinstance(type_, str):
            msg = f"{where}: names and types must be strings"
            raise UnsupportedShapeError(msg, location=where)
    return items


def _impl_from_mapping(owner: str, body: Mapping[str, Any]) -> ImplDeclaration | None:
    raw_methods = body.get("methods", [])
    if not isinstance(raw_methods, list):
        msg = f"{owner}.methods must be a list of tables"
        raise UnsupportedShapeError(msg, entity=owner)
    if not raw_methods and "commands" not in body:
        return None

    methods: list[MethodDeclaration] = []
    for raw in raw_methods:
        if not isinstance(raw, Mapping) or not isinstance(raw.get("name"), str):
            msg = f"{owner}.methods: every method needs a 'name'"
            raise UnsupportedShapeError(msg, entity=owner)
        params = tuple(
            ParamDeclaration(name=n, type=t)
            for n, t in _named_pairs(raw.get("params", []), f"{owner}.{raw['name']}.params")
        )
        methods.append(
            MethodDeclaration(
                name=raw["name"],
                params=params,
                is_command=bool(raw.get("command", False)),
                source=_method_source(
                    f"{owner}.{raw['name']}", raw["name"], params, str(raw.get("body") or "pass")
                ),
            )
        )

    commands = body.get("commands")
    if commands is None:
        commands = [m.name for m in methods if m.is_command]
    elif not isinstance(commands, list) or not all(isinstance(c, str) for c in commands):
        msg = f"{owner}.commands must be a list of method names"
        raise UnsupportedShapeError(msg, entity=owner)

    return ImplDeclaration(owner=owner, methods=tuple(methods), commands=tuple(commands))


def _method_source(
    where: str, name: str, params: tuple[ParamDeclaration, ...], body: str
) -> str:
    """Wrap a column-0 *body* in a method signature."""
    signature = ", ".join(["self", *(f"{p.name}: {p.type}" for p in params)])
    try:
        block = indent_block(body.strip("\n").rstrip(), 4)
    except SyntaxError as exc:
        msg = f"{where}: body is not valid Python (line {exc.lineno}: {exc.msg})"
        raise DeclarationSyntaxError(msg, location=where, line=exc.lineno) from exc
    return f"def {name}({signature}) -> None:\n{block}"
