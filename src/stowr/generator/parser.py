"""Parse Python declaration sources into a :class:`DeclarationSet`.

A declaration source is an ordinary module using the markers from
:mod:`stowr.domain.markers`::

    @domain
    class Foo:
        name: str

    @domain_impl(Foo)
    class FooBehaviour:
        @command
        def rename(self, new_name: str) -> None:
            self.name = new_name

The module is parsed with :mod:`ast`, never imported.  Only the *shape* of
declarations is checked here; naming rules live in the planners.  Other
module-level assignments, functions and classes are carried into the
generated module verbatim so method bodies can keep using them.
"""

from __future__ import annotations

import ast
import logging

from stowr.generator.blocks import shift, string_lines
from stowr.generator.declarations import (
    DeclarationSet,
    FieldDeclaration,
    ImplDeclaration,
    MethodDeclaration,
    ParamDeclaration,
    RecordDeclaration,
)
from stowr.generator.errors import DeclarationSyntaxError, UnsupportedShapeError

logger = logging.getLogger(__name__)

_RECEIVER_DECORATORS = frozenset({"staticmethod", "classmethod"})
_MARKERS = frozenset({"domain", "domain_impl", "command"})


def parse_declarations(text: str, *, filename: str = "<declarations>") -> DeclarationSet:
    """Parse *text* and collect every ``@domain`` / ``@domain_impl`` class.

    Raises:
        DeclarationSyntaxError: *text* is not valid Python.
        UnsupportedShapeError: A marked declaration has a shape the
            generator cannot expand.
    """
    try:
        tree = ast.parse(text, filename=filename)
    except SyntaxError as exc:
        msg = f"{filename}:{exc.lineno}: {exc.msg}"
        raise DeclarationSyntaxError(msg, source=filename, line=exc.lineno) from exc

    imports: list[str] = []
    definitions: list[str] = []
    defined: list[str] = []
    records: list[RecordDeclaration] = []
    impls: list[ImplDeclaration] = []

    for index, node in enumerate(tree.body):
        if index == 0 and _is_docstring(node):
            continue
        if isinstance(node, ast.Import | ast.ImportFrom):
            if (kept := _kept_import(node)) is not None:
                imports.append(kept)
            continue
        if isinstance(node, ast.FunctionDef | ast.AsyncFunctionDef):
            if _find_marker(node.decorator_list, "domain") or _find_marker(
                node.decorator_list, "domain_impl"
            ):
                msg = f"{filename}:{node.lineno}: @domain applies to classes, not functions"
                raise UnsupportedShapeError(msg, source=filename, line=node.lineno)
        elif isinstance(node, ast.ClassDef):
            if _find_marker(node.decorator_list, "domain") is not None:
                records.append(_parse_record(node, filename))
                continue
            if (marker := _find_marker(node.decorator_list, "domain_impl")) is not None:
                impls.append(_parse_impl(node, marker, text, filename))
                continue
        elif not isinstance(node, ast.Assign | ast.AnnAssign):
            msg = (
                f"{filename}:{node.lineno}: only imports, assignments, functions and"
                f" classes may appear at module level ({type(node).__name__} found)"
            )
            raise UnsupportedShapeError(msg, source=filename, line=node.lineno)

        names = _bound_names(node)
        if all(name.startswith("__") for name in names):
            logger.debug("Skipping module attribute %s in %s", ", ".join(names), filename)
            continue
        definitions.append(_definition_source(node, text))
        defined.extend(names)

    return DeclarationSet(
        source_name=filename,
        imports=tuple(imports),
        definitions=tuple(definitions),
        defined_names=tuple(defined),
        records=tuple(records),
        impls=tuple(impls),
    )


# ---------------------------------------------------------------------------
# Module-level definitions
# ---------------------------------------------------------------------------


def _is_docstring(node: ast.stmt) -> bool:
    return (
        isinstance(node, ast.Expr)
        and isinstance(node.value, ast.Constant)
        and isinstance(node.value.value, str)
    )


def _bound_names(node: ast.stmt) -> list[str]:
    if isinstance(node, ast.FunctionDef | ast.AsyncFunctionDef | ast.ClassDef):
        return [node.name]
    targets = node.targets if isinstance(node, ast.Assign) else [node.target]
    return [
        child.id
        for target in targets
        for child in ast.walk(target)
        if isinstance(child, ast.Name) and isinstance(child.ctx, ast.Store)
    ]


def _definition_source(node: ast.stmt, text: str) -> str:
    """Exact text of a module-level statement, decorators included.

    Module-level statements start at column 0, so the text is copied
    without re-indenting.
    """
    decorators = getattr(node, "decorator_list", [])
    segment = ast.get_source_segment(text, node) or ast.unparse(node)
    prefix = [f"@{ast.get_source_segment(text, d) or ast.unparse(d)}" for d in decorators]
    return "\n".join([*prefix, segment])


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------


def _marker_name(node: ast.expr) -> str | None:
    target = node.func if isinstance(node, ast.Call) else node
    if isinstance(target, ast.Name):
        return target.id
    if isinstance(target, ast.Attribute):
        return target.attr
    return None


def _find_marker(decorators: list[ast.expr], name: str) -> ast.expr | None:
    return next((d for d in decorators if _marker_name(d) == name), None)


def _kept_import(node: ast.Import | ast.ImportFrom) -> str | None:
    """Import text for the generated module, or None to drop the import.

    ``__future__`` imports and the declaration markers are dropped; the
    generated module brings its own header.
    """
    if not isinstance(node, ast.ImportFrom):
        return ast.unparse(node)
    module = node.module or ""
    if module == "__future__":
        return None
    if node.level == 0 and module.split(".")[0] == "stowr":
        names = [alias for alias in node.names if alias.name not in _MARKERS]
        if not names:
            return None
        return ast.unparse(ast.ImportFrom(module=module, names=names, level=0))
    return ast.unparse(node)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def _parse_record(node: ast.ClassDef, filename: str) -> RecordDeclaration:
    where = f"{filename}:{node.lineno}"
    marker = _find_marker(node.decorator_list, "domain")
    if isinstance(marker, ast.Call):
        msg = f"{where}: @domain takes no arguments"
        raise UnsupportedShapeError(msg, entity=node.name, line=node.lineno)
    if node.bases or node.keywords:
        msg = f"{where}: @domain class {node.name} must not declare base classes"
        raise UnsupportedShapeError(msg, entity=node.name, line=node.lineno)

    docstring = ast.get_docstring(node)
    fields: list[FieldDeclaration] = []
    for index, stmt in enumerate(node.body):
        if index == 0 and docstring is not None:
            continue
        if _is_placeholder(stmt):
            continue
        if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
            if stmt.value is not None:
                msg = f"{filename}:{stmt.lineno}: field {stmt.target.id!r} must not have a default"
                raise UnsupportedShapeError(msg, entity=node.name, line=stmt.lineno)
            fields.append(
                FieldDeclaration(
                    name=stmt.target.id,
                    type=ast.unparse(stmt.annotation),
                    line=stmt.lineno,
                )
            )
            continue
        msg = (
            f"{filename}:{stmt.lineno}: @domain only supports named, annotated fields"
            f" ({type(stmt).__name__} found in {node.name})"
        )
        raise UnsupportedShapeError(msg, entity=node.name, line=stmt.lineno)

    return RecordDeclaration(
        name=node.name,
        fields=tuple(fields),
        docstring=docstring,
        line=node.lineno,
    )


def _is_placeholder(stmt: ast.stmt) -> bool:
    if isinstance(stmt, ast.Pass):
        return True
    return (
        isinstance(stmt, ast.Expr)
        and isinstance(stmt.value, ast.Constant)
        and stmt.value.value is Ellipsis
    )


# ---------------------------------------------------------------------------
# Implementation blocks
# ---------------------------------------------------------------------------


def _impl_owner(marker: ast.expr, where: str) -> str:
    if not isinstance(marker, ast.Call) or len(marker.args) != 1 or marker.keywords:
        msg = f"{where}: use @domain_impl(Entity) with exactly one entity"
        raise UnsupportedShapeError(msg)
    owner = marker.args[0]
    if isinstance(owner, ast.Name):
        return owner.id
    if isinstance(owner, ast.Constant) and isinstance(owner.value, str):
        return owner.value
    msg = f"{where}: @domain_impl expects an entity name"
    raise UnsupportedShapeError(msg)


def _parse_impl(node: ast.ClassDef, marker: ast.expr, text: str, filename: str) -> ImplDeclaration:
    where = f"{filename}:{node.lineno}"
    owner = _impl_owner(marker, where)
    docstring = ast.get_docstring(node)

    methods: list[MethodDeclaration] = []
    for index, stmt in enumerate(node.body):
        if index == 0 and docstring is not None:
            continue
        if _is_placeholder(stmt):
            continue
        if isinstance(stmt, ast.FunctionDef | ast.AsyncFunctionDef):
            methods.append(_parse_method(stmt, text, filename))
            continue
        msg = f"{filename}:{stmt.lineno}: @domain_impl blocks may only contain methods"
        raise UnsupportedShapeError(msg, entity=owner, line=stmt.lineno)

    return ImplDeclaration(
        owner=owner,
        methods=tuple(methods),
        commands=tuple(m.name for m in methods if m.is_command),
        line=node.lineno,
    )


def _parse_method(
    node: ast.FunctionDef | ast.AsyncFunctionDef, text: str, filename: str
) -> MethodDeclaration:
    command_marker = _find_marker(node.decorator_list, "command")
    kept = [d for d in node.decorator_list if d is not command_marker]
    has_receiver = not any(_marker_name(d) in _RECEIVER_DECORATORS for d in kept)

    positional = [*node.args.posonlyargs, *node.args.args]
    # Defaults belong to the trailing positional parameters.
    defaults: dict[str, ast.expr | None] = {
        arg.arg: default
        for arg, default in zip(reversed(positional), reversed(node.args.defaults), strict=False)
    }
    defaults.update(
        (arg.arg, default)
        for arg, default in zip(node.args.kwonlyargs, node.args.kw_defaults, strict=True)
    )
    if has_receiver:
        if not positional or positional[0].arg != "self":
            has_receiver = False
        else:
            positional = positional[1:]

    params = tuple(
        ParamDeclaration(
            name=arg.arg,
            type=ast.unparse(arg.annotation) if arg.annotation is not None else "",
            keyword_only=arg in node.args.kwonlyargs,
            default=_default_source(defaults.get(arg.arg), text),
        )
        for arg in [*positional, *node.args.kwonlyargs]
    )

    unsupported: str | None = None
    if isinstance(node, ast.AsyncFunctionDef):
        unsupported = "command methods must be synchronous"
    elif node.args.vararg is not None or node.args.kwarg is not None:
        unsupported = "command methods must not take *args or **kwargs"

    return MethodDeclaration(
        name=node.name,
        params=params,
        is_command=command_marker is not None,
        has_receiver=has_receiver,
        source=_method_source(node, kept, text),
        unsupported=unsupported,
        line=node.lineno,
    )


def _default_source(default: ast.expr | None, text: str) -> str | None:
    if default is None:
        return None
    return ast.get_source_segment(text, default) or ast.unparse(default)


def _method_source(
    node: ast.FunctionDef | ast.AsyncFunctionDef, decorators: list[ast.expr], text: str
) -> str:
    """Method text with the command marker removed, moved to column 0.

    Each line loses the indentation of the ``def``; string literal
    continuation lines keep their text as written.
    """
    lines = text.splitlines()[node.lineno - 1 : node.end_lineno]
    keep = string_lines(node, first_line=node.lineno)
    body = shift("\n".join(lines), -node.col_offset, keep=keep)
    prefix = [f"@{ast.get_source_segment(text, d) or ast.unparse(d)}" for d in decorators]
    return "\n".join([*prefix, body])
