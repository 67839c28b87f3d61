"""Render planned entities and aggregates to Python source.

The emitter formats; the declaration checks happened during planning.  The
one check left here is on the result: every copied method must land as a
direct member of its entity class.  Output is a pure function of the plans:
no timestamps, no environment lookups, stable ordering, so regenerating an
unchanged declaration is byte-identical.
"""

from __future__ import annotations

import ast
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from stowr.generator.aggregate import AggregatePlan, VariantPlan
from stowr.generator.blocks import indent_block, string_lines
from stowr.generator.entity import EntityPlan
from stowr.generator.errors import UnsupportedShapeError
from stowr.infrastructure.templates import build_template_environment

# Names module.py.j2 binds before any generated code.
RUNTIME_NAMES = frozenset(
    {
        "annotations",
        "copy",
        "ClassVar",
        "TypeAlias",
        "Aggregate",
        "Command",
        "Entity",
        "Event",
        "SumType",
        "UnknownVariantError",
        "RepositoryId",
        "Tag",
        "Repository",
    }
)


@dataclass(frozen=True)
class ModulePlan:
    """Everything one generated module contains, in emission order."""

    source_name: str
    imports: tuple[str, ...] = ()
    definitions: tuple[str, ...] = ()
    entities: tuple[EntityPlan, ...] = ()
    aggregates: dict[str, AggregatePlan] = field(default_factory=dict)

    @property
    def generated_names(self) -> list[str]:
        names: list[str] = []
        for entity in self.entities:
            names.extend(entity.generated_names)
            aggregate = self.aggregates.get(entity.name)
            if aggregate is not None:
                names.extend(aggregate.generated_names)
        return names


def render_module(
    plan: ModulePlan, *, template_dir: Path | None = None, header: bool = True
) -> str:
    """Render *plan* to the source text of one Python module."""
    env = build_template_environment("module", template_dir=template_dir)
    template = env.get_template("module.py.j2")
    text = template.render(
        source_name=plan.source_name,
        header=header,
        imports=plan.imports,
        definitions=plan.definitions,
        units=[_unit(entity, plan.aggregates.get(entity.name)) for entity in plan.entities],
    )
    try:
        tree = ast.parse(text)
    except SyntaxError as exc:
        msg = f"Module rendered from {plan.source_name} is not valid Python: {exc.msg}"
        raise UnsupportedShapeError(msg, source=plan.source_name, line=exc.lineno) from exc
    _check_members(tree, plan)
    return _tidy(text, string_lines(tree))


def _check_members(tree: ast.Module, plan: ModulePlan) -> None:
    """Every copied method must be a direct member of its entity class."""
    classes = {node.name: node for node in tree.body if isinstance(node, ast.ClassDef)}
    for name, aggregate in plan.aggregates.items():
        node = classes.get(name)
        if node is None:
            continue
        members = {
            stmt.name
            for stmt in node.body
            if isinstance(stmt, ast.FunctionDef | ast.AsyncFunctionDef)
        }
        for method in aggregate.methods:
            if method.name not in members:
                msg = f"{name}: method {method.name!r} did not render as a member of {name}"
                raise UnsupportedShapeError(msg, entity=name, method=method.name)


def _tidy(text: str, strings: frozenset[int]) -> str:
    """Strip trailing blanks and cap blank runs at two, outside string literals."""
    lines: list[str] = []
    blank_run = 0
    for row, line in enumerate(text.split("\n"), start=1):
        if row not in strings:
            line = line.rstrip()
            if not line:
                blank_run += 1
                if blank_run > 2:
                    continue
            else:
                blank_run = 0
        else:
            blank_run = 0
        lines.append(line)
    return "\n".join(lines).strip("\n") + "\n"


def _unit(entity: EntityPlan, aggregate: AggregatePlan | None) -> dict[str, Any]:
    variants = aggregate.variants if aggregate is not None else ()
    return {
        "entity": entity,
        "aggregate": aggregate,
        "docstring": _docstring(entity),
        "methods": [indent_block(m.source, 4) for m in (aggregate.methods if aggregate else ())],
        "command_args": {v.name: _call_args(v, "command") for v in variants},
        "event_args": {v.name: _call_args(v, "event") for v in variants},
        "event_kwargs": {
            v.name: ", ".join(f"{name}=command.{name}" for name in v.param_names) for v in variants
        },
    }


def _call_args(variant: VariantPlan, source: str) -> str:
    """Argument list passing deep copies of the payload to the method."""
    args: list[str] = []
    for param in variant.params:
        value = f"copy.deepcopy({source}.{param.name})"
        args.append(f"{param.name}={value}" if param.keyword_only else value)
    return ", ".join(args)


def _docstring(entity: EntityPlan) -> str:
    text = entity.docstring or f"{entity.name} entity record."
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text = text[:-1] + '\\"'
    if "\n" in text:
        return textwrap.indent(text, "    ").lstrip() + "\n    "
    return text
