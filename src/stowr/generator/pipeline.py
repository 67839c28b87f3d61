"""Declarations -> plans -> source, all or nothing.

INVARIANT: Every entity and implementation block is planned, and the whole
set of generated names checked, before the first line is rendered.  Any
:class:`GenerationError` aborts the expansion with no output.
"""

from __future__ import annotations

import ast
import logging
import sys
import types
from collections import Counter
from pathlib import Path

from stowr.generator.aggregate import AggregatePlan, plan_aggregate
from stowr.generator.declarations import DeclarationSet
from stowr.generator.emitter import RUNTIME_NAMES, ModulePlan, render_module
from stowr.generator.entity import EntityPlan, plan_entity
from stowr.generator.errors import DeclarationSyntaxError, NameCollisionError
from stowr.generator.loaders import load_path
from stowr.generator.parser import parse_declarations

logger = logging.getLogger(__name__)


def plan_module(declarations: DeclarationSet) -> ModulePlan:
    """Validate *declarations* and build the plan for one module."""
    entities: dict[str, EntityPlan] = {}
    for record in declarations.records:
        plan = plan_entity(record)
        if plan.name in entities:
            msg = f"Entity {plan.name!r} is declared twice in {declarations.source_name}"
            raise NameCollisionError(msg, entity=plan.name)
        entities[plan.name] = plan

    aggregates: dict[str, AggregatePlan] = {}
    for impl in declarations.impls:
        aggregate = plan_aggregate(entities, impl)
        if aggregate.entity in aggregates:
            msg = f"{aggregate.entity} has more than one @domain_impl block"
            raise NameCollisionError(msg, entity=aggregate.entity)
        aggregates[aggregate.entity] = aggregate

    module = ModulePlan(
        source_name=declarations.source_name,
        imports=declarations.imports,
        definitions=declarations.definitions,
        entities=tuple(entities.values()),
        aggregates=aggregates,
    )
    _check_unique_names(module, declarations)
    logger.debug(
        "Planned %d entities and %d aggregates from %s",
        len(entities),
        len(aggregates),
        declarations.source_name,
    )
    return module


def _check_unique_names(module: ModulePlan, declarations: DeclarationSet) -> None:
    """Every top-level name of the generated module must be bound once.

    Generated types and carried definitions share the module with the
    runtime imports of the template and with the declaration's own imports.
    """
    defined = [*module.generated_names, *declarations.defined_names]
    counts = Counter(defined)
    clashes = sorted(name for name, count in counts.items() if count > 1)
    if clashes:
        msg = f"Generated names collide in {module.source_name}: {', '.join(clashes)}"
        raise NameCollisionError(msg, names=clashes)

    imported = RUNTIME_NAMES | _imported_names(declarations)
    shadowed = sorted(set(defined) & imported)
    if shadowed:
        msg = (
            f"Names defined in {module.source_name} shadow imports of the generated"
            f" module: {', '.join(shadowed)}"
        )
        raise NameCollisionError(msg, names=shadowed)


def _imported_names(declarations: DeclarationSet) -> frozenset[str]:
    names: set[str] = set()
    for line in declarations.imports:
        try:
            tree = ast.parse(line)
        except SyntaxError as exc:
            msg = f"{declarations.source_name}: invalid import {line!r}"
            raise DeclarationSyntaxError(msg, source=declarations.source_name) from exc
        for node in tree.body:
            if not isinstance(node, ast.Import | ast.ImportFrom):
                msg = f"{declarations.source_name}: {line!r} is not an import statement"
                raise DeclarationSyntaxError(msg, source=declarations.source_name)
            for alias in node.names:
                if alias.name != "*":
                    names.add(alias.asname or alias.name.split(".")[0])
    return frozenset(names)


def generate(
    declarations: DeclarationSet, *, template_dir: Path | None = None, header: bool = True
) -> str:
    """Expand *declarations* into the source of one Python module."""
    module = plan_module(declarations)
    return render_module(module, template_dir=template_dir, header=header)


def generate_source(
    text: str,
    *,
    filename: str = "<declarations>",
    template_dir: Path | None = None,
    header: bool = True,
) -> str:
    """Parse a Python declaration source and expand it."""
    declarations = parse_declarations(text, filename=filename)
    return generate(declarations, template_dir=template_dir, header=header)


def generate_file(path: Path, *, template_dir: Path | None = None, header: bool = True) -> str:
    """Load a declaration file (Python, TOML or YAML) and expand it."""
    return generate(load_path(path), template_dir=template_dir, header=header)


def load_generated(module_name: str, code: str) -> types.ModuleType:
    """Execute generated *code* as module *module_name* and return it.

    The module is registered in :data:`sys.modules` before execution so
    pydantic can resolve the generated annotations.  Re-loading a name
    replaces the previous module.
    """
    module = types.ModuleType(module_name)
    module.__file__ = f"<stowr:{module_name}>"
    sys.modules[module_name] = module
    try:
        exec(compile(code, module.__file__, "exec"), module.__dict__)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module
