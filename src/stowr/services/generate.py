"""GenerateService — expand declaration files into generated modules.

Pipeline: LOAD → PLAN → RENDER → WRITE (or COMPARE with ``check``) → RESPOND

INVARIANT: The output file is written only after the whole expansion
succeeded.  A failed generation leaves any previous output untouched.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import structlog
from jinja2 import TemplateError

from stowr.generator.emitter import ModulePlan, render_module
from stowr.generator.errors import GenerationError
from stowr.generator.loaders import load_path
from stowr.generator.pipeline import plan_module
from stowr.services.base import BaseService
from stowr.services.result import ServiceResult

logger = logging.getLogger(__name__)


class GenerateService(BaseService):
    """Runs the generator pipeline for one declaration file."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(
        self,
        source: Path,
        *,
        output: Path | None = None,
        check: bool = False,
    ) -> ServiceResult:
        """Generate the module for *source*.

        Args:
            source: Declaration file (``.py``, ``.toml``, ``.yaml``).
            output: Target file; defaults to the source path with the
                configured ``output_suffix``.
            check: Compare instead of writing; fail if the target is stale.
        """
        op = "check" if check else "generate"
        source = self._resolve(source)
        target = self._resolve(output) if output is not None else self._default_output(source)

        with structlog.contextvars.bound_contextvars(source=str(source)):
            if target.resolve() == source.resolve():
                return ServiceResult.failure(
                    op,
                    "OUTPUT_IS_SOURCE",
                    f"Refusing to write generated code over its declaration file {source}",
                    output=str(target),
                )
            try:
                plan = plan_module(load_path(source))
                code = render_module(
                    plan,
                    template_dir=self._settings.resolve_template_dir(),
                    header=self._settings.generate.header,
                )
            except GenerationError as exc:
                logger.debug("Generation failed: %s", exc.message)
                return ServiceResult.from_error(op, exc)
            except TemplateError as exc:
                msg = f"Template rendering failed: {exc}"
                return ServiceResult.failure(op, "TEMPLATE_ERROR", msg)

            current = target.read_text(encoding="utf-8") if target.is_file() else None
            up_to_date = current == code
            data: dict[str, Any] = {
                "source": str(source),
                "output": str(target),
                "entities": [entity.name for entity in plan.entities],
                "aggregates": sorted(plan.aggregates),
                "up_to_date": up_to_date,
            }

            if check:
                if not up_to_date:
                    return ServiceResult.failure(
                        op,
                        "STALE_OUTPUT",
                        f"{target} is out of date; run stowr generate {source}",
                        output=str(target),
                    )
                return ServiceResult.success(op, **data)

            if not up_to_date:
                try:
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_text(code, encoding="utf-8")
                except OSError as exc:
                    return ServiceResult.failure(
                        op,
                        "WRITE_FAILED",
                        f"Cannot write {target}: {exc.strerror or exc}",
                        output=str(target),
                    )
                logger.info("Wrote %s", target)

            return ServiceResult.success(op, **data)

    def inspect(self, source: Path) -> ServiceResult:
        """Describe every artifact *source* would generate, without rendering."""
        op = "inspect"
        source = self._resolve(source)
        try:
            plan = plan_module(load_path(source))
        except GenerationError as exc:
            return ServiceResult.from_error(op, exc)

        return ServiceResult.success(
            op,
            source=str(source),
            entities=[_describe(plan, entity.name) for entity in plan.entities],
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _default_output(self, source: Path) -> Path:
        return source.with_name(f"{source.stem}{self._settings.generate.output_suffix}")


def _describe(plan: ModulePlan, name: str) -> dict[str, Any]:
    entity = next(e for e in plan.entities if e.name == name)
    described: dict[str, Any] = {
        "name": entity.name,
        "tag": entity.tag,
        "id": entity.id,
        "repository": entity.repository,
        "repo_alias": entity.repo_alias,
        "fields": [{"name": f.name, "type": f.type} for f in entity.fields],
    }
    aggregate = plan.aggregates.get(name)
    if aggregate is not None:
        described["command_type"] = aggregate.command_type
        described["event_type"] = aggregate.event_type
        described["variants"] = [
            {
                "name": v.name,
                "method": v.method,
                "fields": [{"name": p.name, "type": p.type} for p in v.params],
            }
            for v in aggregate.variants
        ]
    return described
