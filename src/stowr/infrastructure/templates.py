"""Shared Jinja2 template loading with per-project override support."""

from __future__ import annotations

from pathlib import Path

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
)


def build_template_environment(group: str, *, template_dir: Path | None = None) -> Environment:
    """Build a Jinja2 environment with user overrides before packaged defaults.

    Overrides are looked up in ``template_dir/<group>/`` first, then in
    ``template_dir`` itself, so a flat override directory keeps working.
    """

    loaders: list[BaseLoader] = []
    if template_dir is not None:
        loaders.append(FileSystemLoader([str(template_dir / group), str(template_dir)]))

    loaders.append(PackageLoader("stowr", f"templates/{group}"))
    return Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
        autoescape=False,
    )
