"""Command: list what a declaration file would generate."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from stowr.commands._base import StowrCommand

if TYPE_CHECKING:
    from stowr.commands._context import AppContext


@click.command(
    "inspect",
    cls=StowrCommand,
    examples="""\
  stowr inspect domain.py
  stowr --json inspect entities.toml""",
)
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def inspect_cmd(app: AppContext, source: Path) -> None:
    """Show the types, variants and repositories SOURCE declares."""
    from stowr.services.generate import GenerateService

    app.emit(GenerateService(app.settings).inspect(source))
