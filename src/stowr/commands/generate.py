"""Command: expand a declaration file into a generated module."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from stowr.commands._base import StowrCommand

if TYPE_CHECKING:
    from stowr.commands._context import AppContext


@click.command(
    cls=StowrCommand,
    examples="""\
  stowr generate domain.py
  stowr generate domain.py -o src/app/domain_gen.py
  stowr generate entities.toml
  stowr generate domain.py --check
  stowr --json generate entities.yaml""",
)
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Target file (default: SOURCE with the configured output suffix).",
)
@click.option("--check", is_flag=True, help="Fail instead of writing when the output is stale.")
@click.pass_obj
def generate(app: AppContext, source: Path, output: Path | None, check: bool) -> None:
    """Generate entity and aggregate code from SOURCE."""
    from stowr.services.generate import GenerateService

    app.emit(GenerateService(app.settings).generate(source, output=output, check=check))
