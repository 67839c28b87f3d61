"""Root CLI group for stowr with global flags and command registration."""

from __future__ import annotations

import click

from stowr import __version__
from stowr.commands import register_commands
from stowr.commands._base import StowrGroup
from stowr.commands._context import AppContext
from stowr.config.settings import StowrSettings


@click.group(
    cls=StowrGroup,
    invoke_without_command=True,
    examples="""\
  stowr generate domain.py
  stowr generate domain.py --check
  stowr inspect entities.toml
  stowr -c ../stowr.toml generate domain.py""",
)
@click.version_option(version=__version__, prog_name="stowr")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """stowr — entity and aggregate code generator."""
    ctx.ensure_object(dict)
    settings = StowrSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
