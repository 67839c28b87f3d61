"""Click classes for stowr commands: usage examples on demand.

A command built with ``examples="..."`` gains an eager ``--examples`` flag
that prints them and exits, and its ``--help`` ends with a pointer to the
flag.  Examples are written one invocation per line, indented two spaces.
"""

from __future__ import annotations

from typing import Any

import click


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    command = ctx.command
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(getattr(command, "examples", "") or "")
    ctx.exit(0)


class _ExamplesMixin:
    """Adds the ``examples`` keyword to a Click command class."""

    examples: str | None

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(  # type: ignore[attr-defined]
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text(f"Run '{ctx.command_path} --examples' for usage examples.")


class StowrCommand(_ExamplesMixin, click.Command):
    pass


class StowrGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`StowrCommand` by default."""

    command_class = StowrCommand
