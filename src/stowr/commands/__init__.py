"""Subcommand modules for stowr.

Provides register_commands() which uses deferred imports to keep
``stowr --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from stowr.commands.generate import generate
    from stowr.commands.inspect_cmd import inspect_cmd

    cli.add_command(generate)
    cli.add_command(inspect_cmd)
