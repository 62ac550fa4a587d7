"""Subcommand modules for domainapi.

register_commands() uses deferred imports to keep ``domainapi --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root group."""
    from domainapi.commands.compile import compile_cmd
    from domainapi.commands.execute import execute
    from domainapi.commands.store import store

    cli.add_command(compile_cmd)
    cli.add_command(execute)
    cli.add_command(store)
