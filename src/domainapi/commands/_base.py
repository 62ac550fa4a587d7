"""Click base classes with --examples support.

``--examples`` prints usage examples and exits, keeping ``--help`` short.
"""

from __future__ import annotations

from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class ApiCommand(click.Command):
    """Command that accepts an ``examples`` parameter."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        if examples:
            _add_examples_option(self, examples)


class ApiGroup(click.Group):
    """Group whose subcommands are :class:`ApiCommand` by default."""

    command_class = ApiCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        if examples:
            _add_examples_option(self, examples)


def selector_arguments(func: Any) -> Any:
    """Attach the DOMAIN BCTXT AGGREGATE VERSION positional arguments."""
    for name in reversed(("domain_id", "bounded_context", "aggregate", "version")):
        func = click.argument(name)(func)
    return func
