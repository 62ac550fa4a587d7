"""compile: print the schema text for one aggregate version."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from domainapi.commands._base import ApiCommand, selector_arguments
from domainapi.domain.model import Selector
from domainapi.services.api import ApiService

if TYPE_CHECKING:
    from domainapi.commands._context import AppContext


@click.command(
    name="compile",
    cls=ApiCommand,
    examples="""\
  domainapi compile acme sales order 1
  domainapi --json compile acme sales order 2""",
)
@selector_arguments
@click.pass_obj
def compile_cmd(
    app: AppContext,
    domain_id: str,
    bounded_context: str,
    aggregate: str,
    version: str,
) -> None:
    """Compile an aggregate version into GraphQL schema text."""
    selector = Selector(bounded_context=bounded_context, aggregate=aggregate, version=version)
    result = app.run(ApiService(app.runtime).compile_schema(domain_id, selector))
    if result.ok and not app.settings.json_output:
        click.echo(result.data["type_defs"], nl=False)
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
        return
    app.emit(result)
