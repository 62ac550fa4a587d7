"""execute: run a GraphQL document against a compiled aggregate API."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from domainapi.commands._base import ApiCommand, selector_arguments
from domainapi.domain.model import Selector
from domainapi.services.api import ApiService

if TYPE_CHECKING:
    from domainapi.commands._context import AppContext


def _json_object(_ctx: click.Context, param: click.Parameter, value: str | None) -> dict[str, Any]:
    if value is None:
        return {}
    try:
        data = json.loads(value)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param=param) from exc
    if not isinstance(data, dict):
        raise click.BadParameter("must be a JSON object", param=param)
    return data


@click.command(
    cls=ApiCommand,
    examples="""\
  domainapi execute acme sales order 1 '{ list(status: "open") { id version } }'
  domainapi execute acme sales order 1 '{ transact { id commit { success } } }'
  domainapi execute acme sales order 1 'query($s: String) { list(status: $s) { id } }' \\
      --variables '{"s": "open"}' --context '{"hostname": "acme.example"}'""",
)
@selector_arguments
@click.argument("document")
@click.option("--variables", callback=_json_object, default=None, help="Variables as JSON.")
@click.option(
    "--context",
    "request_context",
    callback=_json_object,
    default=None,
    help="Request context as JSON (filtered before use).",
)
@click.pass_obj
def execute(
    app: AppContext,
    domain_id: str,
    bounded_context: str,
    aggregate: str,
    version: str,
    document: str,
    variables: dict[str, Any],
    request_context: dict[str, Any],
) -> None:
    """Execute a GraphQL document against an aggregate version."""
    selector = Selector(bounded_context=bounded_context, aggregate=aggregate, version=version)
    svc = ApiService(app.runtime)
    result = app.run(
        svc.execute(
            domain_id,
            selector,
            document,
            variables=variables or None,
            context=request_context,
        )
    )
    app.emit(result)
