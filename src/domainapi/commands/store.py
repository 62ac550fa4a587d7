"""Command group: manage domain models in the Domain Store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from domainapi.commands._base import ApiGroup
from domainapi.services.api import ApiService

if TYPE_CHECKING:
    from domainapi.commands._context import AppContext


@click.group(
    cls=ApiGroup,
    examples="""\
  domainapi store put acme domain.json
  domainapi --json store get acme""",
)
def store() -> None:
    """Read and write domain models."""


@store.command()
@click.argument("domain_id")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def put(app: AppContext, domain_id: str, file: Path) -> None:
    """Store the domain model in FILE under DOMAIN_ID."""
    try:
        document = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid JSON in {file}: {exc}") from exc
    if not isinstance(document, dict):
        raise click.ClickException(f"{file} must contain a JSON object")
    app.emit(app.run(ApiService(app.runtime).put_domain(domain_id, document)))


@store.command()
@click.argument("domain_id")
@click.pass_obj
def get(app: AppContext, domain_id: str) -> None:
    """Print the domain model stored under DOMAIN_ID."""
    app.emit(app.run(ApiService(app.runtime).get_domain(domain_id)))
