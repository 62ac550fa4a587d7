"""Domain model addressing and field-spec shapes.

A domain model is a plain JSON document read from the Domain Store::

    {
      "boundedContexts": {
        "<bctxt>": {"aggregates": {"<name>": {"versions": {"<v>": {...}}}}}
      },
      "repositories": {"<name>": {...}}
    }

Lookups are exact path resolution: a missing or non-mapping segment
yields ``None`` rather than raising.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, NotRequired, TypedDict

from pydantic import BaseModel, ConfigDict, Field

DOMAIN_DOCUMENT_TYPE = "domain"


class ReturnType(TypedDict):
    name: str
    isCollection: NotRequired[bool]


class ResolverRef(TypedDict):
    uri: str


class FieldSpec(TypedDict, total=False):
    """One query, method, action, or entity field."""

    params: dict[str, str]
    returnType: ReturnType
    resolver: ResolverRef


class TypeDefinition(TypedDict):
    methods: dict[str, FieldSpec]


class Selector(BaseModel):
    """Addresses one aggregate version inside a domain model."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bounded_context: str = Field(alias="boundedContext")
    aggregate: str
    version: str

    def aggregate_path(self) -> tuple[str, ...]:
        return (
            "boundedContexts",
            self.bounded_context,
            "aggregates",
            self.aggregate,
            "versions",
            self.version,
        )


class DocumentKey(BaseModel):
    """Domain Store key."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: str


def resolve_path(document: Any, path: Sequence[str]) -> Any:
    """Walk *path* through nested mappings, returning ``None`` on any miss."""
    current = document
    for segment in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(segment)
        if current is None:
            return None
    return current


def get_aggregate(domain: Mapping[str, Any] | None, selector: Selector) -> Mapping[str, Any] | None:
    """Return the aggregate definition addressed by *selector*."""
    aggregate = resolve_path(domain, selector.aggregate_path())
    return aggregate if isinstance(aggregate, Mapping) else None


def get_repository(
    domain: Mapping[str, Any] | None, aggregate: Mapping[str, Any] | None
) -> Any:
    """Return the repository referenced by name from *aggregate*."""
    name = resolve_path(aggregate, ("repository",))
    if name is None:
        return None
    return resolve_path(domain, ("repositories", str(name)))
