"""CompiledApi: schema text, resolver map, and the executable schema."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from graphql import ExecutionResult, GraphQLError, GraphQLSchema, graphql

from domainapi.compiler.executable import make_executable_schema
from domainapi.compiler.resolvers import ResolverMap, build_resolvers
from domainapi.compiler.schema import CompiledSchema, compile_schema
from domainapi.dispatch.dispatcher import ResolverDispatcher
from domainapi.domain.errors import InvalidSchema
from domainapi.domain.model import Selector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledApi:
    """Everything the transport adapter needs to serve one aggregate version."""

    schema: CompiledSchema
    resolvers: ResolverMap
    executable: GraphQLSchema

    @property
    def type_defs(self) -> str:
        return self.schema.type_defs

    async def execute(
        self,
        document: str,
        *,
        variables: Mapping[str, Any] | None = None,
        context: Any = None,
        operation_name: str | None = None,
    ) -> ExecutionResult:
        """Run a GraphQL document; field errors come back in ``errors``."""
        return await graphql(
            self.executable,
            document,
            root_value={},
            context_value=context,
            variable_values=dict(variables) if variables else None,
            operation_name=operation_name,
        )


def build_api(
    domain: Mapping[str, Any] | None,
    selector: Selector,
    dispatcher: ResolverDispatcher | None = None,
) -> CompiledApi:
    """Compile *selector* out of *domain* into a ready-to-serve API.

    Compilation either succeeds completely or raises; no partial schema is
    returned.

    Raises:
        AggregateNotFound, RepositoryNotFound: the selector does not resolve.
        InvalidSchema: the engine rejected the rendered schema text, e.g. a
            field naming an undeclared type.
    """
    schema = compile_schema(domain, selector)
    resolvers = build_resolvers(schema, dispatcher or ResolverDispatcher())
    try:
        executable = make_executable_schema(schema.type_defs, resolvers)
    except (GraphQLError, TypeError) as exc:
        message = "Schema text was rejected"
        logger.error("%s for %s: %s", message, "/".join(selector.aggregate_path()), exc)
        raise InvalidSchema(message, reason=str(exc)) from exc
    return CompiledApi(schema=schema, resolvers=resolvers, executable=executable)
