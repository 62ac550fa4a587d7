"""Binding of schema text and resolver map to graphql-core."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from graphql import GraphQLObjectType, GraphQLResolveInfo, GraphQLSchema, build_schema

from domainapi.dispatch.dispatcher import Resolver

logger = logging.getLogger(__name__)


def _adapt(resolver: Resolver) -> Any:
    def resolve(obj: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
        return resolver(obj, args, info.context)

    return resolve


def make_executable_schema(
    type_defs: str, resolvers: Mapping[str, Mapping[str, Resolver]]
) -> GraphQLSchema:
    """Build a graphql-core schema and attach *resolvers* to its fields.

    Resolvers for types or fields missing from *type_defs* are ignored.
    """
    schema = build_schema(type_defs)
    for type_name, fields in resolvers.items():
        graphql_type = schema.type_map.get(type_name)
        if not isinstance(graphql_type, GraphQLObjectType):
            logger.debug("No object type %s in schema; resolvers ignored", type_name)
            continue
        for field_name, resolver in fields.items():
            graphql_field = graphql_type.fields.get(field_name)
            if graphql_field is None:
                continue
            graphql_field.resolve = _adapt(resolver)
    return schema
