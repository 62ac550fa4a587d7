"""Resolver graph builder.

Produces one resolver per field of the compiled schema, keyed by type
name then field name.  User-declared fields dispatch to their remote
endpoint; system fields are bound locally and merged over them with the
same default-wins rule the schema text uses, so ``Query.transact``,
``Aggregate.id``/``version``, ``Transaction.id``/``commit`` and
``Result.id``/``success`` can never be replaced.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from domainapi.compiler.schema import CompiledSchema, renderable_fields
from domainapi.dispatch.dispatcher import Resolver, ResolverDispatcher
from domainapi.domain import transaction as stager
from domainapi.domain.merge import RESOLVERS_DEPTH, merge_defaults

logger = logging.getLogger(__name__)

ResolverMap = dict[str, dict[str, Resolver]]


def read_field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def attribute(name: str) -> Resolver:
    def resolve(obj: Any, args: Mapping[str, Any], context: Any) -> Any:
        return read_field(obj, name)

    return resolve


def attribute_or_zero(name: str) -> Resolver:
    def resolve(obj: Any, args: Mapping[str, Any], context: Any) -> Any:
        value = read_field(obj, name)
        return 0 if value is None else value

    return resolve


def transact(repository: Any) -> Resolver:
    def resolve(obj: Any, args: Mapping[str, Any], context: Any) -> stager.Transaction:
        transaction = stager.start(repository, context)
        logger.debug("Started transaction %s (options=%r)", transaction.id, args.get("options"))
        return transaction

    return resolve


def stage_action(action: str) -> Resolver:
    def resolve(obj: stager.Transaction, args: Mapping[str, Any], context: Any) -> Any:
        return stager.stage(obj, action, args)

    return resolve


def commit(obj: stager.Transaction, args: Mapping[str, Any], context: Any) -> stager.Result:
    result = stager.commit(obj)
    logger.debug(
        "Committed transaction %s with %d task(s) (options=%r)",
        obj.id,
        len(obj.tasks),
        args.get("options"),
    )
    return result


def build_resolvers(schema: CompiledSchema, dispatcher: ResolverDispatcher) -> ResolverMap:
    """Build the resolver map for every object type field in *schema*."""
    declared: dict[str, Any] = {}
    for type_name, definition in schema.types.items():
        fields = renderable_fields(definition)
        if fields:
            declared[type_name] = {
                field_name: dispatcher.bind(field_name, spec) for field_name, spec in fields.items()
            }

    system: dict[str, Any] = {
        "Query": {
            "transact": transact(schema.repository),
        },
        "Aggregate": {
            "id": attribute_or_zero("id"),
            "version": attribute_or_zero("version"),
        },
        "Transaction": {
            **{action: stage_action(action) for action in schema.groups.actions},
            "id": attribute("id"),
            "commit": commit,
        },
        "Result": {
            "id": attribute("id"),
            "success": attribute("success"),
        },
    }

    return merge_defaults(system, declared, depth=RESOLVERS_DEPTH)
