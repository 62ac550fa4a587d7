"""Schema compiler: domain model to schema text.

The aggregate's queries, methods, and actions are folded into four system
object types (Query, Aggregate, Transaction, Result) and two system input
types (TransactOptions, CommitOptions).  User entities with the same name
are merged underneath them: system fields always win.

Rendering is deterministic.  One block per type, fields in merge order,
one field per line::

    type Query {
      list(x:Int): [Aggregate]
      transact(options:TransactOptions): Transaction
    }
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from domainapi.domain.errors import AggregateNotFound, RepositoryNotFound
from domainapi.domain.merge import TYPE_DEFS_DEPTH, merge_defaults
from domainapi.domain.model import Selector, get_aggregate, get_repository

logger = logging.getLogger(__name__)

LF = "\n"
INDENT = "  "

# --- System fields (never overridable) ---

QUERY_FIELDS: dict[str, Any] = {
    "transact": {
        "returnType": {"name": "Transaction"},
        "params": {"options": "TransactOptions"},
    },
}

AGGREGATE_FIELDS: dict[str, Any] = {
    "id": {"returnType": {"name": "ID"}},
    "version": {"returnType": {"name": "Int"}},
}

TRANSACTION_FIELDS: dict[str, Any] = {
    "id": {"returnType": {"name": "ID"}},
    "commit": {
        "returnType": {"name": "Result"},
        "params": {"options": "CommitOptions"},
    },
}

RESULT_FIELDS: dict[str, Any] = {
    "id": {"returnType": {"name": "ID!"}},
    "success": {"returnType": {"name": "Boolean"}},
}

SYSTEM_INPUTS: dict[str, Any] = {
    "TransactOptions": {
        "methods": {
            "subscribe": {"returnType": {"name": "Boolean"}},
        },
    },
    "CommitOptions": {
        "methods": {
            "wait": {"returnType": {"name": "Boolean"}},
            "timeout": {"returnType": {"name": "Int"}},
        },
    },
}


@dataclass(frozen=True)
class FieldGroups:
    """Field groups extracted from one aggregate definition."""

    queries: dict[str, Any] = field(default_factory=dict)
    methods: dict[str, Any] = field(default_factory=dict)
    actions: dict[str, Any] = field(default_factory=dict)
    entities: dict[str, Any] = field(default_factory=dict)
    input_entities: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CompiledSchema:
    """Schema text plus the merged definitions it was rendered from."""

    type_defs: str
    types: dict[str, Any]
    inputs: dict[str, Any]
    groups: FieldGroups
    repository: Any

    @property
    def type_names(self) -> list[str]:
        """Object type names present in the schema text."""
        return [name for name, definition in self.types.items() if renderable_fields(definition)]

    @property
    def input_names(self) -> list[str]:
        return [name for name, definition in self.inputs.items() if renderable_fields(definition)]


# ---------------------------------------------------------------------------
# Field groups
# ---------------------------------------------------------------------------


def _mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def collect_field_groups(aggregate: Mapping[str, Any]) -> FieldGroups:
    """Split an aggregate into queries, methods, actions, and entities.

    Queries always return ``[Aggregate]`` and actions always return
    ``Transaction``, whatever they declare.  Methods without a declared
    return type are dropped.
    """
    queries = {
        name: {**_mapping(spec), "returnType": {"name": "Aggregate", "isCollection": True}}
        for name, spec in _mapping(aggregate.get("queries")).items()
    }
    methods = {
        name: spec
        for name, spec in _mapping(aggregate.get("methods")).items()
        if isinstance(spec, Mapping) and spec.get("returnType")
    }
    actions = {
        name: {**_mapping(spec), "returnType": {"name": "Transaction"}}
        for name, spec in _mapping(aggregate.get("actions")).items()
    }
    return FieldGroups(
        queries=queries,
        methods=methods,
        actions=actions,
        entities=_mapping(aggregate.get("entities")),
        input_entities=_mapping(aggregate.get("inputEntities")),
    )


def system_types(groups: FieldGroups) -> dict[str, Any]:
    """The four system object types, with aggregate fields folded in."""
    return {
        "Query": {"methods": {**groups.queries, **QUERY_FIELDS}},
        "Aggregate": {"methods": {**groups.methods, **AGGREGATE_FIELDS}},
        "Transaction": {"methods": {**groups.actions, **TRANSACTION_FIELDS}},
        "Result": {"methods": dict(RESULT_FIELDS)},
    }


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def return_type_of(spec: Any) -> str | None:
    """Rendered return type of a field spec, or None if it has none."""
    if not isinstance(spec, Mapping):
        return None
    return_type = spec.get("returnType")
    if not isinstance(return_type, Mapping):
        return None
    name = return_type.get("name")
    if not name:
        return None
    return f"[{name}]" if return_type.get("isCollection") else str(name)


def renderable_fields(definition: Any) -> dict[str, Any]:
    """Fields of a type definition that have a resolvable return type."""
    methods = definition.get("methods") if isinstance(definition, Mapping) else None
    return {
        name: spec for name, spec in _mapping(methods).items() if return_type_of(spec) is not None
    }


def render_params(params: Any) -> str:
    pairs = [f"{name}:{type_name}" for name, type_name in _mapping(params).items() if type_name]
    return f"({', '.join(pairs)})" if pairs else ""


def render_field(name: str, spec: Any, *, with_params: bool = True) -> str | None:
    """Render one field line; input fields never take arguments."""
    return_type = return_type_of(spec)
    if return_type is None:
        return None
    params = render_params(spec.get("params")) if with_params else ""
    return f"{INDENT}{name}{params}: {return_type}"


def render_definition(kind: str, name: str, definition: Any) -> str | None:
    """Render one ``type``/``input`` block; None when no field survives."""
    lines = [
        line
        for field_name, spec in renderable_fields(definition).items()
        if (line := render_field(field_name, spec, with_params=kind == "type")) is not None
    ]
    if not lines:
        logger.warning("Skipping %s %s: no field declares a return type", kind, name)
        return None
    return f"{kind} {name} {{{LF}{LF.join(lines)}{LF}}}"


def render_type_defs(types: Mapping[str, Any], inputs: Mapping[str, Any]) -> str:
    blocks = [
        *(render_definition("type", name, definition) for name, definition in types.items()),
        *(render_definition("input", name, definition) for name, definition in inputs.items()),
    ]
    return (LF + LF).join(block for block in blocks if block is not None) + LF


# ---------------------------------------------------------------------------
# Dangling references
# ---------------------------------------------------------------------------


def named_type_of(spec: Any) -> str | None:
    """Bare type name a field refers to (``[Line!]`` -> ``Line``)."""
    return_type = return_type_of(spec)
    if return_type is None:
        return None
    return return_type.replace("[", "").replace("]", "").replace("!", "")


def _without_fields(definition: Mapping[str, Any], dropped: set[str]) -> dict[str, Any]:
    methods = _mapping(definition.get("methods"))
    return {
        **definition,
        "methods": {name: spec for name, spec in methods.items() if name not in dropped},
    }


def prune_dangling_fields(
    types: Mapping[str, Any], inputs: Mapping[str, Any]
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Drop fields whose type is a user entity left out of the schema text.

    Dropping a field can empty another entity, so this repeats until no
    omitted entity is referenced.  Neither input is mutated.
    """
    types, inputs = dict(types), dict(inputs)
    while True:
        omitted = {
            name
            for name, definition in {**types, **inputs}.items()
            if not renderable_fields(definition)
        }
        changed = False
        for table in (types, inputs):
            for name, definition in list(table.items()):
                dropped = {
                    field_name
                    for field_name, spec in renderable_fields(definition).items()
                    if named_type_of(spec) in omitted
                }
                if dropped:
                    logger.warning(
                        "Dropping %s from %s: refers to a type with no fields",
                        ", ".join(sorted(dropped)),
                        name,
                    )
                    table[name] = _without_fields(definition, dropped)
                    changed = True
        if not changed:
            return types, inputs


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def compile_schema(domain: Mapping[str, Any] | None, selector: Selector) -> CompiledSchema:
    """Compile the aggregate addressed by *selector* into schema text.

    Raises:
        AggregateNotFound: no aggregate at the selector path.
        RepositoryNotFound: the aggregate's repository name does not resolve.
    """
    aggregate = get_aggregate(domain, selector)
    if aggregate is None:
        message = "Aggregate was not found"
        logger.error("%s: %s", message, "/".join(selector.aggregate_path()))
        raise AggregateNotFound(message, path=list(selector.aggregate_path()))

    repository = get_repository(domain, aggregate)
    if repository is None:
        message = "Repository was not found"
        logger.error("%s: %r", message, aggregate.get("repository"))
        raise RepositoryNotFound(message, repository=aggregate.get("repository"))

    groups = collect_field_groups(aggregate)
    types = merge_defaults(system_types(groups), groups.entities, depth=TYPE_DEFS_DEPTH)
    inputs = merge_defaults(SYSTEM_INPUTS, groups.input_entities, depth=TYPE_DEFS_DEPTH)
    types, inputs = prune_dangling_fields(types, inputs)

    type_defs = render_type_defs(types, inputs)
    logger.debug("Compiled schema for %s (%d types)", selector.aggregate, len(types))

    return CompiledSchema(
        type_defs=type_defs,
        types=types,
        inputs=inputs,
        groups=groups,
        repository=repository,
    )
