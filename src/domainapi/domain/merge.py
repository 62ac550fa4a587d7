"""Default-wins merge shared by the schema text and the resolver map.

Both outputs go through :func:`merge_defaults` so the fields a user can
and cannot override never diverge between the two.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# type name -> "methods" -> field name; the field spec itself is atomic.
TYPE_DEFS_DEPTH = 3
# type name -> field name; resolvers are atomic.
RESOLVERS_DEPTH = 2


def merge_defaults(
    defaults: Mapping[str, Any],
    overrides: Mapping[str, Any] | None,
    *,
    depth: int | None = None,
) -> dict[str, Any]:
    """Merge *overrides* underneath *defaults*.

    For every key the *defaults* side wins when it defines a value.  When
    both sides hold mappings and *depth* allows, they are merged
    recursively with the same rule.  Keys only present in *overrides* are
    appended after the default keys, in their original order.

    *depth* bounds the recursion: at depth 1 a defined default replaces the
    override wholesale.  ``None`` recurses without limit.

    Neither input is mutated.
    """
    overrides = overrides or {}
    result: dict[str, Any] = {}

    for key, value in defaults.items():
        if value is None:
            if key in overrides:
                result[key] = overrides[key]
            continue
        other = overrides.get(key)
        can_recurse = depth is None or depth > 1
        if can_recurse and isinstance(value, Mapping) and isinstance(other, Mapping):
            result[key] = merge_defaults(
                value, other, depth=None if depth is None else depth - 1
            )
        elif isinstance(value, Mapping):
            result[key] = dict(value)
        else:
            result[key] = value

    for key, value in overrides.items():
        if key not in result:
            result[key] = value

    return result
