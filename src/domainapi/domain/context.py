"""Request context projection.

Only allow-listed keys ever reach a Transaction or a resolver endpoint;
everything else on the inbound context (headers, secrets, sessions) is
dropped here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from domainapi.domain.freeze import FrozenDict, freeze

CONTEXT_KEYS: tuple[str, ...] = (
    "baseUrl",
    "cookies",
    "hostname",
    "ip",
    "method",
    "originalUrl",
    "params",
    "path",
    "protocol",
    "query",
    "route",
    "user",
)

_MISSING = object()


def filter_context(raw: Any) -> FrozenDict:
    """Project *raw* down to :data:`CONTEXT_KEYS` as an immutable snapshot.

    *raw* may be a mapping or any object exposing the keys as attributes.
    Keys absent on *raw* are absent from the snapshot.
    """
    if raw is None:
        return FrozenDict()

    picked: dict[str, Any] = {}
    for key in CONTEXT_KEYS:
        if isinstance(raw, Mapping):
            value = raw.get(key, _MISSING)
        else:
            value = getattr(raw, key, _MISSING)
        if value is not _MISSING:
            picked[key] = value
    return freeze(picked)
