"""Pluggy hook specifications for domainapi."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from domainapi.dispatch.transport import Transport

hookspec = pluggy.HookspecMarker("domainapi")
hookimpl = pluggy.HookimplMarker("domainapi")


class DomainApiHookSpec:
    """Hook specifications for the domainapi plugin system."""

    @hookspec
    def register_transports(self) -> dict[str, Transport] | None:
        """Return URI scheme -> transport mappings for resolver dispatch."""

    @hookspec
    def post_compile(
        self,
        domain_id: str,
        selector: dict[str, Any],
        type_names: list[str],
    ) -> None:
        """Called after a schema compiled successfully."""
