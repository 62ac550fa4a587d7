"""Resolver dispatcher: one remote call per field resolution.

Wire contract (request body)::

    {"obj": <receiver>, "args": <field arguments>, "ctxt": <filtered context>}

The response body is either ``{"data": ...}`` or ``{"error": ...}``.
Error payloads are raised as :class:`ResolutionApplicationError` with the
payload untouched; everything else that goes wrong on the way is a
:class:`ResolutionTransportError`.  Nothing is retried or cached.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import structlog

from domainapi.domain.context import filter_context
from domainapi.domain.errors import (
    ResolutionApplicationError,
    ResolutionTransportError,
    ResolverError,
    ResolverNotFound,
)
from domainapi.domain.freeze import thaw
from domainapi.dispatch.transport import TRANSPORT_ERROR_MESSAGE, TransportRegistry

log = structlog.get_logger(__name__)

# Engine-neutral resolver: (receiver, arguments, request context) -> value.
Resolver = Callable[[Any, Mapping[str, Any], Any], Any]


def resolver_uri(spec: Any) -> str | None:
    """The ``resolver.uri`` declared on a field spec, if any."""
    if not isinstance(spec, Mapping):
        return None
    resolver = spec.get("resolver")
    if not isinstance(resolver, Mapping):
        return None
    uri = resolver.get("uri")
    return str(uri) if uri else None


class ResolverDispatcher:
    """Turns field specs into resolvers backed by remote endpoints."""

    def __init__(self, transports: TransportRegistry | None = None) -> None:
        self._transports = transports or TransportRegistry.default()

    @property
    def transports(self) -> TransportRegistry:
        return self._transports

    def bind(self, field_name: str, spec: Any) -> Resolver:
        """Build the resolver for one field.

        A field without ``resolver.uri`` still gets a resolver; it fails
        every time it is invoked.
        """
        if resolver_uri(spec) is None:

            def unresolved(obj: Any, args: Mapping[str, Any], context: Any) -> Any:
                raise ResolverNotFound("Resolver not found", field=field_name)

            return unresolved

        async def resolve(obj: Any, args: Mapping[str, Any], context: Any) -> Any:
            return await self.dispatch(spec, obj, args, context)

        return resolve

    async def dispatch(
        self,
        spec: Any,
        obj: Any,
        args: Mapping[str, Any] | None,
        context: Any,
    ) -> Any:
        uri = resolver_uri(spec)
        if uri is None:
            raise ResolverNotFound("Resolver not found")

        payload = {
            "obj": thaw(obj),
            "args": thaw(args or {}),
            "ctxt": thaw(filter_context(context)),
        }
        transport = self._transports.for_uri(uri)
        log.debug("resolver.dispatch", uri=uri)

        try:
            body = await transport.execute(uri, payload)
        except ResolverError:
            raise
        except Exception as exc:
            log.error("resolver.transport_failed", uri=uri, error=exc.__class__.__name__)
            raise ResolutionTransportError(TRANSPORT_ERROR_MESSAGE, uri=uri) from exc

        if not isinstance(body, Mapping):
            log.error("resolver.malformed_body", uri=uri)
            raise ResolutionTransportError(TRANSPORT_ERROR_MESSAGE, uri=uri)

        error = body.get("error")
        if error:
            log.debug("resolver.application_error", uri=uri)
            raise ResolutionApplicationError(error)

        return body.get("data")
