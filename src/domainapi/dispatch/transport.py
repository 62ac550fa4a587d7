"""Transports carry one resolver envelope to a remote endpoint.

A transport takes a URI and a JSON-compatible payload and returns the
decoded response body.  Any failure before a body is decoded must be
raised as :class:`ResolutionTransportError`.  Transports are selected
by URI scheme; ``http`` and ``https`` are built in, plugins may add
more through the ``register_transports`` hook.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit

import httpx

from domainapi.domain.errors import ResolutionTransportError

logger = logging.getLogger(__name__)

TRANSPORT_ERROR_MESSAGE = "Unexpected error while resolving"


@runtime_checkable
class Transport(Protocol):
    async def execute(self, uri: str, payload: Mapping[str, Any]) -> Any:
        """POST *payload* to *uri* and return the decoded body."""
        ...


class HttpTransport:
    """JSON-over-HTTP POST using httpx.

    One request per call, no retries.  ``timeout=None`` disables the
    client timeout entirely.  ``transport`` replaces the network layer
    (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._verify = verify
        self._transport = transport

    async def execute(self, uri: str, payload: Mapping[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify,
                transport=self._transport,
            ) as client:
                response = await client.post(uri, json=dict(payload))
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as exc:
            logger.error("Resolver request to %s failed: %s", uri, exc.__class__.__name__)
            raise ResolutionTransportError(TRANSPORT_ERROR_MESSAGE, uri=uri) from exc
        except ValueError as exc:
            logger.error("Resolver at %s returned a body that is not JSON", uri)
            raise ResolutionTransportError(TRANSPORT_ERROR_MESSAGE, uri=uri) from exc


class TransportRegistry:
    """Scheme -> transport lookup."""

    def __init__(self, transports: Mapping[str, Transport] | None = None) -> None:
        self._transports: dict[str, Transport] = {}
        for scheme, transport in (transports or {}).items():
            self.register(scheme, transport)

    @classmethod
    def default(cls, *, timeout: float | None = None, verify: bool = True) -> TransportRegistry:
        http = HttpTransport(timeout=timeout, verify=verify)
        return cls({"http": http, "https": http})

    def register(self, scheme: str, transport: Transport) -> None:
        if not isinstance(transport, Transport):
            msg = f"Transport for scheme {scheme!r} has no async execute(uri, payload)"
            raise TypeError(msg)
        self._transports[scheme.lower()] = transport
        logger.debug("Registered transport for scheme %s", scheme)

    @property
    def schemes(self) -> list[str]:
        return sorted(self._transports)

    def for_uri(self, uri: str) -> Transport:
        scheme = urlsplit(uri).scheme.lower()
        transport = self._transports.get(scheme)
        if transport is None:
            raise ResolutionTransportError(TRANSPORT_ERROR_MESSAGE, uri=uri, scheme=scheme)
        return transport
