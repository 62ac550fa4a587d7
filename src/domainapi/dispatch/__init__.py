"""Remote resolver dispatch over pluggable transports."""

from domainapi.dispatch.dispatcher import Resolver, ResolverDispatcher
from domainapi.dispatch.transport import HttpTransport, Transport, TransportRegistry

__all__ = ["HttpTransport", "Resolver", "ResolverDispatcher", "Transport", "TransportRegistry"]
