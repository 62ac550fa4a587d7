"""Error kinds raised by the compiler and at field resolution time.

Compile errors abort the whole request; resolver errors are scoped to
the single field being resolved.
"""

from __future__ import annotations

import json
from typing import Any


class ApiError(Exception):
    """Base class for all domainapi errors."""

    code = "API_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


# --- Compile time ---


class CompileError(ApiError):
    code = "COMPILE_ERROR"


class DomainNotFound(CompileError):
    code = "DOMAIN_NOT_FOUND"


class AggregateNotFound(CompileError):
    code = "AGGREGATE_NOT_FOUND"


class RepositoryNotFound(CompileError):
    code = "REPOSITORY_NOT_FOUND"


class InvalidSchema(CompileError):
    """The rendered schema text was rejected by the execution engine."""

    code = "INVALID_SCHEMA"


# --- Domain Store ---


class CorruptDocument(ApiError):
    """A stored document could not be decoded as a JSON object."""

    code = "CORRUPT_DOCUMENT"


# --- Resolution time ---


class ResolverError(ApiError):
    code = "RESOLVER_ERROR"


class ResolverNotFound(ResolverError):
    """The field is declared but has no resolver endpoint."""

    code = "RESOLVER_NOT_FOUND"


class ResolutionTransportError(ResolverError):
    """The remote call failed before an application response was decoded."""

    code = "RESOLUTION_TRANSPORT_ERROR"


class ResolutionApplicationError(ResolverError):
    """The remote resolver answered with an ``error`` payload.

    ``payload`` is the remote value, untouched.  The message is the
    payload itself when it is a string.
    """

    code = "RESOLUTION_APPLICATION_ERROR"

    def __init__(self, payload: Any) -> None:
        if isinstance(payload, str):
            message = payload
        else:
            message = json.dumps(payload, default=str, separators=(",", ":"))
        super().__init__(message)
        self.payload = payload
