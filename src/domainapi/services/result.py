"""ServiceResult and ServiceError: the contract between services and the CLI.

Core functions raise :class:`~domainapi.domain.errors.ApiError`; services
catch them at the boundary and report them as a failed ServiceResult.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from domainapi.domain.errors import ApiError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: ApiError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=dict(exc.detail))


class ServiceResult(BaseModel):
    """Return type of every service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"compile_schema"``).
        data: Operation-specific payload.  May be present on failure
            (partial GraphQL results).
        warnings: Non-fatal issues, such as plugin failures.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(cls, op: str, exc: ApiError, *, warnings: list[str] | None = None) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError.from_exception(exc),
            warnings=warnings or [],
        )
