"""ApiService: compile and execute aggregate APIs from the Domain Store."""

from __future__ import annotations

import logging
from typing import Any

from domainapi.compiler.api import CompiledApi, build_api
from domainapi.config.logging import request_context
from domainapi.domain.errors import ApiError, DomainNotFound
from domainapi.domain.freeze import thaw
from domainapi.domain.model import DOMAIN_DOCUMENT_TYPE, DocumentKey, Selector
from domainapi.services.base import BaseService
from domainapi.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


class ApiService(BaseService):
    """Reads domain models and turns them into executable APIs."""

    # ------------------------------------------------------------------
    # Core operations (raise ApiError)
    # ------------------------------------------------------------------

    async def load_domain(self, domain_id: str) -> dict[str, Any]:
        """Read the domain model for *domain_id*; no caching."""
        logger.debug("Reading domain %s", domain_id)
        domain = await self._runtime.store.read(DocumentKey(type=DOMAIN_DOCUMENT_TYPE, id=domain_id))
        if domain is None:
            message = "Domain was not found"
            logger.error("%s: %s", message, domain_id)
            raise DomainNotFound(message, domain=domain_id)
        return domain

    async def build(
        self,
        domain_id: str,
        selector: Selector,
        *,
        warnings: list[str] | None = None,
    ) -> CompiledApi:
        """Compile *selector* from domain *domain_id*.

        Raises:
            DomainNotFound, CorruptDocument: the domain document cannot be read.
            AggregateNotFound, RepositoryNotFound, InvalidSchema
        """
        domain = await self.load_domain(domain_id)
        api = build_api(domain, selector, self._runtime.dispatcher)
        self._dispatch_event(
            "post_compile",
            {
                "domain_id": domain_id,
                "selector": selector.model_dump(by_alias=True),
                "type_names": api.schema.type_names,
            },
            warnings if warnings is not None else [],
        )
        return api

    # ------------------------------------------------------------------
    # Use cases (return ServiceResult)
    # ------------------------------------------------------------------

    async def compile_schema(self, domain_id: str, selector: Selector) -> ServiceResult:
        op = "compile_schema"
        warnings = list(self._runtime.warnings)
        with request_context(domain_id, selector):
            try:
                api = await self.build(domain_id, selector, warnings=warnings)
            except ApiError as exc:
                return ServiceResult.failure(op, exc, warnings=warnings)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "type_defs": api.type_defs,
                "types": api.schema.type_names,
                "inputs": api.schema.input_names,
            },
            warnings=warnings,
        )

    async def execute(
        self,
        domain_id: str,
        selector: Selector,
        document: str,
        *,
        variables: dict[str, Any] | None = None,
        context: Any = None,
    ) -> ServiceResult:
        """Compile, then run *document* against the compiled API.

        Field errors do not stop sibling fields: partial ``data`` is kept
        and every error is listed under ``errors``.
        """
        op = "execute"
        warnings = list(self._runtime.warnings)
        with request_context(domain_id, selector):
            try:
                api = await self.build(domain_id, selector, warnings=warnings)
            except ApiError as exc:
                return ServiceResult.failure(op, exc, warnings=warnings)
            result = await api.execute(document, variables=variables, context=context)

        errors = [error.formatted for error in result.errors or []]
        data = {"data": thaw(result.data), "errors": errors}
        if not errors:
            return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

        return ServiceResult(
            ok=False,
            op=op,
            data=data,
            warnings=warnings,
            error=ServiceError(
                code="EXECUTION_ERRORS",
                message=errors[0]["message"],
                detail={"count": len(errors)},
            ),
        )

    async def put_domain(self, domain_id: str, document: dict[str, Any]) -> ServiceResult:
        key = DocumentKey(type=DOMAIN_DOCUMENT_TYPE, id=domain_id)
        await self._runtime.store.write(key, document)
        contexts = document.get("boundedContexts")
        return ServiceResult(
            ok=True,
            op="put_domain",
            data={
                "id": domain_id,
                "bounded_contexts": sorted(contexts) if isinstance(contexts, dict) else [],
            },
        )

    async def get_domain(self, domain_id: str) -> ServiceResult:
        op = "get_domain"
        try:
            domain = await self.load_domain(domain_id)
        except ApiError as exc:
            return ServiceResult.failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"id": domain_id, "domain": domain})
