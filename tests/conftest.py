"""Shared pytest fixtures and test helpers for domainapi tests."""

from __future__ import annotations

import copy
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner

from domainapi.config.settings import ApiSettings
from domainapi.dispatch.dispatcher import ResolverDispatcher
from domainapi.dispatch.transport import HttpTransport, TransportRegistry
from domainapi.domain.model import DOMAIN_DOCUMENT_TYPE, DocumentKey
from domainapi.infrastructure.runtime import Runtime
from domainapi.infrastructure.store import InMemoryDomainStore
from domainapi.plugins.manager import PluginManager

RESOLVER_HOST = "http://resolvers.test"

SAMPLE_DOMAIN: dict[str, Any] = {
    "boundedContexts": {
        "sales": {
            "aggregates": {
                "order": {
                    "versions": {
                        "1": {
                            "repository": "orders",
                            "queries": {
                                "list": {
                                    "params": {"status": "String"},
                                    "returnType": {"name": "String"},
                                    "resolver": {"uri": f"{RESOLVER_HOST}/orders/list"},
                                },
                            },
                            "methods": {
                                "total": {
                                    "returnType": {"name": "Float"},
                                    "resolver": {"uri": f"{RESOLVER_HOST}/orders/total"},
                                },
                                "lines": {
                                    "returnType": {"name": "Line", "isCollection": True},
                                    "resolver": {"uri": f"{RESOLVER_HOST}/orders/lines"},
                                },
                                "notes": {
                                    "returnType": {"name": "String"},
                                },
                                "draft": {
                                    "params": {"x": "Int"},
                                    "resolver": {"uri": f"{RESOLVER_HOST}/orders/draft"},
                                },
                            },
                            "actions": {
                                "addLine": {
                                    "params": {"sku": "String", "qty": "Int"},
                                    "returnType": {"name": "Boolean"},
                                },
                                "close": {},
                            },
                            "entities": {
                                "Line": {
                                    "methods": {
                                        "sku": {
                                            "returnType": {"name": "String"},
                                            "resolver": {"uri": f"{RESOLVER_HOST}/lines/sku"},
                                        },
                                    },
                                },
                            },
                            "inputEntities": {
                                "LineInput": {
                                    "methods": {
                                        "sku": {"returnType": {"name": "String"}},
                                        "qty": {"returnType": {"name": "Int"}},
                                    },
                                },
                            },
                        },
                    },
                },
            },
        },
    },
    "repositories": {
        "orders": {"driver": "sql", "table": "orders"},
    },
}


@pytest.fixture
def sample_domain() -> dict[str, Any]:
    """A fresh copy of the sample domain model."""
    return copy.deepcopy(SAMPLE_DOMAIN)


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ApiSettings:
    monkeypatch.delenv("DOMAINAPI_CONFIG", raising=False)
    return ApiSettings.from_cli(project_root=tmp_path)


@pytest.fixture
def store(sample_domain: dict[str, Any]) -> InMemoryDomainStore:
    """In-memory store holding the sample domain under id ``acme``."""
    return InMemoryDomainStore({(DOMAIN_DOCUMENT_TYPE, "acme"): sample_domain})


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI commands from an empty temp project root."""
    monkeypatch.delenv("DOMAINAPI_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Resolver endpoint doubles
# ---------------------------------------------------------------------------


class ResolverEndpoints:
    """Records resolver calls and answers them by URL path."""

    def __init__(self, routes: dict[str, Callable[[dict[str, Any]], httpx.Response]]) -> None:
        self.routes = routes
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.calls.append((request.url.path, body))
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "no route"})
        return route(body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def data(value: Any) -> Callable[[dict[str, Any]], httpx.Response]:
    """Route answering ``{"data": value}``."""
    return lambda _body: httpx.Response(200, json={"data": value})


def error(value: Any) -> Callable[[dict[str, Any]], httpx.Response]:
    """Route answering ``{"error": value}``."""
    return lambda _body: httpx.Response(200, json={"error": value})


def make_dispatcher(endpoints: ResolverEndpoints) -> ResolverDispatcher:
    http = HttpTransport(transport=endpoints.transport())
    return ResolverDispatcher(TransportRegistry({"http": http, "https": http}))


def make_runtime(
    settings: ApiSettings,
    store: InMemoryDomainStore,
    endpoints: ResolverEndpoints | None = None,
    plugins: PluginManager | None = None,
) -> Runtime:
    transports = None
    if endpoints is not None:
        http = HttpTransport(transport=endpoints.transport())
        transports = TransportRegistry({"http": http, "https": http})
    return Runtime(
        settings,
        store=store,
        plugins=plugins or PluginManager(),
        transports=transports,
    )


async def put_domain(store: InMemoryDomainStore, domain_id: str, domain: dict[str, Any]) -> None:
    await store.write(DocumentKey(type=DOMAIN_DOCUMENT_TYPE, id=domain_id), domain)
