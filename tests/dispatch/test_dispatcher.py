"""Tests for ResolverDispatcher."""

from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from domainapi.dispatch.dispatcher import ResolverDispatcher, resolver_uri
from domainapi.dispatch.transport import HttpTransport, TransportRegistry
from domainapi.domain.errors import (
    ResolutionApplicationError,
    ResolutionTransportError,
    ResolverNotFound,
)
from domainapi.domain.freeze import freeze
from domainapi.domain.transaction import start
from tests.conftest import RESOLVER_HOST, ResolverEndpoints, data, error, make_dispatcher

SPEC = {"returnType": {"name": "String"}, "resolver": {"uri": f"{RESOLVER_HOST}/field"}}


def _dispatcher_for(handler) -> ResolverDispatcher:
    http = HttpTransport(transport=httpx.MockTransport(handler))
    return ResolverDispatcher(TransportRegistry({"http": http}))


class TestResolverUri:
    def test_present(self) -> None:
        assert resolver_uri(SPEC) == f"{RESOLVER_HOST}/field"

    @pytest.mark.parametrize(
        "spec",
        [None, {}, {"resolver": None}, {"resolver": {}}, {"resolver": {"uri": ""}}],
    )
    def test_absent(self, spec: Any) -> None:
        assert resolver_uri(spec) is None


@pytest.mark.asyncio
class TestDispatch:
    async def test_returns_data(self) -> None:
        endpoints = ResolverEndpoints({"/field": data({"value": 1})})
        dispatcher = make_dispatcher(endpoints)

        value = await dispatcher.dispatch(SPEC, {"id": "a"}, {"x": 1}, {"user": "u"})

        assert value == {"value": 1}
        assert len(endpoints.calls) == 1
        assert endpoints.calls[0] == (
            "/field",
            {"obj": {"id": "a"}, "args": {"x": 1}, "ctxt": {"user": "u"}},
        )

    async def test_missing_data_is_none(self) -> None:
        dispatcher = make_dispatcher(
            ResolverEndpoints({"/field": lambda _b: httpx.Response(200, json={})})
        )
        assert await dispatcher.dispatch(SPEC, {}, {}, None) is None

    async def test_only_allow_listed_context_keys_are_sent(self) -> None:
        endpoints = ResolverEndpoints({"/field": data(None)})
        context = SimpleNamespace(ip="10.0.0.1", method="POST", authorization="Bearer t")

        await make_dispatcher(endpoints).dispatch(SPEC, {}, {}, context)

        assert endpoints.calls[0][1]["ctxt"] == {"ip": "10.0.0.1", "method": "POST"}

    async def test_frozen_receivers_are_serialized(self) -> None:
        endpoints = ResolverEndpoints({"/field": data(None)})
        txn = start(freeze({"table": "t"}), {"user": "u"}, id_factory=lambda: "t1")

        await make_dispatcher(endpoints).dispatch(SPEC, txn, freeze({"a": [1]}), None)

        body = endpoints.calls[0][1]
        assert body["obj"] == {
            "id": "t1",
            "repository": {"table": "t"},
            "ctxt": {"user": "u"},
            "tasks": [],
        }
        assert body["args"] == {"a": [1]}

    async def test_error_payload_is_application_error(self) -> None:
        dispatcher = make_dispatcher(ResolverEndpoints({"/field": error("x")}))

        with pytest.raises(ResolutionApplicationError) as excinfo:
            await dispatcher.dispatch(SPEC, {}, {}, None)

        assert excinfo.value.payload == "x"
        assert str(excinfo.value) == "x"

    async def test_structured_error_payload_kept(self) -> None:
        payload = {"code": 409, "reasons": ["stale"]}
        dispatcher = make_dispatcher(ResolverEndpoints({"/field": error(payload)}))

        with pytest.raises(ResolutionApplicationError) as excinfo:
            await dispatcher.dispatch(SPEC, {}, {}, None)

        assert excinfo.value.payload == payload

    async def test_falsy_error_returns_data(self) -> None:
        route = lambda _b: httpx.Response(200, json={"error": None, "data": 3})  # noqa: E731
        dispatcher = make_dispatcher(ResolverEndpoints({"/field": route}))
        assert await dispatcher.dispatch(SPEC, {}, {}, None) == 3

    async def test_connection_failure_is_transport_error(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ResolutionTransportError, match="Unexpected error while resolving"):
            await _dispatcher_for(refuse).dispatch(SPEC, {}, {}, None)

    async def test_non_2xx_is_transport_error(self) -> None:
        dispatcher = _dispatcher_for(lambda _r: httpx.Response(500, json={"data": 1}))
        with pytest.raises(ResolutionTransportError):
            await dispatcher.dispatch(SPEC, {}, {}, None)

    async def test_non_json_body_is_transport_error(self) -> None:
        dispatcher = _dispatcher_for(lambda _r: httpx.Response(200, text="<html>"))
        with pytest.raises(ResolutionTransportError):
            await dispatcher.dispatch(SPEC, {}, {}, None)

    async def test_non_object_body_is_transport_error(self) -> None:
        dispatcher = _dispatcher_for(lambda _r: httpx.Response(200, json=[1, 2]))
        with pytest.raises(ResolutionTransportError):
            await dispatcher.dispatch(SPEC, {}, {}, None)

    async def test_unknown_scheme_is_transport_error(self) -> None:
        spec = {"resolver": {"uri": "grpc://svc/field"}}
        with pytest.raises(ResolutionTransportError):
            await make_dispatcher(ResolverEndpoints({})).dispatch(spec, {}, {}, None)

    async def test_unexpected_transport_exception_is_wrapped(self) -> None:
        class Broken:
            async def execute(self, uri: str, payload: Any) -> Any:
                raise RuntimeError("boom")

        dispatcher = ResolverDispatcher(TransportRegistry({"http": Broken()}))
        with pytest.raises(ResolutionTransportError) as excinfo:
            await dispatcher.dispatch(SPEC, {}, {}, None)
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    async def test_no_uri(self) -> None:
        with pytest.raises(ResolverNotFound):
            await make_dispatcher(ResolverEndpoints({})).dispatch({}, {}, {}, None)


@pytest.mark.asyncio
class TestBind:
    async def test_bound_resolver_dispatches(self) -> None:
        endpoints = ResolverEndpoints({"/field": data("ok")})
        resolve = make_dispatcher(endpoints).bind("field", SPEC)

        assert await resolve({"id": 1}, {}, None) == "ok"
        assert len(endpoints.calls) == 1

    async def test_unbound_field_fails_without_network(self) -> None:
        endpoints = ResolverEndpoints({})
        resolve = make_dispatcher(endpoints).bind("notes", {"returnType": {"name": "String"}})

        with pytest.raises(ResolverNotFound) as excinfo:
            resolve({}, {}, None)

        assert excinfo.value.detail == {"field": "notes"}
        assert endpoints.calls == []
