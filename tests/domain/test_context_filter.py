"""Tests for request context filtering."""

from types import SimpleNamespace

from domainapi.domain.context import CONTEXT_KEYS, filter_context
from domainapi.domain.freeze import FrozenDict


class TestFilterContext:
    def test_keeps_allowed_and_drops_secrets(self) -> None:
        snapshot = filter_context({"hostname": "h", "secret": "s"})
        assert snapshot == {"hostname": "h"}
        assert "secret" not in snapshot

    def test_snapshot_is_immutable(self) -> None:
        snapshot = filter_context({"user": {"roles": ["admin"]}})
        assert isinstance(snapshot, FrozenDict)
        assert snapshot["user"]["roles"] == ("admin",)

    def test_all_allowed_keys(self) -> None:
        raw = {key: key.upper() for key in CONTEXT_KEYS}
        raw["headers"] = {"authorization": "Bearer t"}
        snapshot = filter_context(raw)
        assert set(snapshot) == set(CONTEXT_KEYS)

    def test_attribute_objects(self) -> None:
        request = SimpleNamespace(hostname="api.test", ip="10.0.0.1", session="s3cr3t")
        assert filter_context(request) == {"hostname": "api.test", "ip": "10.0.0.1"}

    def test_none_context(self) -> None:
        assert filter_context(None) == {}
