"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from domainapi.config.logging import configure_logging, request_context
from domainapi.domain.model import Selector


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    api = logging.getLogger("domainapi")
    api_level = api.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    api.setLevel(api_level)
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("domainapi").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("domainapi").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("domainapi.dispatch.dispatcher")
        log.debug("resolver.dispatch", uri="http://svc/total")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "resolver.dispatch"
        assert parsed["uri"] == "http://svc/total"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "domainapi.dispatch.dispatcher"
        assert "timestamp" in parsed

    def test_stdlib_loggers_get_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("domainapi.compiler.schema").warning("Skipping type Ghost")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Skipping type Ghost"
        assert parsed["level"] == "warning"

    def test_quiet_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("domainapi.services.api").debug("Reading domain acme")
        assert capfd.readouterr().err == ""

    def test_http_client_noise_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("httpx").info("HTTP Request: POST http://svc")
        logging.getLogger("httpcore").debug("connect_tcp.started")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1


class TestRequestContext:
    def test_records_carry_the_addressed_aggregate(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        selector = Selector(bounded_context="sales", aggregate="order", version="1")

        with request_context("acme", selector):
            logging.getLogger("domainapi.compiler.schema").warning("Skipping type Ghost")
        logging.getLogger("domainapi.compiler.schema").warning("Outside")

        first, second = (json.loads(line) for line in capfd.readouterr().err.splitlines())
        assert first["domain"] == "acme"
        assert first["bounded_context"] == "sales"
        assert first["aggregate"] == "order"
        assert first["version"] == "1"
        assert "domain" not in second
