"""structlog configuration for domainapi.

Two output modes:
- Human (default): console-rendered, colored when stderr is a TTY
- JSON (--log-json): structured JSON lines to stderr

Every record emitted while a request is being compiled or executed
carries the domain and aggregate it belongs to (see ``request_context``).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from domainapi.domain.model import Selector

PACKAGE_LOGGER = "domainapi"

# Request lines from the HTTP client would echo resolver URIs per field.
QUIET_LOGGERS = ("httpx", "httpcore")


@contextmanager
def request_context(domain_id: str, selector: Selector) -> Iterator[None]:
    """Bind the addressed domain and aggregate onto every log record."""
    with structlog.contextvars.bound_contextvars(
        domain=domain_id,
        bounded_context=selector.bounded_context,
        aggregate=selector.aggregate,
        version=selector.version,
    ):
        yield


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib records through one stderr handler.

    Args:
        verbose: DEBUG for the ``domainapi`` logger. When False, WARNING+.
        log_json: Use JSON renderer instead of console renderer.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
