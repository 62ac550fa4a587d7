"""AppContext: shared Click context for all commands.

Created once by the root group.  The Runtime (store, plugins) is
created lazily so ``--help`` and ``--version`` stay side-effect free.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

import click

from domainapi.output.formatters import format_result

if TYPE_CHECKING:
    from domainapi.config.settings import ApiSettings
    from domainapi.infrastructure.runtime import Runtime
    from domainapi.services.result import ServiceResult


class AppContext:
    """Shared context passed to subcommands via ``@click.pass_obj``."""

    def __init__(self, settings: ApiSettings) -> None:
        self.settings = settings
        self._runtime: Runtime | None = None

        from domainapi.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def runtime(self) -> Runtime:
        if self._runtime is None:
            from domainapi.infrastructure.runtime import Runtime

            self._runtime = Runtime(self.settings)
        return self._runtime

    def run(self, coro: Coroutine[Any, Any, ServiceResult]) -> ServiceResult:
        """Drive a service coroutine to completion."""
        try:
            return asyncio.run(coro)
        finally:
            if self._runtime is not None:
                self._runtime.close()

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; failures go to stderr and exit with code 1."""
        output = format_result(result, json_output=self.settings.json_output)
        if result.ok:
            click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
