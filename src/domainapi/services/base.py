"""BaseService: shared foundation for domainapi services."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from domainapi.infrastructure.runtime import Runtime

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Every service receives the process :class:`Runtime` (store, plugins,
    dispatcher) at construction time.
    """

    def __init__(self, runtime: Runtime) -> None:
        self._runtime = runtime

    def _dispatch_event(self, hook_name: str, payload: dict[str, Any], warnings: list[str]) -> None:
        """Fire a plugin hook.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        failures = self._runtime.plugins.dispatch(hook_name, payload)
        if failures:
            logger.debug("Hook %s reported %d failure(s)", hook_name, len(failures))
        warnings.extend(failures)
