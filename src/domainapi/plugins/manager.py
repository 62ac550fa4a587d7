"""Plugin discovery, loading, and hook dispatch."""

from __future__ import annotations

import inspect
import logging
from typing import Any

import pluggy

from domainapi.dispatch.transport import TransportRegistry
from domainapi.plugins.hookspecs import DomainApiHookSpec

PROJECT_NAME = "domainapi"
ENTRY_POINT_GROUP = "domainapi.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, registration, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(DomainApiHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load plugins from the ``domainapi.plugins`` entry-point group.

        Returns the names of all registered plugins.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_plugin_classes()
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Hook helpers
    # ------------------------------------------------------------------

    def install_transports(self, registry: TransportRegistry) -> list[str]:
        """Add plugin-provided transports to *registry*.

        Returns warnings for contributions that could not be installed.
        """
        warnings: list[str] = []
        for plugin in self._pm.get_plugins():
            name = self._pm.get_name(plugin) or plugin.__class__.__name__
            hook = getattr(plugin, "register_transports", None)
            if hook is None:
                continue
            try:
                transports = hook()
            except Exception:
                logger.warning("Failed to collect transports from plugin %s", name, exc_info=True)
                warnings.append(f"Plugin {name} failed to register transports")
                continue
            if transports is None:
                continue
            if not isinstance(transports, dict):
                logger.warning("Plugin %s returned non-dict transport registrations", name)
                warnings.append(f"Plugin {name} returned invalid transports")
                continue
            for scheme, transport in transports.items():
                try:
                    registry.register(scheme, transport)
                except TypeError:
                    logger.warning(
                        "Skipping transport %r from plugin %s", scheme, name, exc_info=True
                    )
                    warnings.append(f"Plugin {name} transport {scheme!r} skipped")
        return warnings

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> list[str]:
        """Call *hook_name* on every plugin; failures become warnings."""
        warnings: list[str] = []
        caller = getattr(self._pm.hook, hook_name)
        try:
            caller(**payload)
        except Exception:
            logger.warning("Hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
        return warnings

    def _instantiate_plugin_classes(self) -> None:
        """Replace plugin classes registered from entry points with instances."""
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s", plugin_name, exc_info=True
                )
                continue
            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
