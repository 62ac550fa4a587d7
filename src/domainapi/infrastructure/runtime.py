"""Runtime: wires settings, Domain Store, plugins, and dispatcher.

Services receive a Runtime at construction time.  The store is opened
lazily so ``--help`` never touches the database.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from domainapi.dispatch.dispatcher import ResolverDispatcher
from domainapi.dispatch.transport import TransportRegistry
from domainapi.infrastructure.store import DomainStore, InMemoryDomainStore, JsonFileDomainStore
from domainapi.plugins.manager import PluginManager

if TYPE_CHECKING:
    from domainapi.config.settings import ApiSettings
    from domainapi.infrastructure.database.engine import SqlDomainStore

logger = logging.getLogger(__name__)


class Runtime:
    """Shared collaborators for one process."""

    def __init__(
        self,
        settings: ApiSettings,
        *,
        store: DomainStore | None = None,
        plugins: PluginManager | None = None,
        transports: TransportRegistry | None = None,
    ) -> None:
        self.settings = settings
        self._store = store
        self._engine_store: SqlDomainStore | None = None
        self.plugins = plugins or PluginManager()
        if plugins is None:
            self.plugins.discover_and_load()

        registry = transports or TransportRegistry.default(
            timeout=settings.dispatch.timeout,
            verify=settings.dispatch.verify_tls,
        )
        self.warnings: list[str] = self.plugins.install_transports(registry)
        self.dispatcher = ResolverDispatcher(registry)

    @property
    def store(self) -> DomainStore:
        """The configured Domain Store (opened on first access)."""
        if self._store is None:
            self._store = self._open_store()
        return self._store

    def _open_store(self) -> DomainStore:
        backend = self.settings.store.backend
        path = self.settings.store_path()
        logger.debug("Opening %s store at %s", backend, path)
        if backend == "memory":
            return InMemoryDomainStore()
        if backend == "json":
            return JsonFileDomainStore(path)

        from domainapi.infrastructure.database.engine import SqlDomainStore, init_database

        sql_store = SqlDomainStore(init_database(path))
        self._engine_store = sql_store
        return sql_store

    def close(self) -> None:
        if self._engine_store is not None:
            self._engine_store.close()
            self._engine_store = None
