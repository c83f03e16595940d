"""Facade: the single dependency injected into every service.

Owns the store engine, the node repository, the cache layer, and the
worker pool. Constructed once per process from :class:`FacadeSettings`
and stored in the CLI's :class:`AppContext`. Services receive it via
their :class:`BaseService` constructor.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from nodefacade.infrastructure.cache import CacheLayer
from nodefacade.infrastructure.database.compiler import QueryCompiler
from nodefacade.infrastructure.database.engine import create_db_engine
from nodefacade.infrastructure.pool import StorePool
from nodefacade.infrastructure.repositories.nodes import NodeStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine

    from nodefacade.config.settings import FacadeSettings

logger = logging.getLogger(__name__)


class Facade:
    """Holder for the store, caches, and pool shared by all services."""

    def __init__(
        self,
        settings: FacadeSettings,
        *,
        engine: Engine | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._engine: Engine = engine or create_db_engine(
            settings.store.url,
            echo=settings.store.echo,
            schema_name=settings.store.schema_name,
        )
        self._store = NodeStore(self._engine)
        self._caches = CacheLayer.from_config(settings.cache, clock=clock)
        self._compiler = QueryCompiler(strict_columns=settings.query.strict_columns)
        self._pool = StorePool(settings.store.pool_size)
        logger.debug(
            "Facade %s ready (pool=%d)",
            settings.facade.system_identifier,
            settings.store.pool_size,
        )

    @property
    def settings(self) -> FacadeSettings:
        """The resolved settings for this facade."""
        return self._settings

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def store(self) -> NodeStore:
        return self._store

    @property
    def caches(self) -> CacheLayer:
        return self._caches

    @property
    def compiler(self) -> QueryCompiler:
        return self._compiler

    @property
    def pool(self) -> StorePool:
        return self._pool

    def close(self) -> None:
        """Stop the worker pool and release pooled connections."""
        self._pool.shutdown()
        self._engine.dispose()
