"""Tests for the Facade dependency holder."""

from __future__ import annotations

from nodefacade.config.settings import FacadeSettings
from nodefacade.infrastructure.facade import Facade
from nodefacade.infrastructure.repositories.nodes import NodeStore


class TestFacade:
    def test_builds_engine_from_settings(self, store_url: str) -> None:
        settings = FacadeSettings(
            store={"url": store_url, "pool_size": 3},
            cache={"path_ttl": 42},
            query={"strict_columns": True},
        )
        facade = Facade(settings)
        try:
            assert str(facade.engine.url) == store_url
            assert isinstance(facade.store, NodeStore)
            assert facade.pool.max_workers == 3
            assert facade.caches.paths.ttl == 42
            assert facade.settings is settings
        finally:
            facade.close()

    def test_uses_injected_engine(self, facade: Facade, db_engine: object) -> None:
        assert facade.engine is db_engine
