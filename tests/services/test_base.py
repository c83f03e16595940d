"""Tests for BaseService and service inheritance."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from nodefacade.infrastructure.facade import Facade
from nodefacade.services.base import BaseService
from nodefacade.services.details import DetailService
from nodefacade.services.query import QueryService
from nodefacade.services.render import RenderService
from nodefacade.services.resolver import PathService
from nodefacade.services.result import ErrorCode
from nodefacade.services.state import StateService


class TestBaseService:
    def test_facade_stored(self, facade: Facade) -> None:
        assert BaseService(facade)._facade is facade

    def test_store_fault_result(self, facade: Facade) -> None:
        exc = OperationalError("SELECT 1", {}, Exception("disk I/O error"))
        result = BaseService(facade)._store_fault("resolve", exc, path="Enterprise")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == ErrorCode.STORE_FAULT
        assert result.error.detail == {"path": "Enterprise"}


@pytest.mark.parametrize(
    "service_cls",
    [PathService, DetailService, RenderService, QueryService, StateService],
)
def test_services_extend_base(service_cls: type) -> None:
    assert issubclass(service_cls, BaseService)
