"""StateService: report the facade identity and repository schema version."""

from __future__ import annotations

from nodefacade import __version__
from nodefacade.services.base import STORE_ERRORS, BaseService
from nodefacade.services.contracts import StateData, dump_validated
from nodefacade.services.result import ServiceResult


class StateService(BaseService):
    def state(self) -> ServiceResult:
        op = "state"
        try:
            schema_version = self._facade.store.schema_version()
        except STORE_ERRORS as exc:
            return self._store_fault(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                StateData,
                {
                    "system_identifier": self._facade.settings.facade.system_identifier,
                    "facade_version": __version__,
                    "schema_version": schema_version,
                    "pool_size": self._facade.pool.max_workers,
                    "caches": self._facade.caches.stats(),
                },
            ),
        )
