"""BaseService: abstract foundation for all nodefacade services.

Every service receives a :class:`Facade` at construction time. The
facade provides the node store, the cache layer, and the settings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from nodefacade.services.result import ErrorCode, ServiceError, ServiceResult

if TYPE_CHECKING:
    from nodefacade.infrastructure.facade import Facade

logger = logging.getLogger(__name__)

# Failures reading the store: driver errors and rows that do not fit the records.
STORE_ERRORS: tuple[type[Exception], ...] = (SQLAlchemyError, ValidationError)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class PathService(BaseService):
            def resolve(self, path: str) -> ServiceResult:
                node = self._facade.caches.paths.get(path)
                ...
    """

    def __init__(self, facade: Facade) -> None:
        self._facade = facade

    @staticmethod
    def _failure(
        op: str,
        code: ErrorCode,
        message: str,
        **detail: Any,
    ) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )

    def _store_fault(self, op: str, exc: Exception, **detail: Any) -> ServiceResult:
        """Convert a store exception into a STORE_FAULT result. Never retried."""
        logger.warning("Store fault during %s: %s", op, exc)
        return self._failure(
            op,
            ErrorCode.STORE_FAULT,
            f"Store call failed: {type(exc).__name__}",
            **detail,
        )
