"""ServiceResult and ServiceError: the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
Exceptions raised below the service boundary (store faults, parse
errors, missing path segments) are converted here and never escape.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Error codes carried by :class:`ServiceError`."""

    NOT_FOUND = "NOT_FOUND"
    STORE_FAULT = "STORE_FAULT"
    PARSE_ERROR = "PARSE_ERROR"
    UNSUPPORTED_COLUMN = "UNSUPPORTED_COLUMN"
    INVALID_PATH = "INVALID_PATH"
    INVALID_DEPTH = "INVALID_DEPTH"
    DEPTH_EXCEEDED = "DEPTH_EXCEEDED"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"resolve"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (cache hits, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
