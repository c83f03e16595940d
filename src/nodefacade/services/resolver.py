"""PathService: resolve slash-separated paths into node core records.

Resolution is a left fold over path segments. Every resolved prefix is
cached under its joined key, so a repeated path costs one cache lookup
and a path sharing a prefix with an earlier one only queries the store
for the segments past the shared prefix.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import reduce

from nodefacade.domain.models import NodeCoreDetails
from nodefacade.domain.paths import ResolutionState, expand_segments, join_path, split_path
from nodefacade.services.base import STORE_ERRORS, BaseService
from nodefacade.services.result import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)


class _SegmentNotFound(Exception):
    """Raised inside the fold to stop at the first unresolvable segment."""

    def __init__(self, segment: str, parent_id: int, resolved_prefix: str) -> None:
        super().__init__(segment)
        self.segment = segment
        self.parent_id = parent_id
        self.resolved_prefix = resolved_prefix


class PathService(BaseService):
    """Path-to-node resolution backed by the path cache."""

    def resolve(self, path: str | Iterable[str]) -> ServiceResult:
        """Resolve *path* to the core record of its last segment.

        On success ``data`` holds the joined ``path`` and the
        :class:`NodeCoreDetails` of its last segment as ``node``, whether or
        not the full path was cached. A missing segment yields
        NOT_FOUND and caches nothing for that prefix or any longer one.
        """
        op = "resolve"
        segments = expand_segments(split_path(path), self._facade.settings.paths.expansions)
        if not segments:
            return self._failure(op, ErrorCode.INVALID_PATH, "Path has no segments")

        key = join_path(segments)
        cached = self._facade.caches.paths.get(key)
        if cached is not None:
            logger.debug("Path cache hit: %s", key)
            return ServiceResult(
                ok=True,
                op=op,
                data={"path": key, "node": cached},
                meta={"cached": True},
            )

        try:
            state = reduce(self._step, segments, ResolutionState())
        except _SegmentNotFound as exc:
            return self._failure(
                op,
                ErrorCode.NOT_FOUND,
                f"No node named '{exc.segment}' under parent {exc.parent_id}",
                path=key,
                segment=exc.segment,
                parent_id=exc.parent_id,
                resolved=exc.resolved_prefix,
            )
        except STORE_ERRORS as exc:
            return self._store_fault(op, exc, path=key)

        return ServiceResult(
            ok=True,
            op=op,
            data={"path": key, "node": state.node},
            meta={"cached": False},
        )

    def _step(self, state: ResolutionState, segment: str) -> ResolutionState:
        prefix = state.prefix_key(segment)
        details = self._facade.caches.paths.get(prefix)
        if details is None:
            row = self._facade.store.find_child(state.parent_id, segment)
            if row is None:
                raise _SegmentNotFound(segment, state.parent_id, state.key)
            details = NodeCoreDetails.model_validate(row)
            self._facade.caches.paths.set(prefix, details)
        return state.advance(segment, details)
