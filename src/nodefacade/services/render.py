"""RenderService: depth-limited recursive JSON projections of nodes.

The single-node projection of every node is cached as JSON text by id.
Children are loaded through :class:`DetailService`, hidden children are
skipped, and each survivor is rendered one level shallower.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from nodefacade.domain.models import NodeDetails
from nodefacade.services.base import BaseService
from nodefacade.services.contracts import NodeProjection
from nodefacade.services.details import DetailService
from nodefacade.services.result import ErrorCode, ServiceError, ServiceResult

logger = logging.getLogger(__name__)


class _RenderAborted(Exception):
    """A child load failed somewhere below the root; carries its error."""

    def __init__(self, error: ServiceError) -> None:
        super().__init__(error.message)
        self.error = error


class RenderService(BaseService):
    """Projection rendering backed by the rendition cache."""

    def render(self, details: NodeDetails, depth: int) -> ServiceResult:
        """Render *details* with up to *depth* levels of children.

        ``depth == 0`` returns the single-node projection and never asks
        the store for children.
        """
        op = "render"
        rejected = self._check_depth(op, depth)
        if rejected is not None:
            return rejected
        try:
            projection = self._render(details, depth)
        except _RenderAborted as exc:
            return ServiceResult(ok=False, op=op, error=exc.error)
        return ServiceResult(ok=True, op=op, data={"node": projection, "depth": depth})

    def render_path(self, path: str | Iterable[str], depth: int | None = None) -> ServiceResult:
        """Resolve *path*, load its node, and render it.

        *depth* defaults to ``[traversal] default_depth``. The depth is
        checked before any store access.
        """
        op = "render_path"
        if depth is None:
            depth = self._facade.settings.traversal.default_depth
        rejected = self._check_depth(op, depth)
        if rejected is not None:
            return rejected

        loaded = DetailService(self._facade).load_by_path(path)
        if not loaded.ok:
            return loaded.model_copy(update={"op": op})

        rendered = self.render(loaded.data["details"], depth)
        data = {"path": loaded.data["path"], **rendered.data} if rendered.ok else {}
        return rendered.model_copy(update={"op": op, "data": data})

    def project(self, details: NodeDetails) -> dict[str, Any]:
        """Single-node projection of *details*, served from cache when possible."""
        node_id = details.core.data_id
        cached = self._facade.caches.renditions.get(node_id)
        if cached is None:
            cached = NodeProjection.from_details(details).model_dump_json(by_alias=True)
            self._facade.caches.renditions.set(node_id, cached)
        return json.loads(cached)

    def _check_depth(self, op: str, depth: int) -> ServiceResult | None:
        max_depth = self._facade.settings.traversal.max_depth
        if depth < 0:
            return self._failure(
                op, ErrorCode.INVALID_DEPTH, f"Depth must not be negative, got {depth}", depth=depth
            )
        if depth > max_depth:
            return self._failure(
                op,
                ErrorCode.DEPTH_EXCEEDED,
                f"Depth {depth} exceeds the maximum of {max_depth}",
                depth=depth,
                max_depth=max_depth,
            )
        return None

    def _render(self, details: NodeDetails, depth: int) -> dict[str, Any]:
        projection = self.project(details)
        if depth == 0:
            return projection

        loaded = DetailService(self._facade).load_children(details)
        if not loaded.ok:
            assert loaded.error is not None
            raise _RenderAborted(loaded.error)

        hidden_prefix = self._facade.settings.traversal.hidden_prefix
        children = [
            self._render(child, depth - 1)
            for child in loaded.data["children"]
            if not (hidden_prefix and child.core.name.startswith(hidden_prefix))
        ]
        children = [child for child in children if child]
        if children:
            projection["children"] = children
        return projection
