"""DetailService: assemble core, version, and attribute rows per node.

Each aggregate is an immutable :class:`NodeDetails` snapshot cached by
node id. A failure of any constituent query fails the whole load;
partial aggregates are never returned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from nodefacade.domain.models import (
    NodeAttributeDetails,
    NodeCoreDetails,
    NodeDetails,
    NodeVersionDetails,
)
from nodefacade.services.base import STORE_ERRORS, BaseService
from nodefacade.services.resolver import PathService
from nodefacade.services.result import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)


class _NodeMissing(Exception):
    def __init__(self, node_id: int) -> None:
        super().__init__(node_id)
        self.node_id = node_id


class DetailService(BaseService):
    """Detail aggregation backed by the detail cache."""

    def load_by_id(self, node_id: int) -> ServiceResult:
        op = "load_by_id"
        try:
            details = self._load(node_id)
        except _NodeMissing:
            return self._failure(op, ErrorCode.NOT_FOUND, f"No node with id {node_id}", id=node_id)
        except STORE_ERRORS as exc:
            return self._store_fault(op, exc, id=node_id)
        return ServiceResult(ok=True, op=op, data={"details": details})

    def load_by_parent_and_name(self, parent_id: int, name: str) -> ServiceResult:
        op = "load_by_parent_and_name"
        try:
            row = self._facade.store.find_child(parent_id, name)
            if row is None:
                return self._failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"No node named '{name}' under parent {parent_id}",
                    parent_id=parent_id,
                    name=name,
                )
            details = self._load(row["data_id"])
        except _NodeMissing as exc:
            return self._failure(
                op, ErrorCode.NOT_FOUND, f"No node with id {exc.node_id}", id=exc.node_id
            )
        except STORE_ERRORS as exc:
            return self._store_fault(op, exc, parent_id=parent_id, name=name)
        return ServiceResult(ok=True, op=op, data={"details": details})

    def load_by_path(self, path: str | Iterable[str]) -> ServiceResult:
        """Resolve *path* and load the full details of its last node."""
        op = "load_by_path"
        resolved = PathService(self._facade).resolve(path)
        if not resolved.ok:
            return resolved.model_copy(update={"op": op})
        node: NodeCoreDetails = resolved.data["node"]
        try:
            details = self._load(node.data_id)
        except _NodeMissing:
            return self._failure(
                op,
                ErrorCode.NOT_FOUND,
                f"Node {node.data_id} disappeared after resolution",
                id=node.data_id,
            )
        except STORE_ERRORS as exc:
            return self._store_fault(op, exc, id=node.data_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"path": resolved.data["path"], "details": details},
        )

    def load_children(self, details: NodeDetails) -> ServiceResult:
        """Load full details for every live child of *details*, ordered by name.

        Children are searched under the node's child parent id: the origin
        for an alias, the negative id for a volume, the node's own id
        otherwise.
        """
        op = "load_children"
        parent_id = details.core.child_parent_id
        try:
            children = [self._load(child_id) for child_id in self._facade.store.child_ids(parent_id)]
        except _NodeMissing as exc:
            return self._failure(
                op,
                ErrorCode.NOT_FOUND,
                f"Child {exc.node_id} of {details.core.data_id} could not be loaded",
                id=details.core.data_id,
                child_id=exc.node_id,
            )
        except STORE_ERRORS as exc:
            return self._store_fault(op, exc, id=details.core.data_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"parent_id": parent_id, "count": len(children), "children": children},
        )

    def evict(self, node_id: int) -> ServiceResult:
        """Drop *node_id* from the detail and projection caches."""
        evicted = self._facade.caches.evict_node(node_id)
        return ServiceResult(ok=True, op="evict", data={"id": node_id, "evicted": evicted})

    def _load(self, node_id: int) -> NodeDetails:
        cached = self._facade.caches.details.get(node_id)
        if cached is not None:
            return cached

        store = self._facade.store
        row = store.get_core(node_id)
        if row is None:
            raise _NodeMissing(node_id)
        details = NodeDetails(
            core=NodeCoreDetails.model_validate(row),
            versions=tuple(NodeVersionDetails.model_validate(v) for v in store.get_versions(node_id)),
            attributes=tuple(
                NodeAttributeDetails.model_validate(a) for a in store.get_attributes(node_id)
            ),
        )
        self._facade.caches.details.set(node_id, details)
        logger.debug("Loaded details for node %s", node_id)
        return details
