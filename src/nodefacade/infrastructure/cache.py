"""TTL-only caches for resolved paths, node details, and rendered projections.

Each namespace is a plain dict of ``key -> (value, expires_at)`` behind a
lock. Expiry is checked lazily on read; there is no background sweep and no
size bound. Entries are immutable once written and the last writer wins.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from nodefacade.config.models import CacheConfig
    from nodefacade.domain.models import NodeCoreDetails, NodeDetails

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Entry:
    value: Any
    expires_at: float


class TTLCache[K: Hashable, V]:
    """Thread-safe map whose entries expire *ttl* seconds after being written.

    Parameters:
        name: Namespace label used in logs and stats.
        ttl: Lifetime of each entry in seconds.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        name: str,
        ttl: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            msg = f"Cache '{name}' needs a positive ttl, got {ttl}"
            raise ValueError(msg)
        self.name = name
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[K, _Entry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: K) -> V | None:
        """Return the live value for *key*, dropping it if it has expired."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at <= now:
                del self._entries[key]
                entry = None
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, key: K, value: V) -> None:
        expires_at = self._clock() + self.ttl
        with self._lock:
            self._entries[key] = _Entry(value, expires_at)

    def evict(self, key: K) -> bool:
        """Remove *key*. Returns True if an entry was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[call-overload]
            return entry is not None and entry.expires_at > now

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "ttl": self.ttl,
            }


class CacheLayer:
    """The three independent cache namespaces used by the services.

    Attributes:
        paths: Joined path prefix -> :class:`NodeCoreDetails`.
        details: Node id -> :class:`NodeDetails`.
        renditions: Node id -> JSON text of the single-node projection.
    """

    def __init__(
        self,
        *,
        path_ttl: float,
        detail_ttl: float,
        rendition_ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.paths: TTLCache[str, NodeCoreDetails] = TTLCache("paths", path_ttl, clock=clock)
        self.details: TTLCache[int, NodeDetails] = TTLCache("details", detail_ttl, clock=clock)
        self.renditions: TTLCache[int, str] = TTLCache("renditions", rendition_ttl, clock=clock)

    @classmethod
    def from_config(
        cls,
        config: CacheConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> CacheLayer:
        return cls(
            path_ttl=config.path_ttl,
            detail_ttl=config.detail_ttl,
            rendition_ttl=config.rendition_ttl,
            clock=clock,
        )

    def evict_node(self, node_id: int) -> bool:
        """Drop *node_id* from the detail and projection caches.

        The path cache is never evicted here; resolved prefixes age out by TTL.
        """
        evicted_details = self.details.evict(node_id)
        evicted_rendition = self.renditions.evict(node_id)
        logger.debug("Evicted node %s from detail/rendition caches", node_id)
        return evicted_details or evicted_rendition

    def clear(self) -> None:
        for cache in (self.paths, self.details, self.renditions):
            cache.clear()

    def stats(self) -> dict[str, dict[str, Any]]:
        return {cache.name: cache.stats() for cache in (self.paths, self.details, self.renditions)}
