"""Bounded worker pool dedicated to blocking store calls.

Every resolve/load/render/query issued through the CLI runs on this pool,
so at most ``pool_size`` store round trips are ever in flight and slow
queries never occupy the caller's thread budget.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class StorePool:
    """Fixed-size ThreadPoolExecutor wrapper.

    Parameters:
        max_workers: Upper bound on simultaneous in-flight calls.
    """

    def __init__(self, max_workers: int) -> None:
        if max_workers < 1:
            msg = f"Store pool needs at least one worker, got {max_workers}"
            raise ValueError(msg)
        self._max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="nodefacade-store",
        )

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def submit[**P, R](self, fn: Callable[P, R], /, *args: P.args, **kwargs: P.kwargs) -> Future[R]:
        """Schedule *fn* on the pool and return its future."""
        return self._executor.submit(fn, *args, **kwargs)

    def run[**P, R](self, fn: Callable[P, R], /, *args: P.args, **kwargs: P.kwargs) -> R:
        """Run *fn* on the pool and block until it returns."""
        return self.submit(fn, *args, **kwargs).result()

    def shutdown(self, *, wait: bool = True) -> None:
        logger.debug("Shutting down store pool (%d workers)", self._max_workers)
        self._executor.shutdown(wait=wait)
