"""Read repositories over the backing store."""

from nodefacade.infrastructure.repositories.nodes import NodeStore

__all__ = ["NodeStore"]
