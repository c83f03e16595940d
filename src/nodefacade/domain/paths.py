"""Path normalization, first-segment expansion, and the resolution fold state.

Pure functions, no infrastructure dependencies. The path resolver folds
segments left to right over :class:`ResolutionState`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from nodefacade.domain.models import NodeCoreDetails
from nodefacade.domain.types import TOP_LEVEL_PARENT_ID

PATH_SEPARATOR = "/"


def split_path(path: str | Iterable[str]) -> list[str]:
    """Split a path into segments, dropping empty ones.

    Elements of a segment list are split on the separator too, so
    ``["a/b"]`` and ``["a", "b"]`` name the same node.

    Examples:
        >>> split_path("/Enterprise//Finance/")
        ['Enterprise', 'Finance']
        >>> split_path(["Enterprise", "", "Finance"])
        ['Enterprise', 'Finance']
        >>> split_path(["Enterprise/Finance", "Invoice"])
        ['Enterprise', 'Finance', 'Invoice']
    """
    items = [path] if isinstance(path, str) else path
    parts = [part for item in items for part in item.split(PATH_SEPARATOR)]
    return [part for part in parts if part]


def expand_segments(segments: list[str], expansions: Mapping[str, str]) -> list[str]:
    """Substitute the first segment using *expansions* (single level only).

    An expansion value may itself contain separators, in which case it
    contributes several canonical segments.

    Examples:
        >>> expand_segments(["ews", "Finance"], {"ews": "Enterprise/Projects"})
        ['Enterprise', 'Projects', 'Finance']
        >>> expand_segments(["Enterprise"], {"ews": "Enterprise"})
        ['Enterprise']
    """
    if not segments or segments[0] not in expansions:
        return list(segments)
    return split_path(expansions[segments[0]]) + segments[1:]


def join_path(segments: Iterable[str]) -> str:
    """Join segments into the normalized cache key form."""
    return PATH_SEPARATOR.join(segments)


@dataclass(frozen=True)
class ResolutionState:
    """Accumulator threaded through the segment-by-segment path walk."""

    parent_id: int = TOP_LEVEL_PARENT_ID
    key: str = ""
    resolved: tuple[NodeCoreDetails, ...] = ()

    @property
    def node(self) -> NodeCoreDetails | None:
        """The most recently resolved node, if any."""
        return self.resolved[-1] if self.resolved else None

    def prefix_key(self, segment: str) -> str:
        """Cache key for the prefix ending at *segment*."""
        return f"{self.key}{PATH_SEPARATOR}{segment}" if self.key else segment

    def advance(self, segment: str, details: NodeCoreDetails) -> ResolutionState:
        """Return the state after *segment* resolved to *details*."""
        return ResolutionState(
            parent_id=details.child_parent_id,
            key=self.prefix_key(segment),
            resolved=(*self.resolved, details),
        )
