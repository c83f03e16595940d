"""Query AST: attribute paths, typed literals, predicates and clauses.

A query is a binary tree: ``Clause`` is exactly one of :class:`Predicate`,
:class:`AndClause`, or :class:`OrClause`. Consumers match on the three
variants and fall through to ``assert_never``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from nodefacade.domain.types import CORE_NAMESPACE


class Comparator(StrEnum):
    """Comparison operators, valued by their query-text spelling."""

    EQ = "=="
    NEQ = "!="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="


@dataclass(frozen=True)
class AttributePath:
    """Dotted identifier: ``node.<field>`` or ``<category>.<attribute>``."""

    components: tuple[str, ...]

    @property
    def namespace(self) -> str:
        return self.components[0]

    @property
    def field(self) -> str:
        return self.components[1]

    @property
    def is_core(self) -> bool:
        return self.namespace == CORE_NAMESPACE

    def __str__(self) -> str:
        return ".".join(self.components)


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class IntegerValue:
    value: int


@dataclass(frozen=True)
class DateValue:
    value: datetime


@dataclass(frozen=True)
class BooleanValue:
    value: bool


Value = StringValue | IntegerValue | DateValue | BooleanValue


@dataclass(frozen=True)
class Predicate:
    """Atomic comparison between an attribute path and a literal."""

    path: AttributePath
    comparator: Comparator
    value: Value


@dataclass(frozen=True)
class AndClause:
    left: Clause
    right: Clause


@dataclass(frozen=True)
class OrClause:
    left: Clause
    right: Clause


Clause = Predicate | AndClause | OrClause
