"""Compile query clause trees into set-combined SQLAlchemy statements.

Every predicate becomes a ``SELECT node_id`` fragment. ``AndClause`` and
``OrClause`` combine their operands with ``INTERSECT`` and ``UNION``; each
combination is wrapped in a derived table so compounds nest on every
dialect (SQLite rejects parenthesized compound members).

Values are always bound. Each predicate's value parameter is keyed by a
tag hashed from the predicate, so identical predicates share one
parameter. Core column names come only from :data:`CORE_COLUMNS`; category
and attribute names are matched against the ``Facade_Attributes`` view as
bound values.
"""

from __future__ import annotations

import hashlib
import operator
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, assert_never

import structlog
from sqlalchemy import (
    BindParameter,
    DateTime,
    Integer,
    Select,
    String,
    and_,
    bindparam,
    intersect,
    select,
    union,
)
from sqlalchemy.engine import Dialect
from sqlalchemy.sql.elements import ColumnElement

from nodefacade.domain.query.ast import (
    AndClause,
    BooleanValue,
    Clause,
    Comparator,
    DateValue,
    IntegerValue,
    OrClause,
    Predicate,
    StringValue,
    Value,
)
from nodefacade.domain.query.printer import to_query_text
from nodefacade.infrastructure.database.schema import (
    dtree_core,
    facade_attributes,
    ll_attr_data,
)

logger = structlog.get_logger(__name__)

# Lower-cased query field -> DTreeCore column name.
CORE_COLUMNS: dict[str, str] = {
    "id": "DataID",
    "dataid": "DataID",
    "parentid": "ParentID",
    "name": "Name",
    "ownerid": "OwnerID",
    "createdate": "CreateDate",
    "modifydate": "ModifyDate",
    "subtype": "SubType",
    "versionnum": "VersionNum",
}

RESULT_COLUMN = "node_id"

_OPERATORS: dict[Comparator, Callable[[Any, Any], ColumnElement[bool]]] = {
    Comparator.EQ: operator.eq,
    Comparator.NEQ: operator.ne,
    Comparator.LT: operator.lt,
    Comparator.LTE: operator.le,
    Comparator.GT: operator.gt,
    Comparator.GTE: operator.ge,
}


class UnsupportedColumnError(ValueError):
    """A ``node.<field>`` predicate names a column outside the allow-list."""

    def __init__(self, field_name: str, predicate: str) -> None:
        super().__init__(f"Unsupported core column '{field_name}' in '{predicate}'")
        self.field_name = field_name
        self.predicate = predicate


@dataclass(frozen=True)
class CompiledQuery:
    """Outcome of compiling one clause tree.

    Attributes:
        statement: Final ``SELECT node_id`` statement, or None when no
            predicate survived compilation (the query matches nothing).
        parameters: Value parameters keyed by predicate tag.
        warnings: Diagnostics for predicates that were dropped.
    """

    statement: Select[Any] | None
    parameters: dict[str, Any] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()

    @property
    def matches_nothing(self) -> bool:
        return self.statement is None

    def sql(self, dialect: Dialect | None = None) -> str:
        """Render the statement as SQL text with placeholders."""
        if self.statement is None:
            return ""
        return str(self.statement.compile(dialect=dialect))


def predicate_tag(predicate: Predicate) -> str:
    """Deterministic parameter key for *predicate*.

    Examples:
        >>> from nodefacade.domain.query.parser import parse_query
        >>> predicate_tag(parse_query("node.id == 1")) == predicate_tag(parse_query("node.id==1"))
        True
    """
    value = predicate.value
    material = "|".join(
        (str(predicate.path), predicate.comparator.value, type(value).__name__, str(value.value))
    )
    return "p_" + hashlib.sha256(material.encode("utf-8")).hexdigest()[:12]


@dataclass
class _Compilation:
    """Mutable per-call state: bound parameters and dropped-predicate notes."""

    strict: bool
    params: dict[str, BindParameter[Any]] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def bind(self, predicate: Predicate) -> BindParameter[Any]:
        tag = predicate_tag(predicate)
        if tag not in self.params:
            raw, type_ = _bind_value(predicate.value)
            self.params[tag] = bindparam(tag, value=raw, type_=type_)
        return self.params[tag]


def _bind_value(value: Value) -> tuple[Any, Any]:
    match value:
        case StringValue(text):
            return text, String()
        case IntegerValue(number):
            return number, Integer()
        case DateValue(moment):
            return moment, DateTime()
        case BooleanValue(flag):
            return int(flag), Integer()
        case _:
            assert_never(value)


def _value_column(value: Value) -> str:
    """LLAttrData slot compared against *value*."""
    match value:
        case StringValue():
            return "ValStr"
        case IntegerValue() | BooleanValue():
            return "ValInt"
        case DateValue():
            return "ValDate"
        case _:
            assert_never(value)


class QueryCompiler:
    """Turns clause trees into executable statements.

    Parameters:
        strict_columns: Raise :class:`UnsupportedColumnError` for an unknown
            core field instead of dropping the predicate with a warning.
    """

    def __init__(self, *, strict_columns: bool = False) -> None:
        self._strict = strict_columns

    def compile(self, clause: Clause) -> CompiledQuery:
        state = _Compilation(strict=self._strict)
        fragment = self._fragment(clause, state)
        if fragment is None:
            return CompiledQuery(statement=None, warnings=tuple(state.warnings))

        matches = fragment.subquery("matches")
        statement = (
            select(matches.c[RESULT_COLUMN]).distinct().order_by(matches.c[RESULT_COLUMN])
        )
        return CompiledQuery(
            statement=statement,
            parameters={tag: param.value for tag, param in state.params.items()},
            warnings=tuple(state.warnings),
        )

    def _fragment(self, clause: Clause, state: _Compilation) -> Select[Any] | None:
        match clause:
            case Predicate():
                return self._predicate(clause, state)
            case AndClause(left, right):
                return self._combine(
                    intersect, self._fragment(left, state), self._fragment(right, state)
                )
            case OrClause(left, right):
                return self._combine(
                    union, self._fragment(left, state), self._fragment(right, state)
                )
            case _:
                assert_never(clause)

    @staticmethod
    def _combine(
        combinator: Callable[..., Any],
        left: Select[Any] | None,
        right: Select[Any] | None,
    ) -> Select[Any] | None:
        # A dropped operand leaves its sibling standing alone.
        if left is None:
            return right
        if right is None:
            return left
        combined = combinator(left, right).subquery()
        return select(combined.c[RESULT_COLUMN])

    def _predicate(self, predicate: Predicate, state: _Compilation) -> Select[Any] | None:
        if predicate.path.is_core:
            return self._core_predicate(predicate, state)
        return self._attribute_predicate(predicate, state)

    def _core_predicate(self, predicate: Predicate, state: _Compilation) -> Select[Any] | None:
        column_name = CORE_COLUMNS.get(predicate.path.field.lower())
        if column_name is None:
            text = to_query_text(predicate)
            if state.strict:
                raise UnsupportedColumnError(predicate.path.field, text)
            warning = f"Unsupported core column '{predicate.path.field}' ignored in '{text}'"
            logger.warning("unsupported_column", field=predicate.path.field, predicate=text)
            state.warnings.append(warning)
            return None

        compare = _OPERATORS[predicate.comparator]
        column = dtree_core.c[column_name]
        return select(dtree_core.c.DataID.label(RESULT_COLUMN)).where(
            compare(column, state.bind(predicate)),
            dtree_core.c.Deleted == 0,
        )

    def _attribute_predicate(self, predicate: Predicate, state: _Compilation) -> Select[Any]:
        node = dtree_core.alias("a")
        value = ll_attr_data.alias("b")
        definition = (
            select(
                facade_attributes.c.CategoryId,
                facade_attributes.c.CategoryVersion,
                facade_attributes.c.AttributeIndex,
            )
            .where(
                facade_attributes.c.Attribute == predicate.path.field,
                facade_attributes.c.Category == predicate.path.namespace,
            )
            .subquery("sq")
        )
        joined = node.join(
            value,
            and_(node.c.DataID == value.c.ID, node.c.VersionNum == value.c.VerNum),
        ).join(
            definition,
            and_(
                value.c.DefID == definition.c.CategoryId,
                value.c.DefVerN == definition.c.CategoryVersion,
                value.c.AttrID == definition.c.AttributeIndex,
            ),
        )
        compare = _OPERATORS[predicate.comparator]
        slot = value.c[_value_column(predicate.value)]
        return (
            select(node.c.DataID.label(RESULT_COLUMN))
            .select_from(joined)
            .where(compare(slot, state.bind(predicate)), node.c.Deleted == 0)
        )
