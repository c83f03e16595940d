"""Render clause trees back to query text or to an indented debug tree."""

from __future__ import annotations

from typing import assert_never

from nodefacade.domain.query.ast import (
    AndClause,
    BooleanValue,
    Clause,
    DateValue,
    IntegerValue,
    OrClause,
    Predicate,
    StringValue,
    Value,
)
from nodefacade.domain.types import QUERY_DATE_FORMAT


def format_value(value: Value) -> str:
    """Render a literal the way the parser reads it."""
    match value:
        case StringValue(text):
            escaped = text.replace("\\", "\\\\").replace("'", "\\'")
            return f"'{escaped}'"
        case IntegerValue(number):
            return str(number)
        case DateValue(moment):
            return f"'{moment.strftime(QUERY_DATE_FORMAT)}'"
        case BooleanValue(flag):
            return "true" if flag else "false"
        case _:
            assert_never(value)


def to_query_text(clause: Clause) -> str:
    """Pretty-print *clause* as query text that re-parses to the same tree.

    Left operands are emitted bare (the grammar is left-associative);
    compound right operands are parenthesized.
    """
    match clause:
        case Predicate(path, comparator, value):
            return f"{path} {comparator.value} {format_value(value)}"
        case AndClause(left, right):
            return f"{to_query_text(left)} && {_operand(right)}"
        case OrClause(left, right):
            return f"{to_query_text(left)} || {_operand(right)}"
        case _:
            assert_never(clause)


def _operand(clause: Clause) -> str:
    if isinstance(clause, Predicate):
        return to_query_text(clause)
    return f"({to_query_text(clause)})"


def format_tree(clause: Clause, level: int = 0) -> str:
    """Indented, one-node-per-line dump of *clause* for diagnostics.

    Examples:
        >>> from nodefacade.domain.query.parser import parse_query
        >>> print(format_tree(parse_query("node.id == 1 && node.name == 'a'")), end="")
        And
          (node.id == 1)
          (node.name == 'a')
    """
    indent = "  " * level
    match clause:
        case Predicate():
            return f"{indent}({to_query_text(clause)})\n"
        case AndClause(left, right):
            return f"{indent}And\n{format_tree(left, level + 1)}{format_tree(right, level + 1)}"
        case OrClause(left, right):
            return f"{indent}Or\n{format_tree(left, level + 1)}{format_tree(right, level + 1)}"
        case _:
            assert_never(clause)
