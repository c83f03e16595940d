"""pyparsing grammar for the attribute query language.

Grammar::

    query      := clause ( ("&&" | "||") clause )*
    clause     := predicate | "(" query ")"
    predicate  := path comparator value
    path       := ident "." ident
    comparator := "==" | "!=" | "<" | "<=" | ">" | ">="
    value      := integer | "true" | "false" | 'quoted string'

``&&`` and ``||`` share one precedence level and associate to the left, so
``a || b && c`` parses as ``(a || b) && c``. Parenthesize to override.

A quoted string in ``dd/mm/yyyy`` form becomes a :class:`DateValue`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pyparsing as pp

from nodefacade.domain.query.ast import (
    AndClause,
    AttributePath,
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
from nodefacade.domain.types import QUERY_DATE_FORMAT


class QueryParseError(ValueError):
    """Malformed query text. No partial AST is produced."""

    def __init__(self, message: str, *, line: int, column: int) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


# Integer literals must fit a signed 64-bit store column.
INTEGER_MIN = -(2**63)
INTEGER_MAX = 2**63 - 1


def _integer(text: str, loc: int, tokens: pp.ParseResults) -> IntegerValue:
    number = int(tokens[0])
    if not INTEGER_MIN <= number <= INTEGER_MAX:
        raise pp.ParseFatalException(text, loc, f"Integer {tokens[0]} is out of range")
    return IntegerValue(number)


def _string_or_date(text: str) -> Value:
    try:
        return DateValue(datetime.strptime(text, QUERY_DATE_FORMAT))
    except ValueError:
        return StringValue(text)


def _path(tokens: pp.ParseResults) -> AttributePath:
    return AttributePath(tuple(part.strip() for part in tokens[0].split(".")))


def _fold_left(tokens: pp.ParseResults) -> Clause:
    operands: list[Any] = list(tokens[0])
    clause: Clause = operands[0]
    for operator, operand in zip(operands[1::2], operands[2::2], strict=True):
        clause = AndClause(clause, operand) if operator == "&&" else OrClause(clause, operand)
    return clause


def _build_grammar() -> pp.ParserElement:
    integer = pp.Regex(r"-?\d+").set_parse_action(_integer)
    boolean = (pp.Keyword("true") | pp.Keyword("false")).set_parse_action(
        lambda t: BooleanValue(t[0] == "true")
    )
    string = pp.QuotedString("'", esc_char="\\").set_parse_action(
        lambda t: _string_or_date(t[0])
    )
    value = integer | boolean | string

    comparator = pp.one_of("== != <= >= < >").set_parse_action(lambda t: Comparator(t[0]))
    path = pp.Regex(r"[\w ]+\.[\w ]+").set_parse_action(_path)

    predicate = (path + comparator + value).set_parse_action(
        lambda t: Predicate(t[0], t[1], t[2])
    )
    return pp.infix_notation(
        predicate,
        [(pp.one_of("&& ||"), 2, pp.OpAssoc.LEFT, _fold_left)],
    )


_GRAMMAR = _build_grammar()


def parse_query(text: str) -> Clause:
    """Parse *text* into a clause tree.

    Raises:
        QueryParseError: if *text* does not match the grammar in full.
    """
    try:
        parsed = _GRAMMAR.parse_string(text, parse_all=True)
    except pp.ParseBaseException as exc:
        raise QueryParseError(
            f"Invalid query at line {exc.lineno}, column {exc.col}: {exc.msg}",
            line=exc.lineno,
            column=exc.col,
        ) from exc
    return parsed[0]
