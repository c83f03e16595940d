"""Boolean attribute query language: AST, parser, and printer."""

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
from nodefacade.domain.query.parser import QueryParseError, parse_query
from nodefacade.domain.query.printer import format_tree, to_query_text

__all__ = [
    "AndClause",
    "AttributePath",
    "BooleanValue",
    "Clause",
    "Comparator",
    "DateValue",
    "IntegerValue",
    "OrClause",
    "Predicate",
    "QueryParseError",
    "StringValue",
    "Value",
    "format_tree",
    "parse_query",
    "to_query_text",
]
